"""Glowworm Swarm Optimization driver."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

import numpy as np

from glowdock.constants import DEFAULT_SAVE_EVERY
from glowdock.data.structs import GlowwormParameters
from glowdock.pipeline.logging import RunLogger
from glowdock.scoring.base import ScoringFunction
from glowdock.search.engine import OptimizationEngine
from glowdock.search.swarm import Swarm
from glowdock.utils.debug_logger import DebugLogger

LOGGER = logging.getLogger(__name__)


class GSO(OptimizationEngine):
    """Owns the swarm and the seeded generator; runs the fixed-step main loop."""

    def __init__(
        self,
        positions: Sequence[Sequence[float]],
        seed: int,
        scoring: ScoringFunction,
        use_anm: bool = False,
        rec_num_anm: int = 0,
        lig_num_anm: int = 0,
        output_directory: str = ".",
        parameters: Optional[GlowwormParameters] = None,
        save_every: int = DEFAULT_SAVE_EVERY,
        run_logger: Optional[RunLogger] = None,
        debug_logger: Optional[DebugLogger] = None,
    ) -> None:
        self.swarm = Swarm()
        self.rng = np.random.default_rng(seed)
        self.seed = seed
        self.output_directory = output_directory
        self.save_every = max(1, int(save_every))
        self.run_logger = run_logger
        self.debug_logger = debug_logger
        self.swarm.add_glowworms(positions, scoring, use_anm, rec_num_anm, lig_num_anm, parameters)

    def should_save(self, step: int) -> bool:
        return step == 1 or step % self.save_every == 0

    def step_metrics(self) -> Dict[str, float]:
        glowworms = self.swarm.glowworms
        if not glowworms:
            return {}
        scorings = np.array([g.scoring for g in glowworms], dtype=float)
        return {
            "best_luciferin": float(self.swarm.luciferins().max()),
            "best_scoring": float(scorings.max()),
            "mean_scoring": float(scorings.mean()),
            "mean_vision_range": float(np.mean([g.vision_range for g in glowworms])),
            "mean_neighbors": float(np.mean([len(g.neighbors) for g in glowworms])),
            "moved_glowworms": float(sum(1 for g in glowworms if g.moved)),
        }

    def run(self, steps: int) -> None:
        if steps <= 0:
            raise ValueError(f"Number of steps must be positive, got {steps}")
        if self.debug_logger is not None:
            self.debug_logger.log(
                {
                    "type": "gso_start",
                    "glowworms": len(self.swarm),
                    "steps": int(steps),
                    "seed": int(self.seed),
                }
            )

        for step in range(1, steps + 1):
            LOGGER.info("Step %d", step)
            self.swarm.update_luciferin()
            self.swarm.movement_phase(self.rng)
            if self.run_logger is not None:
                self.run_logger.log_step(step, self.step_metrics())
            if self.should_save(step):
                path = self.swarm.save(step, self.output_directory)
                if self.debug_logger is not None:
                    self.debug_logger.log({"type": "checkpoint_saved", "step": step, "path": path})

        if self.debug_logger is not None:
            self.debug_logger.log({"type": "gso_finished", "steps": int(steps)})
