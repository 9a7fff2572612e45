"""Glowworm: one candidate docking pose and its GSO state."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

import numpy as np

from glowdock.constants import DEFAULT_NMODES_STEP, DEFAULT_ROTATION_STEP, DEFAULT_TRANSLATION_STEP
from glowdock.data.structs import GlowwormParameters
from glowdock.scoring.base import ScoringFunction
from glowdock.utils.geometry import step_towards
from glowdock.utils.quaternion import Quaternion


class Glowworm:
    """Glowworm agent.

    Each step runs two phases: :meth:`compute_luciferin` refreshes the
    fitness signal and the swarm's movement phase fills ``neighbors`` and
    ``probabilities`` before calling :meth:`move_towards` and
    :meth:`update_vision_range`.
    """

    def __init__(
        self,
        glowworm_id: int,
        translation: Sequence[float],
        rotation: Quaternion,
        rec_nmodes: Sequence[float],
        lig_nmodes: Sequence[float],
        scoring_function: ScoringFunction,
        use_anm: bool = False,
        parameters: Optional[GlowwormParameters] = None,
    ) -> None:
        params = parameters or GlowwormParameters()
        self.id = int(glowworm_id)
        self.translation = np.array(translation, dtype=float)
        self.rotation = rotation
        self.rec_nmodes = np.array(rec_nmodes, dtype=float)
        self.lig_nmodes = np.array(lig_nmodes, dtype=float)
        self.scoring_function = scoring_function
        self.use_anm = bool(use_anm)
        self.rho = params.rho
        self.gamma = params.gamma
        self.beta = params.beta
        self.luciferin = params.initial_luciferin
        self.vision_range = params.initial_vision_range
        self.max_vision_range = params.max_vision_range
        self.max_neighbors = params.max_neighbors
        self.neighbors: List[int] = []
        self.probabilities: List[float] = []
        self.scoring = 0.0
        self.moved = False
        self.step = 0

    def compute_luciferin(self) -> None:
        """Decay luciferin and inject the current fitness.

        The energy is only re-evaluated on the first step or after a move,
        since an unchanged pose has an unchanged energy.
        """

        if self.moved or self.step == 0:
            self.scoring = float(
                self.scoring_function.energy(
                    self.translation, self.rotation, self.rec_nmodes, self.lig_nmodes
                )
            )
        self.luciferin = (1.0 - self.rho) * self.luciferin + self.gamma * self.scoring
        self.step += 1

    def distance(self, other: "Glowworm") -> float:
        delta = self.translation - other.translation
        return math.sqrt(float(np.sum(delta * delta)))

    def is_neighbor(self, other: "Glowworm") -> bool:
        if self.id != other.id and self.luciferin < other.luciferin:
            return self.distance(other) < self.vision_range
        return False

    def update_vision_range(self) -> None:
        expanded = self.vision_range + self.beta * (self.max_neighbors - len(self.neighbors))
        self.vision_range = min(self.max_vision_range, max(0.0, expanded))

    def compute_probability_moving_toward_neighbor(self, luciferins: Sequence[float]) -> None:
        differences = [luciferins[neighbor_id] - self.luciferin for neighbor_id in self.neighbors]
        total = sum(differences)
        self.probabilities = [difference / total for difference in differences]

    def select_random_neighbor(self, random_number: float) -> int:
        """Pick a neighbor by inverse-CDF sampling, or stay (own id) if alone."""

        if not self.neighbors:
            return self.id
        cumulative = 0.0
        for neighbor_id, probability in zip(self.neighbors, self.probabilities):
            cumulative += probability
            if cumulative >= random_number:
                return neighbor_id
        return self.neighbors[-1]

    def move_towards(
        self,
        other_id: int,
        other_position: Sequence[float],
        other_rotation: Quaternion,
        other_anm_rec: Sequence[float],
        other_anm_lig: Sequence[float],
    ) -> None:
        """Step toward another glowworm's pose.

        Translation and mode coefficients advance a fixed distance along the
        direction to the target; a component already at the target stays put.
        """

        self.moved = self.id != other_id
        if not self.moved:
            return

        self.translation = step_towards(self.translation, other_position, DEFAULT_TRANSLATION_STEP)
        self.rotation = self.rotation.slerp(other_rotation, DEFAULT_ROTATION_STEP)

        if self.use_anm and self.rec_nmodes.size > 0:
            self.rec_nmodes = step_towards(self.rec_nmodes, other_anm_rec, DEFAULT_NMODES_STEP)
        if self.use_anm and self.lig_nmodes.size > 0:
            self.lig_nmodes = step_towards(self.lig_nmodes, other_anm_lig, DEFAULT_NMODES_STEP)

    def __repr__(self) -> str:
        return (
            f"Glowworm(id={self.id}, luciferin={self.luciferin:.4f}, "
            f"vision_range={self.vision_range:.3f}, neighbors={len(self.neighbors)})"
        )
