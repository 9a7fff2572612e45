"""Swarm: the glowworm population and its per-step phases."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from glowdock.data.io import CHECKPOINT_HEADER, format_checkpoint_line
from glowdock.data.structs import GlowwormParameters
from glowdock.scoring.base import ScoringFunction
from glowdock.search.glowworm import Glowworm
from glowdock.utils.geometry import pairwise_dist
from glowdock.utils.quaternion import Quaternion

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwarmSnapshot:
    """Poses of every glowworm at the start of a movement phase."""

    translations: np.ndarray
    rotations: tuple
    anm_recs: tuple
    anm_ligs: tuple


class Swarm:
    """Ordered glowworm population; ``glowworms[i].id == i`` always holds."""

    def __init__(self) -> None:
        self.glowworms: List[Glowworm] = []

    def __len__(self) -> int:
        return len(self.glowworms)

    def add_glowworms(
        self,
        positions: Sequence[Sequence[float]],
        scoring: ScoringFunction,
        use_anm: bool = False,
        rec_num_anm: int = 0,
        lig_num_anm: int = 0,
        parameters: Optional[GlowwormParameters] = None,
    ) -> None:
        """Create one glowworm per position vector.

        Columns: [0:3] translation, [3:7] quaternion (w, x, y, z), then
        ``rec_num_anm`` receptor mode coefficients and the ligand ones.
        """

        for position in positions:
            position = np.asarray(position, dtype=float)
            translation = position[0:3]
            rotation = Quaternion.from_components(position[3:7])
            rec_nmodes = np.zeros(0, dtype=float)
            if use_anm and rec_num_anm > 0:
                rec_nmodes = position[7 : 7 + rec_num_anm]
            lig_nmodes = np.zeros(0, dtype=float)
            if use_anm and lig_num_anm > 0:
                lig_nmodes = position[7 + rec_num_anm :]
            glowworm = Glowworm(
                len(self.glowworms),
                translation,
                rotation,
                rec_nmodes,
                lig_nmodes,
                scoring,
                use_anm=use_anm,
                parameters=parameters,
            )
            self.glowworms.append(glowworm)

    def luciferins(self) -> np.ndarray:
        return np.array([glowworm.luciferin for glowworm in self.glowworms], dtype=float)

    def update_luciferin(self) -> None:
        for glowworm in self.glowworms:
            glowworm.compute_luciferin()

    def snapshot(self) -> SwarmSnapshot:
        """Copy every pose so moves in this phase only read pre-phase state."""

        return SwarmSnapshot(
            translations=np.array([g.translation for g in self.glowworms], dtype=float).reshape(-1, 3),
            rotations=tuple(g.rotation.copy() for g in self.glowworms),
            anm_recs=tuple(g.rec_nmodes.copy() for g in self.glowworms),
            anm_ligs=tuple(g.lig_nmodes.copy() for g in self.glowworms),
        )

    def find_neighbors(self, snapshot: SwarmSnapshot) -> List[List[int]]:
        """All-pairs neighbor search: brighter glowworms inside the vision range."""

        luciferins = self.luciferins()
        vision_ranges = np.array([g.vision_range for g in self.glowworms], dtype=float)
        distances = pairwise_dist(snapshot.translations, snapshot.translations)
        brighter = luciferins[:, None] < luciferins[None, :]
        visible = distances < vision_ranges[:, None]
        mask = brighter & visible
        np.fill_diagonal(mask, False)
        return [np.flatnonzero(row).tolist() for row in mask]

    def movement_phase(self, rng: np.random.Generator) -> None:
        """Neighbor search, probability update and one move per glowworm.

        One uniform draw per glowworm, in index order.
        """

        snapshot = self.snapshot()
        neighbors = self.find_neighbors(snapshot)

        luciferins = self.luciferins()
        for glowworm, glowworm_neighbors in zip(self.glowworms, neighbors):
            glowworm.neighbors = glowworm_neighbors
            glowworm.compute_probability_moving_toward_neighbor(luciferins)

        for glowworm in self.glowworms:
            neighbor_id = glowworm.select_random_neighbor(float(rng.random()))
            glowworm.move_towards(
                neighbor_id,
                snapshot.translations[neighbor_id],
                snapshot.rotations[neighbor_id],
                snapshot.anm_recs[neighbor_id],
                snapshot.anm_ligs[neighbor_id],
            )
            glowworm.update_vision_range()

    def save(self, step: int, out_dir: str = ".") -> str:
        """Write ``gso_<step>.out`` with one record per glowworm."""

        path = os.path.join(out_dir, f"gso_{step}.out")
        with open(path, "w", encoding="ascii") as handle:
            handle.write(CHECKPOINT_HEADER + "\n")
            for glowworm in self.glowworms:
                rec_nmodes = glowworm.rec_nmodes if glowworm.use_anm else ()
                lig_nmodes = glowworm.lig_nmodes if glowworm.use_anm else ()
                line = format_checkpoint_line(
                    glowworm.translation,
                    glowworm.rotation.components(),
                    rec_nmodes,
                    lig_nmodes,
                    glowworm.luciferin,
                    len(glowworm.neighbors),
                    glowworm.vision_range,
                    glowworm.scoring,
                )
                handle.write(line + "\n")
        LOGGER.debug("Saved checkpoint %s", path)
        return path
