"""DNA scoring placeholder."""

from __future__ import annotations

from typing import Tuple

import numpy as np

from glowdock.constants import INTERFACE_CUTOFF2
from glowdock.scoring.base import ScoringFunction


class DNA(ScoringFunction):
    """Interface-only model: no pairwise term yet, bias terms still apply.

    Interface atoms are still marked (pairs closer than the interface cutoff),
    so membrane intersection is penalized like in every other model. With a
    zero raw score the restraint bias vanishes and the returned energy is the
    membrane penalty alone, not a constant 0.0.
    """

    name = "dna"

    def pairwise_energy(
        self, receptor_coords: np.ndarray, ligand_coords: np.ndarray
    ) -> Tuple[float, np.ndarray, np.ndarray]:
        interface_receptor = np.zeros(receptor_coords.shape[0], dtype=int)
        interface_ligand = np.zeros(ligand_coords.shape[0], dtype=int)
        rows, cols, dist2 = self.contacts(receptor_coords, ligand_coords)
        in_interface = dist2 <= INTERFACE_CUTOFF2
        interface_receptor[rows[in_interface]] = 1
        interface_ligand[cols[in_interface]] = 1
        return 0.0, interface_receptor, interface_ligand
