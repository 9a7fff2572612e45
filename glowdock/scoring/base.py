"""Scoring contract shared by every energy model.

A scoring function owns the receptor and ligand docking models and turns a
pose (translation, rotation and optional normal-mode coefficients) into a
scalar energy. Subclasses only provide the pairwise term; pose application
and the restraint/membrane bias are implemented once here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from glowdock.constants import CONTACT_CUTOFF2, MEMBRANE_PENALTY_SCORE
from glowdock.data.structs import DockingModel
from glowdock.utils.geometry import apply_modes, pairwise_sq_dist
from glowdock.utils.quaternion import Quaternion


def satisfied_restraints(interface: np.ndarray, restraints: Dict[str, List[int]]) -> float:
    """Fraction of restraint residues with at least one interface atom."""

    if not restraints:
        return 0.0
    satisfied = 0
    for atom_indexes in restraints.values():
        if any(interface[i] == 1 for i in atom_indexes):
            satisfied += 1
    return satisfied / len(restraints)


def membrane_intersection(interface: np.ndarray, membrane: Sequence[int]) -> float:
    """Fraction of membrane beads flagged as interface."""

    if len(membrane) == 0:
        return 0.0
    num_beads = sum(int(interface[i]) for i in membrane)
    return num_beads / len(membrane)


def bias_score(
    score: float,
    interface_receptor: np.ndarray,
    interface_ligand: np.ndarray,
    receptor: DockingModel,
    ligand: DockingModel,
) -> float:
    """Bias a raw energy by satisfied restraints and membrane intersection."""

    perc_receptor_restraints = satisfied_restraints(interface_receptor, receptor.active_restraints)
    perc_ligand_restraints = satisfied_restraints(interface_ligand, ligand.active_restraints)
    membrane_penalty = 0.0
    intersection = membrane_intersection(interface_receptor, receptor.membrane)
    if intersection > 0.0:
        membrane_penalty = MEMBRANE_PENALTY_SCORE * intersection
    return (
        score
        + perc_receptor_restraints * score
        + perc_ligand_restraints * score
        - membrane_penalty
    )


class ScoringFunction(ABC):
    """Energy model evaluated at a rigid-body pose."""

    name = "base"

    def __init__(self, receptor: DockingModel, ligand: DockingModel, use_anm: bool = False) -> None:
        self.receptor = receptor
        self.ligand = ligand
        self.use_anm = bool(use_anm)
        self._rec_modes = receptor.modes() if receptor.num_anm > 0 else None
        self._lig_modes = ligand.modes() if ligand.num_anm > 0 else None

    @staticmethod
    def atom_type(resname: str, atom_name: str) -> int:
        """Atom type code used by this model's pairwise term."""

        return 0

    def receptor_coordinates(self, rec_nmodes: Optional[Sequence[float]] = None) -> np.ndarray:
        """Receptor coordinates deformed by ANM only (it is the fixed frame)."""

        coords = self.receptor.coordinates
        if self.use_anm and self._rec_modes is not None and rec_nmodes is not None:
            return apply_modes(coords, self._rec_modes, np.asarray(rec_nmodes, dtype=float))
        return np.array(coords, dtype=float, copy=True)

    def ligand_coordinates(
        self,
        translation: Sequence[float],
        rotation: Quaternion,
        lig_nmodes: Optional[Sequence[float]] = None,
    ) -> np.ndarray:
        """Ligand coordinates rotated, then translated, then deformed by ANM."""

        coords = rotation.rotate_coordinates(self.ligand.coordinates)
        coords = coords + np.asarray(translation, dtype=float).reshape(1, 3)
        if self.use_anm and self._lig_modes is not None and lig_nmodes is not None:
            coords = apply_modes(coords, self._lig_modes, np.asarray(lig_nmodes, dtype=float))
        return coords

    @staticmethod
    def contacts(
        receptor_coords: np.ndarray, ligand_coords: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Receptor/ligand index pairs within the 15 A cutoff and their squared distances."""

        if receptor_coords.shape[0] == 0 or ligand_coords.shape[0] == 0:
            empty = np.zeros(0, dtype=int)
            return empty, empty, np.zeros(0, dtype=float)
        dist2 = pairwise_sq_dist(receptor_coords, ligand_coords)
        rows, cols = np.nonzero(dist2 <= CONTACT_CUTOFF2)
        return rows, cols, dist2[rows, cols]

    @abstractmethod
    def pairwise_energy(
        self, receptor_coords: np.ndarray, ligand_coords: np.ndarray
    ) -> Tuple[float, np.ndarray, np.ndarray]:
        """Return (raw score, receptor interface flags, ligand interface flags)."""

    def energy(
        self,
        translation: Sequence[float],
        rotation: Quaternion,
        rec_nmodes: Optional[Sequence[float]] = None,
        lig_nmodes: Optional[Sequence[float]] = None,
    ) -> float:
        """Biased energy of the given pose."""

        receptor_coords = self.receptor_coordinates(rec_nmodes)
        ligand_coords = self.ligand_coordinates(translation, rotation, lig_nmodes)
        score, interface_receptor, interface_ligand = self.pairwise_energy(
            receptor_coords, ligand_coords
        )
        return bias_score(float(score), interface_receptor, interface_ligand, self.receptor, self.ligand)
