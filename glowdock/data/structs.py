"""Core data structures for glowdock."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np


@dataclass
class PDBAtom:
    """Single atom record read from a structure file."""

    record: str
    name: str
    resname: str
    chain: str
    resnum: int
    icode: str
    coords: np.ndarray
    element: str = ""

    @property
    def residue_id(self) -> str:
        """Restraint identifier ``chain.resname.resnum[icode]``."""

        return f"{self.chain}.{self.resname}.{self.resnum}{self.icode}"


@dataclass
class DockingModel:
    """Static per-molecule data consumed by the scoring functions.

    ``nmodes`` is flattened mode-major: index = mode * num_atoms * 3 + atom * 3 + axis.
    Arrays are made read-only since one model is shared by every glowworm.
    """

    atoms: np.ndarray
    coordinates: np.ndarray
    membrane: List[int] = field(default_factory=list)
    active_restraints: Dict[str, List[int]] = field(default_factory=dict)
    passive_restraints: Dict[str, List[int]] = field(default_factory=dict)
    nmodes: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=float))
    num_anm: int = 0

    def __post_init__(self) -> None:
        self.atoms = np.array(self.atoms, dtype=int).reshape(-1)
        self.coordinates = np.array(self.coordinates, dtype=float).reshape(-1, 3)
        self.nmodes = np.array(self.nmodes, dtype=float).reshape(-1)
        self.num_anm = int(self.num_anm)
        if self.atoms.shape[0] != self.coordinates.shape[0]:
            raise ValueError(
                f"Atom type count ({self.atoms.shape[0]}) does not match "
                f"coordinate count ({self.coordinates.shape[0]})"
            )
        if self.num_anm > 0:
            expected = self.num_anm * self.num_atoms * 3
            if self.nmodes.shape[0] != expected:
                raise ValueError(
                    f"Number of ANM values ({self.nmodes.shape[0]}) does not correspond to "
                    f"{self.num_atoms} atoms x 3 x {self.num_anm} modes"
                )
        for array in (self.atoms, self.coordinates, self.nmodes):
            array.flags.writeable = False

    @property
    def num_atoms(self) -> int:
        return int(self.coordinates.shape[0])

    def modes(self) -> np.ndarray:
        """Mode displacement vectors as ``(num_anm, num_atoms, 3)``."""

        return self.nmodes.reshape(self.num_anm, self.num_atoms, 3)


@dataclass
class GlowwormParameters:
    """GSO tuning parameters shared by every glowworm of a swarm."""

    rho: float = 0.5
    gamma: float = 0.4
    beta: float = 0.08
    initial_luciferin: float = 5.0
    initial_vision_range: float = 0.2
    max_vision_range: float = 5.0
    max_neighbors: int = 5
