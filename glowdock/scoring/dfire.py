"""DFIRE statistical potential."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from glowdock.constants import INTERFACE_CUTOFF
from glowdock.data.structs import DockingModel
from glowdock.scoring.base import ScoringFunction

LOGGER = logging.getLogger(__name__)

NUM_ATOM_TYPES = 168
NUM_BINS = 20
PARAMETERS_FILE = "DCparams"
DATA_ENV_VAR = "GLOWDOCK_DATA"

# Atom names per residue, in DFIRE atom order
RESIDUE_ATOMS = {
    "ALA": ("N", "CA", "C", "O", "CB"),
    "CYS": ("N", "CA", "C", "O", "CB", "SG"),
    "ASP": ("N", "CA", "C", "O", "CB", "CG", "OD1", "OD2"),
    "GLU": ("N", "CA", "C", "O", "CB", "CG", "CD", "OE1", "OE2"),
    "PHE": ("N", "CA", "C", "O", "CB", "CG", "CD1", "CD2", "CE1", "CE2", "CZ"),
    "GLY": ("N", "CA", "C", "O"),
    "HIS": ("N", "CA", "C", "O", "CB", "CG", "ND1", "CD2", "CE1", "NE2"),
    "ILE": ("N", "CA", "C", "O", "CB", "CG1", "CG2", "CD1"),
    "LYS": ("N", "CA", "C", "O", "CB", "CG", "CD", "CE", "NZ"),
    "LEU": ("N", "CA", "C", "O", "CB", "CG", "CD1", "CD2"),
    "MET": ("N", "CA", "C", "O", "CB", "CG", "SD", "CE"),
    "ASN": ("N", "CA", "C", "O", "CB", "CG", "OD1", "ND2"),
    "PRO": ("N", "CA", "C", "O", "CB", "CG", "CD"),
    "GLN": ("N", "CA", "C", "O", "CB", "CG", "CD", "OE1", "NE2"),
    "ARG": ("N", "CA", "C", "O", "CB", "CG", "CD", "NE", "CZ", "NH1", "NH2"),
    "SER": ("N", "CA", "C", "O", "CB", "OG"),
    "THR": ("N", "CA", "C", "O", "CB", "OG1", "CG2"),
    "VAL": ("N", "CA", "C", "O", "CB", "CG1", "CG2"),
    "TRP": ("N", "CA", "C", "O", "CB", "CG", "CD1", "CD2", "CE2", "NE1", "CE3", "CZ3", "CH2", "CZ2"),
    "TYR": ("N", "CA", "C", "O", "CB", "CG", "CD1", "CD2", "CE1", "CE2", "CZ", "OH"),
    "MMB": ("BJ",),
}

# First DFIRE atom type of each residue; atoms of a residue are consecutive
RESIDUE_TYPE_OFFSETS = {
    "CYS": 0,
    "MET": 6,
    "PHE": 14,
    "ILE": 25,
    "LEU": 33,
    "VAL": 41,
    "TRP": 48,
    "TYR": 62,
    "ALA": 74,
    "GLY": 79,
    "THR": 83,
    "SER": 90,
    "GLN": 96,
    "ASN": 105,
    "GLU": 113,
    "ASP": 122,
    "HIS": 130,
    "ARG": 140,
    "LYS": 151,
    "PRO": 160,
    "MMB": 167,
}

# Half-angstrom distance slot -> DFIRE bin (1-based)
DIST_TO_BINS = np.array(
    [
        1, 1, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 14, 15, 15,
        16, 16, 17, 17, 18, 18, 19, 19, 20, 20, 21, 21, 22, 22, 23, 23,
        24, 24, 25, 25, 26, 26, 27, 27, 28, 28, 29, 29, 30, 30, 31,
    ],
    dtype=int,
)


def dfire_atom_type(resname: str, atom_name: str) -> int:
    """Translate a residue/atom name pair into a DFIRE atom type."""

    residue = resname.strip().upper()
    if residue not in RESIDUE_ATOMS:
        raise ValueError(f"Residue name not supported in DFIRE scoring function: {resname!r}")
    name = atom_name.strip().upper()
    try:
        position = RESIDUE_ATOMS[residue].index(name)
    except ValueError as exc:
        raise ValueError(f"Not supported atom type {residue}{name!s}") from exc
    return RESIDUE_TYPE_OFFSETS[residue] + position


@dataclass(frozen=True)
class DFIREParameters:
    """DFIRE potential table indexed as ``[receptor_type, ligand_type, bin]``."""

    potential: np.ndarray

    def __post_init__(self) -> None:
        potential = np.array(self.potential, dtype=float)
        expected = NUM_ATOM_TYPES * NUM_ATOM_TYPES * NUM_BINS
        if potential.size != expected:
            raise ValueError(f"DFIRE potential must hold {expected} values, got {potential.size}")
        potential = potential.reshape(NUM_ATOM_TYPES, NUM_ATOM_TYPES, NUM_BINS)
        potential.flags.writeable = False
        object.__setattr__(self, "potential", potential)


def resolve_data_path(data_path: Optional[str] = None) -> str:
    """Directory holding scoring parameter files."""

    return os.environ.get(DATA_ENV_VAR) or data_path or "data"


def load_dfire_potential(data_path: Optional[str] = None) -> DFIREParameters:
    """Read the DFIRE table (one value per line) from ``<data>/DCparams``."""

    path = os.path.join(resolve_data_path(data_path), PARAMETERS_FILE)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Unable to open DFIRE parameters: {path}")
    expected = NUM_ATOM_TYPES * NUM_ATOM_TYPES * NUM_BINS
    values = np.loadtxt(path, dtype=float, max_rows=expected, ndmin=1)
    if values.size < expected:
        raise ValueError(
            f"DFIRE parameters in {path} hold {values.size} values, expected {expected}"
        )
    LOGGER.info("Loaded DFIRE parameters from %s", path)
    return DFIREParameters(potential=values)


class DFIRE(ScoringFunction):
    """DFIRE pairwise potential over atoms within 15 A."""

    name = "dfire"

    def __init__(
        self,
        receptor: DockingModel,
        ligand: DockingModel,
        parameters: DFIREParameters,
        use_anm: bool = False,
    ) -> None:
        super().__init__(receptor, ligand, use_anm=use_anm)
        self.parameters = parameters

    @staticmethod
    def atom_type(resname: str, atom_name: str) -> int:
        return dfire_atom_type(resname, atom_name)

    def pairwise_energy(
        self, receptor_coords: np.ndarray, ligand_coords: np.ndarray
    ) -> Tuple[float, np.ndarray, np.ndarray]:
        interface_receptor = np.zeros(receptor_coords.shape[0], dtype=int)
        interface_ligand = np.zeros(ligand_coords.shape[0], dtype=int)

        rows, cols, dist2 = self.contacts(receptor_coords, ligand_coords)
        # Distance slot, not a distance: the interface test below is on this value
        d = np.sqrt(dist2) * 2.0 - 1.0
        # Coincident atoms saturate to the first slot, a pair exactly at 15 A maps
        # past the last bin
        slots = np.maximum(d, 0.0).astype(int)
        bins = np.minimum(DIST_TO_BINS[slots] - 1, NUM_BINS - 1)
        raw = float(
            np.sum(self.parameters.potential[self.receptor.atoms[rows], self.ligand.atoms[cols], bins])
        )
        in_interface = d <= INTERFACE_CUTOFF
        interface_receptor[rows[in_interface]] = 1
        interface_ligand[cols[in_interface]] = 1

        score = (raw * 0.0157 - 4.7) * -1.0
        return score, interface_receptor, interface_ligand
