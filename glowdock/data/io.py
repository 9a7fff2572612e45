"""I/O helpers for glowdock."""

from __future__ import annotations

import os
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import numpy as np
import yaml

from glowdock.data.structs import DockingModel, PDBAtom

WATER_RESNAMES = {"HOH", "WAT", "SOL", "H2O"}
MEMBRANE_BEAD = ("MMB", "BJ")
CHECKPOINT_HEADER = "#Coordinates  RecID  LigID  Luciferin  Neighbor's number  Vision Range  Scoring"

_SWARM_FILE_RE = re.compile(r"^initial_positions_(\d+)\.dat$")


def load_config(path: str) -> Dict[str, Any]:
    """Load a YAML (or JSON) setup file."""

    if not os.path.exists(path):
        raise FileNotFoundError(f"Setup file not found: {path}")
    with open(path, "r", encoding="utf-8") as handle:
        try:
            payload = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Malformed setup file {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError(f"Setup file {path} must contain a mapping")
    return payload


def _is_hydrogen(name: str, element: str) -> bool:
    if element:
        return element.upper() in {"H", "D"}
    return name.lstrip("0123456789").upper().startswith("H")


def load_pdb_atoms(
    path: str,
    noh: bool = False,
    noxt: bool = False,
    now: bool = False,
) -> List[PDBAtom]:
    """Read ATOM and HETATM records using standard PDB column positions.

    ``noh``, ``noxt`` and ``now`` drop hydrogens, OXT atoms and waters.
    """

    if not os.path.exists(path):
        raise FileNotFoundError(f"Structure file not found: {path}")

    atoms: list[PDBAtom] = []
    with open(path, "r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            record = line[:6].strip().upper()
            if record not in {"ATOM", "HETATM"}:
                continue
            name = line[12:16].strip()
            resname = line[17:20].strip()
            element = line[76:78].strip() if len(line) >= 78 else ""
            try:
                resnum = int(line[22:26])
                coords = np.array(
                    [float(line[30:38]), float(line[38:46]), float(line[46:54])],
                    dtype=float,
                )
            except ValueError as exc:
                raise ValueError(f"Malformed atom record at {path}:{line_number}") from exc
            if noh and _is_hydrogen(name, element):
                continue
            if noxt and name.upper() == "OXT":
                continue
            if now and resname.upper() in WATER_RESNAMES:
                continue
            atoms.append(
                PDBAtom(
                    record=record,
                    name=name,
                    resname=resname,
                    chain=line[21].strip(),
                    resnum=resnum,
                    icode=line[26].strip() if len(line) > 26 else "",
                    coords=coords,
                    element=element,
                )
            )
    return atoms


def build_docking_model(
    atoms: Sequence[PDBAtom],
    atom_type: Callable[[str, str], int],
    active_restraints: Iterable[str] = (),
    passive_restraints: Iterable[str] = (),
    nmodes: Optional[np.ndarray] = None,
    num_anm: int = 0,
) -> DockingModel:
    """Build the static docking model of one molecule.

    ``atom_type`` maps (residue name, atom name) to the scoring model's atom
    type code and raises ``ValueError`` for unsupported atoms.
    """

    active = set(active_restraints)
    passive = set(passive_restraints)
    types: list[int] = []
    coordinates: list[np.ndarray] = []
    membrane: list[int] = []
    active_map: dict[str, list[int]] = {}
    passive_map: dict[str, list[int]] = {}

    for atom_index, atom in enumerate(atoms):
        if (atom.resname, atom.name) == MEMBRANE_BEAD:
            membrane.append(atom_index)
        residue_id = atom.residue_id
        if residue_id in active:
            active_map.setdefault(residue_id, []).append(atom_index)
        if residue_id in passive:
            passive_map.setdefault(residue_id, []).append(atom_index)
        types.append(atom_type(atom.resname, atom.name))
        coordinates.append(atom.coords)

    return DockingModel(
        atoms=np.asarray(types, dtype=int),
        coordinates=np.asarray(coordinates, dtype=float).reshape(-1, 3),
        membrane=membrane,
        active_restraints=active_map,
        passive_restraints=passive_map,
        nmodes=np.zeros(0, dtype=float) if nmodes is None else nmodes,
        num_anm=num_anm,
    )


def load_nmodes(path: str, num_atoms: int, num_anm: int) -> np.ndarray:
    """Load a normal-mode ``.npy`` array flattened mode-major."""

    if not os.path.exists(path):
        raise FileNotFoundError(f"Error reading ANM file [{path}]")
    nmodes = np.load(path).astype(float).reshape(-1)
    expected = num_atoms * 3 * num_anm
    if nmodes.shape[0] != expected:
        raise ValueError(
            f"Number of ANM values in {path} ({nmodes.shape[0]}) does not correspond "
            f"to the number of atoms ({num_atoms} atoms x 3 x {num_anm} modes)"
        )
    return nmodes


def load_starting_positions(path: str, expected_columns: Optional[int] = None) -> List[np.ndarray]:
    """Parse whitespace-separated starting poses, one per line.

    Columns: tx ty tz qw qx qy qz [receptor modes...] [ligand modes...].
    """

    if not os.path.exists(path):
        raise FileNotFoundError(f"Starting positions file not found: {path}")

    positions: list[np.ndarray] = []
    with open(path, "r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            fields = line.split()
            if not fields:
                continue
            try:
                position = np.array([float(value) for value in fields], dtype=float)
            except ValueError as exc:
                raise ValueError(f"Unparseable coordinates at {path}:{line_number}") from exc
            if position.shape[0] < 7:
                raise ValueError(
                    f"Expected at least 7 columns at {path}:{line_number}, got {position.shape[0]}"
                )
            if expected_columns is not None and position.shape[0] != expected_columns:
                raise ValueError(
                    f"Expected {expected_columns} columns at {path}:{line_number}, "
                    f"got {position.shape[0]}"
                )
            positions.append(position)
    return positions


def parse_swarm_id(path: str) -> int:
    """Extract the swarm id from an ``initial_positions_<id>.dat`` file name."""

    match = _SWARM_FILE_RE.match(os.path.basename(path))
    if match is None:
        raise ValueError(f"Could not parse swarm from swarm filename: {path}")
    return int(match.group(1))


def format_checkpoint_line(
    translation: Sequence[float],
    rotation: Sequence[float],
    rec_nmodes: Sequence[float],
    lig_nmodes: Sequence[float],
    luciferin: float,
    num_neighbors: int,
    vision_range: float,
    scoring: float,
) -> str:
    """Format one glowworm record of a ``gso_<step>.out`` file."""

    values = list(translation) + list(rotation) + list(rec_nmodes) + list(lig_nmodes)
    coordinates = ", ".join(f"{float(value):.7f}" for value in values)
    return (
        f"({coordinates})    0    0   {luciferin:.8f}  {num_neighbors} "
        f"{vision_range:.3f} {scoring:.8f}"
    )
