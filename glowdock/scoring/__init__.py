"""Scoring functions and the method registry."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional, Sequence

import numpy as np

from glowdock.data.io import build_docking_model
from glowdock.data.structs import PDBAtom
from glowdock.scoring import dfire as dfire_mod
from glowdock.scoring.base import ScoringFunction, bias_score, membrane_intersection, satisfied_restraints
from glowdock.scoring.dfire import DFIRE
from glowdock.scoring.dna import DNA

LOGGER = logging.getLogger(__name__)


class Method(str, Enum):
    """Available energy models."""

    DFIRE = "dfire"
    DNA = "dna"


def parse_method(name: str) -> Method:
    """Resolve a method name (case-insensitive)."""

    try:
        return Method(str(name).strip().lower())
    except ValueError as exc:
        supported = ", ".join(method.value for method in Method)
        raise ValueError(f"Method not supported: {name!r} (choose from {supported})") from exc


def build_scoring(
    method: Method,
    receptor_atoms: Sequence[PDBAtom],
    ligand_atoms: Sequence[PDBAtom],
    rec_active_restraints: Iterable[str] = (),
    rec_passive_restraints: Iterable[str] = (),
    lig_active_restraints: Iterable[str] = (),
    lig_passive_restraints: Iterable[str] = (),
    rec_nmodes: Optional[np.ndarray] = None,
    rec_num_anm: int = 0,
    lig_nmodes: Optional[np.ndarray] = None,
    lig_num_anm: int = 0,
    use_anm: bool = False,
    data_path: Optional[str] = None,
) -> ScoringFunction:
    """Instantiate the scoring function selected by ``method`` once per run."""

    method = parse_method(method.value if isinstance(method, Method) else method)
    model_cls = DFIRE if method is Method.DFIRE else DNA
    receptor = build_docking_model(
        receptor_atoms,
        model_cls.atom_type,
        rec_active_restraints,
        rec_passive_restraints,
        nmodes=rec_nmodes,
        num_anm=rec_num_anm if use_anm else 0,
    )
    ligand = build_docking_model(
        ligand_atoms,
        model_cls.atom_type,
        lig_active_restraints,
        lig_passive_restraints,
        nmodes=lig_nmodes,
        num_anm=lig_num_anm if use_anm else 0,
    )
    LOGGER.info(
        "Loading %s scoring function (receptor %d atoms, ligand %d atoms)",
        method.value,
        receptor.num_atoms,
        ligand.num_atoms,
    )
    if method is Method.DFIRE:
        parameters = dfire_mod.load_dfire_potential(data_path)
        return DFIRE(receptor, ligand, parameters, use_anm=use_anm)
    return DNA(receptor, ligand, use_anm=use_anm)


__all__ = [
    "DFIRE",
    "DNA",
    "Method",
    "ScoringFunction",
    "bias_score",
    "build_scoring",
    "membrane_intersection",
    "parse_method",
    "satisfied_restraints",
]
