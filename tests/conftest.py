"""Shared fixtures: toy docking models and a constant-per-contact scoring."""

from __future__ import annotations

import numpy as np
import pytest

from glowdock.constants import INTERFACE_CUTOFF2
from glowdock.data.structs import DockingModel
from glowdock.scoring.base import ScoringFunction


class ContactScoring(ScoringFunction):
    """One unit of energy per receptor/ligand pair within 15 A."""

    name = "contact"

    def pairwise_energy(self, receptor_coords, ligand_coords):
        interface_receptor = np.zeros(receptor_coords.shape[0], dtype=int)
        interface_ligand = np.zeros(ligand_coords.shape[0], dtype=int)
        rows, cols, dist2 = self.contacts(receptor_coords, ligand_coords)
        inside = dist2 <= INTERFACE_CUTOFF2
        interface_receptor[rows[inside]] = 1
        interface_ligand[cols[inside]] = 1
        return float(rows.size), interface_receptor, interface_ligand


@pytest.fixture
def make_model():
    def _make(coords, membrane=(), active_restraints=None, nmodes=None, num_anm=0):
        coords = np.asarray(coords, dtype=float).reshape(-1, 3)
        return DockingModel(
            atoms=np.zeros(coords.shape[0], dtype=int),
            coordinates=coords,
            membrane=list(membrane),
            active_restraints=active_restraints or {},
            nmodes=np.zeros(0) if nmodes is None else nmodes,
            num_anm=num_anm,
        )

    return _make


@pytest.fixture
def contact_scoring_cls():
    return ContactScoring


@pytest.fixture
def toy_scoring(make_model):
    """Receptor patch of five atoms, single-atom ligand."""

    receptor = make_model(
        [
            [0.0, 0.0, 0.0],
            [4.0, 0.0, 0.0],
            [0.0, 4.0, 0.0],
            [-8.0, 0.0, 0.0],
            [0.0, -12.0, 0.0],
        ]
    )
    ligand = make_model([[0.0, 0.0, 0.0]])
    return ContactScoring(receptor, ligand)
