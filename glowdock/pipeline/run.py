"""Pipeline entrypoints."""

from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional

import numpy as np
from pydantic import BaseModel

from glowdock.constants import (
    DEFAULT_LIG_NM_FILE,
    DEFAULT_LIGHTDOCK_PREFIX,
    DEFAULT_REC_NM_FILE,
    DEFAULT_SAVE_EVERY,
    DEFAULT_SEED,
)
from glowdock.data.io import load_config, load_nmodes, load_pdb_atoms, load_starting_positions, parse_swarm_id
from glowdock.data.structs import GlowwormParameters
from glowdock.pipeline.logging import RunLogger
from glowdock.scoring import Method, build_scoring, parse_method
from glowdock.search.gso import GSO
from glowdock.utils.debug_logger import DebugLogger

LOGGER = logging.getLogger(__name__)


class SetupConfig(BaseModel):
    """Simulation setup as written by the setup stage (setup.json)."""

    seed: Optional[int] = None
    anm_seed: int = 324324
    ftdock_file: Optional[str] = None
    noh: bool = False
    noxt: bool = False
    now: bool = False
    anm_rec: int = 0
    anm_lig: int = 0
    swarms: int = 1
    starting_points_seed: int = 324324
    verbose_parser: bool = False
    restraints: Optional[str] = None
    use_anm: bool = False
    glowworms: int = 200
    membrane: bool = False
    receptor_pdb: str
    ligand_pdb: str
    receptor_restraints: Optional[Dict[str, List[str]]] = None
    ligand_restraints: Optional[Dict[str, List[str]]] = None

    rho: float = 0.5
    gamma: float = 0.4
    beta: float = 0.08
    initial_luciferin: float = 5.0
    initial_vision_range: float = 0.2
    max_vision_range: float = 5.0
    max_neighbors: int = 5
    save_every: int = DEFAULT_SAVE_EVERY

    data_path: Optional[str] = None
    debug: bool = False
    debug_level: str = "INFO"

    class Config:
        extra = "allow"

    def glowworm_parameters(self) -> GlowwormParameters:
        return GlowwormParameters(
            rho=self.rho,
            gamma=self.gamma,
            beta=self.beta,
            initial_luciferin=self.initial_luciferin,
            initial_vision_range=self.initial_vision_range,
            max_vision_range=self.max_vision_range,
            max_neighbors=self.max_neighbors,
        )

    def restraint_list(self, molecule: str, kind: str) -> List[str]:
        """Residue ids of ``kind`` (active/passive) for ``receptor`` or ``ligand``."""

        restraints = self.receptor_restraints if molecule == "receptor" else self.ligand_restraints
        if not restraints:
            return []
        return list(restraints.get(kind, []))


def _structure_path(simulation_path: str, pdb_name: str) -> str:
    return os.path.join(simulation_path, f"{DEFAULT_LIGHTDOCK_PREFIX}{pdb_name}")


def _expected_columns(cfg: SetupConfig) -> Optional[int]:
    if not cfg.use_anm:
        return None
    return 7 + cfg.anm_rec + cfg.anm_lig


def simulate(setup_path: str, positions_path: str, steps: int, method: str | Method) -> GSO:
    """Run a GSO simulation of one swarm and return the finished optimizer.

    Everything is validated before any simulation state is created.
    """

    method = parse_method(method.value if isinstance(method, Method) else method)
    if steps <= 0:
        raise ValueError(f"Number of steps must be positive, got {steps}")

    cfg = SetupConfig(**load_config(setup_path))
    simulation_path = os.path.dirname(os.path.abspath(setup_path))
    seed = cfg.seed if cfg.seed is not None else DEFAULT_SEED

    LOGGER.info("Reading starting positions from %s", positions_path)
    swarm_id = parse_swarm_id(positions_path)
    swarm_directory = os.path.join(simulation_path, f"swarm_{swarm_id}")
    if not os.path.isdir(swarm_directory):
        raise FileNotFoundError(f"Output directory does not exist for swarm {swarm_id}: {swarm_directory}")
    positions = load_starting_positions(positions_path, expected_columns=_expected_columns(cfg))
    if len(positions) != cfg.glowworms:
        LOGGER.warning(
            "Setup declares %d glowworms but %s holds %d positions",
            cfg.glowworms,
            positions_path,
            len(positions),
        )

    receptor_path = _structure_path(simulation_path, cfg.receptor_pdb)
    LOGGER.info("Reading receptor input structure: %s", receptor_path)
    receptor_atoms = load_pdb_atoms(receptor_path, noh=cfg.noh, noxt=cfg.noxt, now=cfg.now)
    ligand_path = _structure_path(simulation_path, cfg.ligand_pdb)
    LOGGER.info("Reading ligand input structure: %s", ligand_path)
    ligand_atoms = load_pdb_atoms(ligand_path, noh=cfg.noh, noxt=cfg.noxt, now=cfg.now)

    rec_nmodes = np.zeros(0, dtype=float)
    lig_nmodes = np.zeros(0, dtype=float)
    if cfg.use_anm and cfg.anm_rec > 0:
        rec_nmodes = load_nmodes(
            os.path.join(simulation_path, DEFAULT_REC_NM_FILE), len(receptor_atoms), cfg.anm_rec
        )
    if cfg.use_anm and cfg.anm_lig > 0:
        lig_nmodes = load_nmodes(
            os.path.join(simulation_path, DEFAULT_LIG_NM_FILE), len(ligand_atoms), cfg.anm_lig
        )

    scoring = build_scoring(
        method,
        receptor_atoms,
        ligand_atoms,
        rec_active_restraints=cfg.restraint_list("receptor", "active"),
        rec_passive_restraints=cfg.restraint_list("receptor", "passive"),
        lig_active_restraints=cfg.restraint_list("ligand", "active"),
        lig_passive_restraints=cfg.restraint_list("ligand", "passive"),
        rec_nmodes=rec_nmodes,
        rec_num_anm=cfg.anm_rec,
        lig_nmodes=lig_nmodes,
        lig_num_anm=cfg.anm_lig,
        use_anm=cfg.use_anm,
        data_path=cfg.data_path,
    )

    run_logger = RunLogger(out_dir=swarm_directory, live_write=True)
    debug_logger = DebugLogger(
        enabled=cfg.debug,
        path=os.path.join(swarm_directory, "debug.jsonl"),
        level=cfg.debug_level,
    )
    debug_logger.run_id = f"swarm_{swarm_id}"

    LOGGER.info("Creating GSO with %d glowworms", len(positions))
    gso = GSO(
        positions,
        seed,
        scoring,
        use_anm=cfg.use_anm,
        rec_num_anm=cfg.anm_rec,
        lig_num_anm=cfg.anm_lig,
        output_directory=swarm_directory,
        parameters=cfg.glowworm_parameters(),
        save_every=cfg.save_every,
        run_logger=run_logger,
        debug_logger=debug_logger,
    )

    LOGGER.info("Starting optimization (%d steps)", steps)
    try:
        gso.run(steps)
    finally:
        debug_logger.close()
    # Rewrite metrics.jsonl from this run only; live records append to any previous file
    run_logger.flush()
    run_logger.flush_timeseries()
    return gso
