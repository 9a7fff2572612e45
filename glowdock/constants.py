"""Shared constants for glowdock."""

from __future__ import annotations

# Default random number generator seed
DEFAULT_SEED = 324324

# Interpolation steps used when a glowworm moves toward a neighbor
DEFAULT_TRANSLATION_STEP = 0.5
DEFAULT_ROTATION_STEP = 0.5
DEFAULT_NMODES_STEP = 0.5

# Above this dot product SLERP falls back to a normalized linear interpolation
LINEAR_THRESHOLD = 0.9995

# Atomic contact is below this value
INTERFACE_CUTOFF = 3.9
INTERFACE_CUTOFF2 = INTERFACE_CUTOFF * INTERFACE_CUTOFF

# Receptor/ligand atom pairs are only scored within 15 A
CONTACT_CUTOFF2 = 225.0

# Membrane penalty for biasing the scoring
MEMBRANE_PENALTY_SCORE = 999.0

# Parsed structures written by the setup stage start with this prefix
DEFAULT_LIGHTDOCK_PREFIX = "lightdock_"

# Flattened ANM arrays (mode-major, then atom, then x/y/z)
DEFAULT_REC_NM_FILE = "rec_nm.npy"
DEFAULT_LIG_NM_FILE = "lig_nm.npy"

# Checkpoints are written at step 1 and then every SAVE_EVERY steps
DEFAULT_SAVE_EVERY = 10
