"""Geometry helpers."""

from __future__ import annotations

import numpy as np


def pairwise_sq_dist(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Compute pairwise squared Euclidean distances between two point sets."""

    diff = np.asarray(a, dtype=float)[:, None, :] - np.asarray(b, dtype=float)[None, :, :]
    return np.sum(diff**2, axis=-1)


def pairwise_dist(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Compute pairwise Euclidean distances."""

    return np.sqrt(pairwise_sq_dist(a, b))


def apply_modes(coords: np.ndarray, modes: np.ndarray, coefficients: np.ndarray) -> np.ndarray:
    """Deform coordinates by a weighted sum of normal-mode displacements.

    ``modes`` has shape ``(num_modes, num_atoms, 3)``. Modes are added one at
    a time in mode order.
    """

    deformed = np.array(coords, dtype=float, copy=True)
    for i_mode, coefficient in enumerate(np.asarray(coefficients, dtype=float)):
        deformed += modes[i_mode] * coefficient
    return deformed


def step_towards(current: np.ndarray, target: np.ndarray, step: float) -> np.ndarray:
    """Move ``current`` exactly ``step`` units along the direction to ``target``.

    A zero-length displacement leaves ``current`` unchanged.
    """

    current = np.asarray(current, dtype=float)
    delta = np.asarray(target, dtype=float) - current
    norm = float(np.sqrt(np.sum(delta * delta)))
    if norm == 0.0:
        return current.copy()
    return current + delta * (step / norm)
