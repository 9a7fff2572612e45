import math

import numpy as np
import pytest

from glowdock.data.structs import GlowwormParameters
from glowdock.search.glowworm import Glowworm
from glowdock.utils.quaternion import Quaternion


class CountingScoring:
    """Returns a fixed energy and counts evaluations."""

    def __init__(self, value=2.0):
        self.value = value
        self.calls = 0

    def energy(self, translation, rotation, rec_nmodes=None, lig_nmodes=None):
        self.calls += 1
        return self.value


def _glowworm(glowworm_id=0, translation=(0.0, 0.0, 0.0), scoring=None, **kwargs):
    return Glowworm(
        glowworm_id,
        translation,
        kwargs.pop("rotation", Quaternion()),
        kwargs.pop("rec_nmodes", []),
        kwargs.pop("lig_nmodes", []),
        scoring or CountingScoring(),
        **kwargs,
    )


def test_glowworm_defaults():
    glowworm = _glowworm()
    assert glowworm.luciferin == 5.0
    assert glowworm.vision_range == 0.2
    assert glowworm.max_vision_range == 5.0
    assert glowworm.max_neighbors == 5
    assert glowworm.step == 0
    assert glowworm.moved is False


def test_compute_luciferin_only_rescores_after_move():
    scoring = CountingScoring(2.0)
    glowworm = _glowworm(scoring=scoring)

    glowworm.compute_luciferin()
    assert scoring.calls == 1
    assert glowworm.luciferin == pytest.approx(0.5 * 5.0 + 0.4 * 2.0)

    glowworm.compute_luciferin()
    assert scoring.calls == 1
    assert glowworm.luciferin == pytest.approx(0.5 * 3.3 + 0.4 * 2.0)
    assert glowworm.step == 2

    glowworm.moved = True
    glowworm.compute_luciferin()
    assert scoring.calls == 2


def test_is_neighbor_requires_brighter_and_close():
    dim = _glowworm(0, (0.0, 0.0, 0.0))
    bright = _glowworm(1, (0.1, 0.0, 0.0))
    far = _glowworm(2, (1.0, 0.0, 0.0))
    dim.luciferin = 1.0
    bright.luciferin = 2.0
    far.luciferin = 3.0

    assert dim.is_neighbor(bright)
    assert not bright.is_neighbor(dim)
    assert not dim.is_neighbor(far)
    assert not dim.is_neighbor(dim)


def test_update_vision_range_bounds():
    glowworm = _glowworm()
    glowworm.neighbors = []
    glowworm.update_vision_range()
    assert glowworm.vision_range == pytest.approx(0.2 + 0.08 * 5)

    glowworm.vision_range = 4.99
    glowworm.update_vision_range()
    assert glowworm.vision_range == 5.0

    glowworm.vision_range = 0.1
    glowworm.neighbors = list(range(1, 10))
    glowworm.update_vision_range()
    assert glowworm.vision_range == 0.0


def test_probabilities_single_and_normalized():
    glowworm = _glowworm()
    glowworm.luciferin = 1.0
    luciferins = [1.0, 2.0, 4.0]

    glowworm.neighbors = [2]
    glowworm.compute_probability_moving_toward_neighbor(luciferins)
    assert glowworm.probabilities == [1.0]

    glowworm.neighbors = [1, 2]
    glowworm.compute_probability_moving_toward_neighbor(luciferins)
    assert glowworm.probabilities == pytest.approx([0.25, 0.75])
    assert sum(glowworm.probabilities) == pytest.approx(1.0)


def test_select_random_neighbor():
    glowworm = _glowworm()
    assert glowworm.select_random_neighbor(0.3) == glowworm.id

    glowworm.neighbors = [4, 7]
    glowworm.probabilities = [0.25, 0.75]
    assert glowworm.select_random_neighbor(0.0) == 4
    assert glowworm.select_random_neighbor(0.25) == 4
    assert glowworm.select_random_neighbor(0.26) == 7
    assert glowworm.select_random_neighbor(0.999999) == 7


def test_select_random_neighbor_falls_back_to_last():
    glowworm = _glowworm()
    glowworm.neighbors = [1, 2, 3]
    glowworm.probabilities = [0.3, 0.3, 0.3999999]
    assert glowworm.select_random_neighbor(0.99999999) == 3


def test_move_towards_fixed_translation_step():
    glowworm = _glowworm(0, (0.0, 0.0, 0.0))
    target = Quaternion(0.0, 0.0, 1.0, 0.0)

    glowworm.move_towards(1, [3.0, 4.0, 0.0], target, [], [])

    assert glowworm.moved is True
    assert np.allclose(glowworm.translation, [0.3, 0.4, 0.0])
    assert np.allclose(glowworm.rotation.components(), [math.sqrt(0.5), 0.0, math.sqrt(0.5), 0.0])


def test_move_towards_coincident_target_keeps_position():
    glowworm = _glowworm(0, (1.0, 1.0, 1.0))

    glowworm.move_towards(1, [1.0, 1.0, 1.0], Quaternion(), [], [])

    assert glowworm.moved is True
    assert np.all(np.isfinite(glowworm.translation))
    assert np.allclose(glowworm.translation, [1.0, 1.0, 1.0])


def test_move_towards_self_does_not_move():
    glowworm = _glowworm(3, (1.0, 2.0, 3.0))

    glowworm.move_towards(3, [10.0, 10.0, 10.0], Quaternion(0.0, 1.0, 0.0, 0.0), [], [])

    assert glowworm.moved is False
    assert np.allclose(glowworm.translation, [1.0, 2.0, 3.0])
    assert glowworm.rotation == Quaternion()


def test_move_towards_steps_modes_with_anm():
    glowworm = _glowworm(0, rec_nmodes=[0.0, 0.0], lig_nmodes=[1.0], use_anm=True)

    glowworm.move_towards(1, [0.0, 0.0, 0.0], Quaternion(), [0.0, 2.0], [1.0])

    assert np.allclose(glowworm.rec_nmodes, [0.0, 0.5])
    # coincident ligand modes stay put
    assert np.allclose(glowworm.lig_nmodes, [1.0])
    assert np.allclose(glowworm.translation, [0.0, 0.0, 0.0])


def test_move_towards_ignores_modes_without_anm():
    glowworm = _glowworm(0, rec_nmodes=[0.0], use_anm=False)

    glowworm.move_towards(1, [1.0, 0.0, 0.0], Quaternion(), [5.0], [])

    assert np.allclose(glowworm.rec_nmodes, [0.0])


def test_custom_parameters():
    parameters = GlowwormParameters(rho=0.1, gamma=1.0, initial_luciferin=0.0, max_neighbors=2)
    glowworm = _glowworm(scoring=CountingScoring(3.0), parameters=parameters)

    glowworm.compute_luciferin()

    assert glowworm.luciferin == pytest.approx(3.0)
    assert glowworm.max_neighbors == 2
