from __future__ import annotations

import numpy as np
import pytest

from dice_core.kernels import fold
from dice_core.states import (
    c_variance,
    conf_to_number,
    euclid_distance,
    flip_configuration,
    get_initial,
    get_random_configuration,
    get_random_cube,
    get_random_hybrid,
    get_random_sphere,
    get_rate,
    hamming_distance,
    hybrid_to_cont,
    number_to_conf,
    realign_hybrid,
    roundup,
)


def test_number_to_conf_is_most_significant_first():
    assert number_to_conf(5, 4).tolist() == [-1, 1, -1, 1]
    assert number_to_conf(0, 3).tolist() == [-1, -1, -1]
    assert number_to_conf(7, 3).tolist() == [1, 1, 1]
    with pytest.raises(AssertionError):
        number_to_conf(8, 3)


def test_number_conf_round_trip():
    for number in range(2 ** 6):
        assert conf_to_number(number_to_conf(number, 6)) == number
    rng = np.random.default_rng(0)
    for length in range(1, 21):
        top = 2 ** length - 1
        samples = {0, top} | {int(k) for k in rng.integers(0, top + 1, size=10)}
        for number in samples:
            conf = number_to_conf(number, length)
            assert conf.shape == (length,)
            assert conf_to_number(conf) == number
    assert number_to_conf(2 ** 20 - 1, 20).tolist() == [1] * 20


def test_distances():
    assert hamming_distance([1, -1, 1], [1, 1, -1]) == 2
    assert euclid_distance(np.array([0.0, 1.0]), np.array([1.0, -1.0])) == pytest.approx(5.0)
    with pytest.raises(AssertionError):
        hamming_distance([1, 1], [1, 1, 1])


def test_get_rate_duplicates_last_step():
    hist = np.array([[0.0, 0.0], [3.0, 4.0], [3.0, 5.0]])
    assert get_rate(hist).tolist() == pytest.approx([5.0, 1.0, 1.0])


def test_random_configurations():
    rng = np.random.default_rng(0)
    assert get_random_configuration(10, 1.0, rng).tolist() == [1] * 10
    assert get_random_configuration(10, 0.0, rng).tolist() == [-1] * 10
    conf = get_random_configuration(200, 0.5, rng)
    assert conf.dtype == np.int8
    assert 50 < int((conf > 0).sum()) < 150


def test_random_vectors():
    rng = np.random.default_rng(1)
    V = get_initial(100, (1.0, -1.0), rng)
    assert np.all(V >= -1.0) and np.all(V < 1.0)
    assert np.linalg.norm(get_random_sphere(7, 2.5, rng)) == pytest.approx(2.5)
    cube = get_random_cube(50, 3.0, rng)
    assert np.all(cube >= 0.0) and np.all(cube < 3.0)


def test_flip_configuration_in_place():
    conf = np.array([1, 1, -1, -1], dtype=np.int8)
    out = flip_configuration(conf, [0, 3])
    assert out is conf
    assert conf.tolist() == [-1, 1, -1, 1]


def test_realign_hybrid_preserves_state():
    rng = np.random.default_rng(2)
    hybrid = get_random_hybrid(40, (-1.0, 1.0), rng=rng)
    V = hybrid_to_cont(hybrid)
    moved = realign_hybrid(hybrid, 0.7)
    assert np.allclose(fold(hybrid_to_cont(moved, 0.7) - V), 0.0, atol=1e-12)


def test_roundup_folds():
    assert roundup(np.array([2.5, -2.5, 1.0])).tolist() == pytest.approx([-1.5, 1.5, 1.0])


def test_c_variance_per_open_interval():
    V = np.array([0.1, 0.2, 0.3, 1.5, 2.0])
    out = c_variance(V, np.array([[0.0, 1.0], [1.0, 2.0], [5.0, 6.0]]))
    assert out.shape == (3, 3)
    assert out[0].tolist() == pytest.approx([3.0, 0.2, np.sqrt(0.02 / 3.0)])
    # bounds are exclusive: 2.0 is left out
    assert out[1].tolist() == pytest.approx([1.0, 1.5, 0.0])
    assert out[2, 0] == 0.0
    assert np.isnan(out[2, 1]) and np.isnan(out[2, 2])
