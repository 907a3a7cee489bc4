from __future__ import annotations

import networkx as nx
import numpy as np
import pytest

from dice_core.cut import cut
from dice_core.graphs import GraphIndex
from dice_core.kernels import fold
from dice_core.rounding import (
    extract_configuration,
    get_best_configuration,
    get_best_cut,
    get_best_rounding,
    get_random_rounding,
)


def _brute_force_best(g: GraphIndex, V: np.ndarray) -> float:
    """Evaluate every distinct window position of the sweep."""
    values = fold(V)
    lefts = np.unique(np.concatenate([[-2.0], np.where(values < 0.0, values, values - 2.0)]))
    return max(cut(g, extract_configuration(values, left + 1.0)) for left in lefts)


def test_extract_configuration_window():
    V = np.array([-1.5, -0.5, 0.5, 1.5])
    assert extract_configuration(V, 0.0).tolist() == [-1, 1, 1, -1]
    assert extract_configuration(V, 1.5).tolist() == [-1, -1, 1, 1]
    assert extract_configuration(V, -1.0).tolist() == [1, 1, -1, -1]


def test_extract_configuration_shift_law():
    rng = np.random.default_rng(3)
    V = rng.uniform(-2.0, 2.0, size=40)
    for t in [1.2, 1.5, 1.9, -1.3, -1.75]:
        shifted = t - 2.0 * np.sign(t)
        assert np.array_equal(extract_configuration(V, t), -extract_configuration(V, shifted))


def test_best_rounding_on_four_cycle():
    g = GraphIndex.from_networkx(nx.cycle_graph(4))
    # every width-2 window holds two cyclically adjacent nodes here
    best, conf, _ = get_best_rounding(g, np.array([-1.5, -0.5, 0.5, 1.5]))
    assert best == 2.0
    assert cut(g, conf) == 2.0
    best, conf, thr = get_best_rounding(g, np.array([-0.5, 1.5, -0.5, 1.5]))
    assert best == 4.0
    assert abs(int(conf.sum())) == 0
    assert np.array_equal(extract_configuration(np.array([-0.5, 1.5, -0.5, 1.5]), thr), conf)


@pytest.mark.parametrize("seed", range(5))
def test_best_rounding_matches_exhaustive_window_scan(seed):
    G = nx.gnp_random_graph(25, 0.25, seed=seed)
    for u, v in G.edges():
        G[u][v]["weight"] = 1.0 + (u * 7 + v) % 5 * 0.5
    g = GraphIndex.from_networkx(G)
    V = np.random.default_rng(seed).uniform(-6.0, 6.0, size=g.n)
    best, conf, thr = get_best_rounding(g, V)
    assert best == pytest.approx(_brute_force_best(g, V))
    assert best == pytest.approx(cut(g, conf))
    assert np.array_equal(extract_configuration(fold(V), thr), conf)
    assert -1.0 <= thr < 1.0


def test_best_rounding_beats_fixed_threshold():
    G = nx.gnp_random_graph(40, 0.15, seed=11)
    g = GraphIndex.from_networkx(G)
    rng = np.random.default_rng(0)
    for _ in range(5):
        V = rng.uniform(-2.0, 2.0, size=g.n)
        assert get_best_cut(g, V) >= cut(g, extract_configuration(V, 0.0))


def test_first_maximum_wins():
    g = GraphIndex.from_networkx(nx.path_graph(2))
    # both windows before and after the shared crossing give cut 1
    best, conf, thr = get_best_rounding(g, np.array([-1.5, 0.5]))
    assert best == 1.0
    assert thr == pytest.approx(-1.0)
    assert conf.tolist() == [1, -1]

    best, conf, thr = get_best_rounding(g, np.array([0.0, 1.0]))
    assert best == 1.0
    assert thr == pytest.approx(0.0)
    assert conf.tolist() == [1, -1]


def test_rounding_is_deterministic_and_ignores_periods():
    G = nx.gnp_random_graph(20, 0.3, seed=2)
    V = np.random.default_rng(5).uniform(-2.0, 2.0, size=20)
    value, conf = get_best_configuration(G, V)
    again, conf_again = get_best_configuration(G, V + 8.0)
    assert value == again
    assert np.array_equal(conf, conf_again)


def test_random_rounding_never_beats_sweep():
    G = nx.gnp_random_graph(30, 0.2, seed=9)
    V = np.random.default_rng(1).uniform(-2.0, 2.0, size=30)
    value, conf, t = get_random_rounding(G, V, trials=20, rng=np.random.default_rng(4))
    assert value <= get_best_cut(G, V)
    assert value == cut(G, conf)
    assert -1.0 <= t < 1.0


def test_extract_configuration_with_large_thresholds():
    V = np.array([-1.5, -0.5, 0.0, 0.5, 1.5])
    # 1e17 is a multiple of the period; float spacing there exceeds the half-period
    assert np.array_equal(extract_configuration(V, 1e17), extract_configuration(V, 0.0))
    assert np.array_equal(extract_configuration(V, -1e17), extract_configuration(V, 0.0))
    # odd number of half-period shifts negates the window
    assert np.array_equal(extract_configuration(V, 4e6 + 2.5), -extract_configuration(V, 0.5))
    assert np.array_equal(extract_configuration(V, 3.5), extract_configuration(V, -0.5))


def test_rounding_size_mismatch_raises():
    with pytest.raises(ValueError):
        get_best_rounding(nx.cycle_graph(4), np.zeros(5))
