from __future__ import annotations

import networkx as nx
import numpy as np
import pytest

from dice_core.graphs import GraphIndex, as_graph_index, check_size


def test_index_of_four_cycle():
    g = GraphIndex.from_networkx(nx.cycle_graph(4))
    assert g.n == 4
    assert g.num_edges == 4
    assert g.total_weight == 4.0
    assert not g.weighted
    assert g.max_degree == 2
    assert g.degrees.tolist() == [2, 2, 2, 2]
    assert g.neighbors(0).tolist() == [1, 3]
    assert g.rows.tolist() == [0, 0, 1, 1, 2, 2, 3, 3]


def test_labels_map_to_positions():
    G = nx.Graph()
    G.add_edge("a", "b", weight=2.0)
    G.add_edge("b", "c", weight=0.25)
    g = GraphIndex.from_networkx(G)
    assert g.nodes == ("a", "b", "c")
    assert g.weighted
    assert g.neighbors(1).tolist() == [0, 2]
    assert g.neighbor_weight_slice(1).tolist() == [2.0, 0.25]
    back = g.to_networkx()
    assert back["b"]["c"]["weight"] == 0.25


def test_csr_is_symmetric():
    G = nx.gnp_random_graph(25, 0.2, seed=7)
    g = GraphIndex.from_networkx(G)
    A = np.zeros((g.n, g.n))
    A[g.rows, g.indices] = g.neighbor_weights
    assert np.allclose(A, A.T)
    assert A.sum() == pytest.approx(2 * g.total_weight)


def test_isolated_nodes_and_empty_graph():
    G = nx.empty_graph(3)
    g = GraphIndex.from_networkx(G)
    assert g.n == 3
    assert g.num_edges == 0
    assert g.degrees.tolist() == [0, 0, 0]
    assert GraphIndex.from_networkx(nx.Graph()).max_degree == 0


def test_rejects_self_loops_and_tiny_weights():
    G = nx.Graph()
    G.add_edge(0, 0)
    with pytest.raises(AssertionError):
        GraphIndex.from_networkx(G)
    H = nx.Graph()
    H.add_edge(0, 1, weight=0.0)
    with pytest.raises(AssertionError):
        GraphIndex.from_networkx(H)


def test_as_graph_index_passthrough_and_size_check():
    g = GraphIndex.from_networkx(nx.path_graph(3))
    assert as_graph_index(g) is g
    check_size(g, np.zeros(3))
    with pytest.raises(ValueError, match="The state vector size 2 and the graph size 3 do not match"):
        check_size(g, np.zeros(2), what="state vector")
