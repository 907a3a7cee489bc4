from __future__ import annotations

import networkx as nx
import pytest

from dice_core.graph_io import dump_graph, get_er_graph, get_regular_graph, load_graph


def test_dump_and_load_unweighted(tmp_path):
    path = dump_graph(nx.cycle_graph(4), tmp_path / "c4.mtx")
    lines = path.read_text().splitlines()
    assert lines[0] == "4 4"
    assert lines[1] == "1 2 1"
    G = load_graph(path)
    assert sorted(G.nodes()) == [0, 1, 2, 3]
    assert {frozenset(e) for e in G.edges()} == {frozenset(e) for e in nx.cycle_graph(4).edges()}
    assert all("weight" not in d for _, _, d in G.edges(data=True))


def test_dump_and_load_weighted(tmp_path):
    G = nx.Graph()
    G.add_edge(0, 1, weight=0.5)
    G.add_edge(1, 2, weight=2.25)
    G.add_node(3)
    back = load_graph(dump_graph(G, tmp_path / "w.mtx"))
    assert back.number_of_nodes() == 4
    assert back[0][1]["weight"] == 0.5
    assert back[1][2]["weight"] == 2.25


def test_load_skips_comments_and_defaults_weights(tmp_path):
    path = tmp_path / "g.mtx"
    path.write_text("%%MatrixMarket matrix coordinate pattern symmetric\n% comment\n3 2\n1 2\n2 3\n")
    G = load_graph(path)
    assert G.number_of_edges() == 2
    assert G.has_edge(0, 1) and G.has_edge(1, 2)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "3\n",
        "3 2\n1 2 1\n",
        "3 1\n1 4 1\n",
    ],
)
def test_load_rejects_malformed_files(tmp_path, text):
    path = tmp_path / "bad.mtx"
    path.write_text(text)
    with pytest.raises(ValueError):
        load_graph(path)


def test_er_graph_is_connected_and_reproducible():
    G = get_er_graph(30, 0.2, seed=1)
    assert G.number_of_nodes() == 30
    assert nx.is_connected(G)
    assert sorted(G.edges()) == sorted(get_er_graph(30, 0.2, seed=1).edges())


def test_er_graph_gives_up():
    with pytest.raises(RuntimeError):
        get_er_graph(5, 0.0, seed=0, max_attempts=3)


def test_regular_graph_degrees():
    G = get_regular_graph(20, 3, seed=2)
    assert nx.is_connected(G)
    assert {d for _, d in G.degree()} == {3}
