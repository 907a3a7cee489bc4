from __future__ import annotations

import polars as pl

from dice_core.graph_io import get_er_graph
from dice_core.graphs import GraphIndex
from experiments.maxcut_sweep import build_graph, run


def test_sweep_writes_one_row_per_kernel_and_seed(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    graph = GraphIndex.from_networkx(get_er_graph(16, 0.3, seed=0))
    run(
        graph=graph,
        kernels=["triangular", "sine"],
        seeds=2,
        domain=0.5,
        steps=15,
        trials=2,
        max_depth=2,
        deadline=None,
        verbosity=3,
        trace=True,
    )
    df = pl.read_csv(tmp_path / "logs" / "maxcut_sweep.csv")
    assert df.height == 4
    assert sorted(set(df["kernel"].to_list())) == ["sine", "triangular"]
    assert all(c <= graph.total_weight for c in df["cut"].to_list())
    assert (tmp_path / "logs" / "maxcut_rounds.csv").exists()


def test_build_graph_variants(tmp_path):
    assert build_graph(12, 0.4, None, None, 1).n == 12
    regular = build_graph(10, 0.0, 3, None, 1)
    assert regular.degrees.tolist() == [3] * 10
