"""Graph generation and the reduced MatrixMarket text format.

The reduced format has optional `%` comment lines, a header `|V| |E|` and one
`u v w` line per edge with 1-based node ids.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import networkx as nx

from .graphs import GraphIndex, as_graph_index

__all__ = ["get_er_graph", "get_regular_graph", "dump_graph", "load_graph"]


def get_er_graph(n: int, p: float, seed: Optional[int] = None, max_attempts: int = 1000) -> nx.Graph:
    """Connected Erdős–Rényi graph G(n, p), regenerated until connected."""
    assert n >= 1, "n must be >= 1"
    assert 0.0 <= p <= 1.0, "p must be within [0,1]"
    for attempt in range(max_attempts):
        G = nx.gnp_random_graph(n, p, seed=None if seed is None else seed + attempt)
        if nx.is_connected(G):
            return G
    raise RuntimeError(f"No connected G({n}, {p}) graph after {max_attempts} attempts")


def get_regular_graph(n: int, degree: int, seed: Optional[int] = None, max_attempts: int = 1000) -> nx.Graph:
    """Random connected `degree`-regular graph on n nodes."""
    assert 0 <= degree < n, "degree must be within [0, n)"
    assert (n * degree) % 2 == 0, "n * degree must be even"
    for attempt in range(max_attempts):
        G = nx.random_regular_graph(degree, n, seed=None if seed is None else seed + attempt)
        if nx.is_connected(G):
            return G
    raise RuntimeError(f"No connected {degree}-regular graph on {n} nodes after {max_attempts} attempts")


def dump_graph(graph: nx.Graph | GraphIndex, path: str | Path) -> Path:
    """Write the graph in the reduced MatrixMarket format."""
    g = as_graph_index(graph)
    out = Path(path)
    lines = [f"{g.n} {g.num_edges}"]
    for u, v, w in zip(g.edge_u, g.edge_v, g.edge_w):
        weight = f"{w:.17g}" if g.weighted else "1"
        lines.append(f"{u + 1} {v + 1} {weight}")
    out.write_text("\n".join(lines) + "\n")
    return out


def load_graph(path: str | Path) -> nx.Graph:
    """Read a reduced MatrixMarket file into a graph on nodes 0..|V|-1.

    Weights are attached only when some weight differs from 1.
    """
    rows = []
    header = None
    for raw in Path(path).read_text().splitlines():
        line = raw.strip()
        if not line or line.startswith("%"):
            continue
        tokens = line.split()
        if header is None:
            if len(tokens) < 2:
                raise ValueError(f"Malformed header line: {raw!r}")
            header = (int(tokens[0]), int(tokens[1]))
            continue
        if len(tokens) < 2:
            raise ValueError(f"Malformed edge line: {raw!r}")
        w = float(tokens[2]) if len(tokens) > 2 else 1.0
        rows.append((int(tokens[0]) - 1, int(tokens[1]) - 1, w))
    if header is None:
        raise ValueError(f"No header found in {path}")
    n, m = header
    if len(rows) != m:
        raise ValueError(f"Header announces {m} edges, found {len(rows)}")
    G = nx.Graph()
    G.add_nodes_from(range(n))
    weighted = any(w != 1.0 for _, _, w in rows)
    for u, v, w in rows:
        if not (0 <= u < n and 0 <= v < n):
            raise ValueError(f"Edge ({u + 1}, {v + 1}) out of range for {n} nodes")
        if weighted:
            G.add_edge(u, v, weight=w)
        else:
            G.add_edge(u, v)
    return G
