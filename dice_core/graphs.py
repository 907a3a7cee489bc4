"""Indexed graph view used by the dynamics, rounding and local search.

A networkx graph is converted once into flat numpy arrays: an edge list
(u, v, w) and a CSR neighbour structure. Node labels are mapped to
positions 0..N-1 in insertion order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Tuple

import networkx as nx
import numpy as np

__all__ = ["GraphIndex", "as_graph_index", "check_size"]

WEIGHT_EPS = 1e-5  # smallest admissible edge weight


@dataclass(frozen=True, eq=False)
class GraphIndex:
    """Read-only array form of an undirected, optionally weighted graph."""

    nodes: Tuple[Hashable, ...]
    edge_u: np.ndarray
    edge_v: np.ndarray
    edge_w: np.ndarray
    indptr: np.ndarray
    indices: np.ndarray
    neighbor_weights: np.ndarray
    weighted: bool

    @property
    def n(self) -> int:
        return len(self.nodes)

    @property
    def num_edges(self) -> int:
        return int(self.edge_u.shape[0])

    @property
    def total_weight(self) -> float:
        return float(self.edge_w.sum())

    @property
    def degrees(self) -> np.ndarray:
        return np.diff(self.indptr)

    @property
    def max_degree(self) -> int:
        if self.n == 0:
            return 0
        return int(self.degrees.max())

    @property
    def rows(self) -> np.ndarray:
        """Source position of every CSR entry (parallel to `indices`)."""
        return np.repeat(np.arange(self.n), self.degrees)

    def neighbors(self, node: int) -> np.ndarray:
        return self.indices[self.indptr[node]:self.indptr[node + 1]]

    def neighbor_weight_slice(self, node: int) -> np.ndarray:
        return self.neighbor_weights[self.indptr[node]:self.indptr[node + 1]]

    @classmethod
    def from_networkx(cls, graph: nx.Graph, weight: str = "weight") -> "GraphIndex":
        assert not graph.is_directed(), "graph must be undirected"
        nodes = tuple(graph.nodes())
        pos = {label: i for i, label in enumerate(nodes)}
        us, vs, ws = [], [], []
        for a, b, data in graph.edges(data=True):
            assert a != b, "self-loops are not supported"
            w = float(data.get(weight, 1.0))
            assert w >= WEIGHT_EPS, f"edge weights must be positive (got {w} on {a}-{b})"
            us.append(pos[a])
            vs.append(pos[b])
            ws.append(w)
        edge_u = np.asarray(us, dtype=np.int64)
        edge_v = np.asarray(vs, dtype=np.int64)
        edge_w = np.asarray(ws, dtype=float)
        n = len(nodes)
        # symmetric CSR: each undirected edge contributes two entries
        src = np.concatenate([edge_u, edge_v])
        dst = np.concatenate([edge_v, edge_u])
        wts = np.concatenate([edge_w, edge_w])
        order = np.lexsort((dst, src))
        src, dst, wts = src[order], dst[order], wts[order]
        counts = np.bincount(src, minlength=n) if n > 0 else np.zeros(0, dtype=np.int64)
        indptr = np.zeros(n + 1, dtype=np.int64)
        np.cumsum(counts, out=indptr[1:])
        weighted = bool(edge_w.size and np.any(edge_w != 1.0))
        return cls(
            nodes=nodes,
            edge_u=edge_u,
            edge_v=edge_v,
            edge_w=edge_w,
            indptr=indptr,
            indices=dst.astype(np.int64),
            neighbor_weights=wts,
            weighted=weighted,
        )

    def to_networkx(self) -> nx.Graph:
        graph = nx.Graph()
        graph.add_nodes_from(self.nodes)
        for u, v, w in zip(self.edge_u, self.edge_v, self.edge_w):
            if self.weighted:
                graph.add_edge(self.nodes[u], self.nodes[v], weight=float(w))
            else:
                graph.add_edge(self.nodes[u], self.nodes[v])
        return graph


def as_graph_index(graph: nx.Graph | GraphIndex) -> GraphIndex:
    if isinstance(graph, GraphIndex):
        return graph
    return GraphIndex.from_networkx(graph)


def check_size(graph: GraphIndex, values: np.ndarray, what: str = "configuration") -> None:
    """Fail fast when a per-node array does not match the graph size."""
    if len(values) != graph.n:
        raise ValueError(
            f"The {what} size {len(values)} and the graph size {graph.n} do not match"
        )
