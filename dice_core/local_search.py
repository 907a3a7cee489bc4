"""Deterministic hill-climbing on spin configurations.

Node majority (1-opt): a node whose weighted agreement with its neighbours
is positive is flipped. Edge majority (targeted 2-opt): both endpoints of a
cut edge are flipped together when the combined agreement around the pair
exceeds -2 w(u, v). Every accepted flip strictly increases the cut, so the
passes terminate. Configurations are modified in place.
"""

from __future__ import annotations

import warnings
from typing import Optional, Tuple

import networkx as nx
import numpy as np

from .cut import cut
from .graphs import GraphIndex, as_graph_index, check_size

__all__ = [
    "majority_flip",
    "majority_twoflip",
    "local_search",
    "local_twosearch",
    "refine",
]


def _agreement(g: GraphIndex, conf: np.ndarray, node: int) -> float:
    lo, hi = g.indptr[node], g.indptr[node + 1]
    return float(conf[node] * np.dot(g.neighbor_weights[lo:hi], conf[g.indices[lo:hi]]))


def majority_flip(graph: nx.Graph | GraphIndex, conf: np.ndarray, node: int) -> bool:
    """Flip conf[node] if it agrees with the (weighted) majority of its neighbours."""
    g = as_graph_index(graph)
    if _agreement(g, conf, node) > 0.0:
        conf[node] = -conf[node]
        return True
    return False


def majority_twoflip(graph: nx.Graph | GraphIndex, conf: np.ndarray, u: int, v: int, w_uv: float = 1.0) -> bool:
    """Flip the pair (u, v) if the edges around it form the wrong majority.

    The combined agreement counts the edge (u, v) itself twice (-2 w_uv when
    it is cut), so exceeding -2 w_uv means the flip gains cut weight.
    """
    g = as_graph_index(graph)
    total = _agreement(g, conf, u) + _agreement(g, conf, v)
    if total > -2.0 * w_uv:
        conf[u] = -conf[u]
        conf[v] = -conf[v]
        return True
    return False


def _cap_reached(passes: int, max_passes: Optional[int], what: str) -> bool:
    if max_passes is not None and passes >= max_passes:
        warnings.warn(f"{what} stopped after {passes} passes without reaching a fixpoint", RuntimeWarning, stacklevel=3)
        return True
    return False


def local_search(graph: nx.Graph | GraphIndex, conf: np.ndarray, max_passes: Optional[int] = None) -> int:
    """Enforce the node majority rule on conf in place.

    Sweeps all nodes until a full pass makes no flip; the result has no
    better configuration within Hamming distance one.

    Returns:
        The number of passes, including the final flip-free one.
    """
    assert isinstance(conf, np.ndarray), "conf must be a numpy array (it is modified in place)"
    g = as_graph_index(graph)
    check_size(g, conf)
    passes = 0
    flipped = True
    while flipped:
        if _cap_reached(passes, max_passes, "local_search"):
            break
        passes += 1
        flipped = False
        for node in range(g.n):
            flipped |= majority_flip(g, conf, node)
    return passes


def local_twosearch(graph: nx.Graph | GraphIndex, conf: np.ndarray, max_passes: Optional[int] = None) -> int:
    """Enforce the edge majority rule on conf in place; returns the pass count.

    Only currently cut edges are candidates. Intended to run on a
    configuration that already satisfies the node majority rule.
    """
    assert isinstance(conf, np.ndarray), "conf must be a numpy array (it is modified in place)"
    g = as_graph_index(graph)
    check_size(g, conf)
    passes = 0
    flipped = True
    while flipped:
        if _cap_reached(passes, max_passes, "local_twosearch"):
            break
        passes += 1
        flipped = False
        for u, v, w in zip(g.edge_u, g.edge_v, g.edge_w):
            if conf[u] * conf[v] < 1:
                flipped |= majority_twoflip(g, conf, int(u), int(v), float(w))
    return passes


def refine(graph: nx.Graph | GraphIndex, conf: np.ndarray) -> Tuple[float, np.ndarray]:
    """Node then edge majority search on a copy of conf; returns (cut, refined)."""
    g = as_graph_index(graph)
    refined = np.array(conf, dtype=np.int8)
    local_search(g, refined)
    local_twosearch(g, refined)
    return cut(g, refined), refined
