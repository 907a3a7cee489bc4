"""Cut evaluation, relaxed objective, edge dispersion and spectral stability of configurations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

import networkx as nx
import numpy as np

from .graphs import GraphIndex, as_graph_index, check_size
from .interfaces import SupportsPotential
from .states import Hybrid

if TYPE_CHECKING:
    from .model import Model

__all__ = [
    "cut",
    "cut_hybrid",
    "relaxed_cut",
    "twisted_laplacian",
    "conf_decay",
    "conf_decay_states",
    "av_dispersion",
]


def cut(graph: nx.Graph | GraphIndex, conf: np.ndarray) -> float:
    """Σ_e w(e) (1 - σ_u σ_v) / 2 for a ±1 configuration."""
    g = as_graph_index(graph)
    spins = np.asarray(conf)
    check_size(g, spins)
    disagree = spins[g.edge_u] != spins[g.edge_v]
    return float(g.edge_w[disagree].sum())


def cut_hybrid(graph: nx.Graph | GraphIndex, state: Hybrid) -> float:
    """Cut of the discrete component of a hybrid state."""
    return cut(graph, state[0])


def relaxed_cut(model: "Model", V: np.ndarray) -> float:
    """Σ_e w(e) P(V_u - V_v) using the kernel potential.

    Coincides with the cut when every V_n is ±1.
    """
    kernel = model.coupling
    assert isinstance(kernel, SupportsPotential), f"kernel {kernel.name!r} has no potential"
    g = model.graph
    values = np.asarray(V, dtype=float)
    check_size(g, values, what="state vector")
    contrib = np.asarray(kernel.potential(values[g.edge_u] - values[g.edge_v]), dtype=float)
    return float(np.dot(g.edge_w, contrib))


def twisted_laplacian(graph: nx.Graph | GraphIndex, conf: np.ndarray) -> np.ndarray:
    """Cut Hessian: Laplacian entries twisted by σ_i σ_j with the diagonal rebalanced.

    Off-diagonal: -w_ij σ_i σ_j. Diagonal: Σ_j w_ij σ_i σ_j.
    """
    g = as_graph_index(graph)
    spins = np.asarray(conf, dtype=float)
    check_size(g, spins)
    H = np.zeros((g.n, g.n), dtype=float)
    twist = g.edge_w * spins[g.edge_u] * spins[g.edge_v]
    H[g.edge_u, g.edge_v] = -twist
    H[g.edge_v, g.edge_u] = -twist
    np.fill_diagonal(H, -H.sum(axis=1))
    return H


def conf_decay(graph: nx.Graph | GraphIndex, conf: np.ndarray, count: int = 3) -> np.ndarray:
    """Largest `count` eigenvalues of the twisted Laplacian (descending).

    A positive leading eigenvalue marks an unstable direction of the
    configuration under the dynamics.
    """
    H = twisted_laplacian(graph, conf)
    assert 1 <= count <= H.shape[0], "count must be within [1, N]"
    eigvals = np.linalg.eigvalsh(H)
    return eigvals[::-1][:count]


def conf_decay_states(graph: nx.Graph | GraphIndex, conf: np.ndarray) -> Tuple[float, np.ndarray]:
    """Leading eigenvalue and eigenvector of the twisted Laplacian."""
    H = twisted_laplacian(graph, conf)
    eigvals, eigvecs = np.linalg.eigh(H)
    return float(eigvals[-1]), eigvecs[:, -1]


def av_dispersion(graph: nx.Graph | GraphIndex, V: np.ndarray) -> float:
    """Average spread of the dynamical variables across edges: Σ_e |V_u - V_v| / N."""
    g = as_graph_index(graph)
    values = np.asarray(V, dtype=float)
    check_size(g, values, what="state vector")
    assert g.n > 0, "graph has no nodes"
    return float(np.abs(values[g.edge_u] - values[g.edge_v]).sum() / g.n)
