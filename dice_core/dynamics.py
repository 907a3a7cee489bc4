"""Discrete-time relaxation dynamics on a graph.

The continuous representation advances V ← V + scale · rate(V) where
rate[n] = Σ_m coupling(V[n], V[m]) · w(n, m) (+ Ks · anisotropy(V[n])
+ noise). The hybrid representation tracks (σ, x) and flips a spin exactly
when its offset wraps across the period boundary.
"""

from __future__ import annotations

import warnings
from typing import Optional, Tuple

import networkx as nx
import numpy as np

from .graphs import GraphIndex, as_graph_index, check_size
from .interfaces import CouplingKernel
from .model import Model
from .states import Hybrid

__all__ = [
    "step_rate",
    "model_rate",
    "propagate",
    "trajectories",
    "step_rate_hybrid",
    "update_hybrid",
    "propagate_hybrid",
    "trajectories_hybrid",
]


def step_rate(
    graph: nx.Graph | GraphIndex,
    coupling: CouplingKernel,
    V: np.ndarray,
    Ks: float = 0.0,
    anisotropy: Optional[CouplingKernel] = None,
) -> np.ndarray:
    """Rate ΔV for a single step of the continuous representation."""
    g = as_graph_index(graph)
    values = np.asarray(V, dtype=float)
    check_size(g, values, what="state vector")
    rows = g.rows
    pair = np.asarray(coupling(values[rows], values[g.indices]), dtype=float)
    # float even when there are no edges (bincount of an empty index array is int64)
    out = np.bincount(rows, weights=pair * g.neighbor_weights, minlength=g.n).astype(float, copy=False)
    if Ks != 0.0:
        local = anisotropy if anisotropy is not None else coupling
        out += Ks * np.asarray(local.local(values), dtype=float)
    return out


def model_rate(model: Model, V: np.ndarray, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """step_rate with the model's kernel, anisotropy and noise."""
    out = step_rate(model.graph, model.coupling, V, model.Ks, model.anisotropy)
    if model.noise_amplitude > 0.0:
        gen = rng if rng is not None else np.random.default_rng()
        out += model.noise_amplitude * gen.uniform(-1.0, 1.0, size=out.shape[0])
    return out


def _check_divergence(model: Model, rate: np.ndarray, warned: bool) -> bool:
    if warned or model.divergence_factor is None:
        return warned
    grad2 = float(np.dot(rate, rate))
    if grad2 > model.divergence_factor * model.n:
        warnings.warn(
            f"Squared rate {grad2:.3e} exceeds {model.divergence_factor:g} x N ({model.n}); "
            f"consider a smaller scale (current {model.scale:.3e}).",
            RuntimeWarning,
            stacklevel=3,
        )
        return True
    return False


def propagate(
    model: Model,
    steps: int,
    V0: np.ndarray,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Advance V0 by `steps - 1` updates and return the final state.

    V0 is not modified.
    """
    assert steps >= 1, "steps must be >= 1"
    V = np.array(V0, dtype=float)
    check_size(model.graph, V, what="state vector")
    warned = False
    for _ in range(steps - 1):
        rate = model_rate(model, V, rng)
        warned = _check_divergence(model, rate, warned)
        V += model.scale * rate
    return V


def trajectories(
    model: Model,
    steps: int,
    V0: np.ndarray,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Like propagate, keeping every time point: array of shape [steps, N]."""
    assert steps >= 1, "steps must be >= 1"
    V = np.array(V0, dtype=float)
    check_size(model.graph, V, what="state vector")
    history = np.empty((steps, V.shape[0]), dtype=float)
    history[0] = V
    warned = False
    for t in range(1, steps):
        rate = model_rate(model, V, rng)
        warned = _check_divergence(model, rate, warned)
        V += model.scale * rate
        history[t] = V
    return history


def step_rate_hybrid(
    graph: nx.Graph | GraphIndex,
    coupling: CouplingKernel,
    spins: np.ndarray,
    offsets: np.ndarray,
) -> np.ndarray:
    """Offset rate Δx[n] = σ_n Σ_m σ_m coupling(x_n, x_m) w(n, m)."""
    g = as_graph_index(graph)
    s = np.asarray(spins, dtype=float)
    x = np.asarray(offsets, dtype=float)
    check_size(g, s)
    check_size(g, x, what="offset vector")
    rows = g.rows
    pair = s[g.indices] * np.asarray(coupling(x[rows], x[g.indices]), dtype=float)
    # float even when there are no edges (bincount of an empty index array is int64)
    out = np.bincount(rows, weights=pair * g.neighbor_weights, minlength=g.n).astype(float, copy=False)
    return out * s


def update_hybrid(spins: np.ndarray, offsets: np.ndarray, dx: np.ndarray) -> int:
    """Add dx to the offsets in place, wrapping across ±1 with a spin flip.

    Offsets stay in [-1, 1): an offset reaching 1 wraps to -1. Assumes
    |dx| < 2 element-wise; this is not checked. Returns the number of
    flipped spins.
    """
    xnew = offsets + dx
    up = xnew >= 1.0
    down = xnew < -1.0
    xnew[up] -= 2.0
    xnew[down] += 2.0
    wrapped = up | down
    spins[wrapped] *= -1
    offsets[:] = xnew
    return int(np.count_nonzero(wrapped))


def propagate_hybrid(model: Model, steps: int, start: Hybrid) -> Hybrid:
    """Advance a hybrid state `steps - 1` times; the inputs are copied."""
    assert steps >= 1, "steps must be >= 1"
    spins = np.array(start[0], dtype=np.int8)
    offsets = np.array(start[1], dtype=float)
    for _ in range(steps - 1):
        dx = model.scale * step_rate_hybrid(model.graph, model.coupling, spins, offsets)
        update_hybrid(spins, offsets, dx)
    return spins, offsets


def trajectories_hybrid(model: Model, steps: int, start: Hybrid) -> Tuple[np.ndarray, np.ndarray]:
    """Full hybrid history: (spins[steps, N], offsets[steps, N])."""
    assert steps >= 1, "steps must be >= 1"
    spins = np.array(start[0], dtype=np.int8)
    offsets = np.array(start[1], dtype=float)
    s_hist = np.empty((steps, spins.shape[0]), dtype=np.int8)
    x_hist = np.empty((steps, offsets.shape[0]), dtype=float)
    s_hist[0] = spins
    x_hist[0] = offsets
    for t in range(1, steps):
        dx = model.scale * step_rate_hybrid(model.graph, model.coupling, spins, offsets)
        update_hybrid(spins, offsets, dx)
        s_hist[t] = spins
        x_hist[t] = offsets
    return s_hist, x_hist
