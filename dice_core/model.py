"""Immutable model description: graph, coupling kernel and integration knobs."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from typing import Any, Optional

import networkx as nx
import numpy as np

from .graphs import GraphIndex, as_graph_index
from .interfaces import CouplingKernel, Reporter
from .kernels import get_kernel

__all__ = ["SILENCE_DEFAULT", "Model"]

SILENCE_DEFAULT = 3  # messages need importance above this to be emitted

_TUNABLE = frozenset({"scale", "Ks", "noise_amplitude", "verbosity", "divergence_factor"})


@dataclass(frozen=True)
class Model:
    """Simulation scenario shared read-only by every trial of a run.

    Use `Model.build` to get the defaults (scale = 1/max degree). Graph and
    kernel are fixed; the numeric knobs can be tuned between runs through
    `with_options`, which returns a new model.
    """

    graph: GraphIndex
    coupling: CouplingKernel
    scale: float
    Ks: float = 0.0
    anisotropy: Optional[CouplingKernel] = None  # local form; coupling(v, -v) when None
    noise_amplitude: float = 0.0
    verbosity: int = SILENCE_DEFAULT
    divergence_factor: Optional[float] = None  # warn when |rate|^2 > factor * N

    def __post_init__(self) -> None:
        self._validate_configuration()

    @classmethod
    def build(
        cls,
        graph: nx.Graph | GraphIndex,
        coupling: str | CouplingKernel = "triangular",
        scale: Optional[float] = None,
        Ks: float = 0.0,
        anisotropy: Optional[str | CouplingKernel] = None,
        noise_amplitude: float = 0.0,
        verbosity: int = SILENCE_DEFAULT,
        divergence_factor: Optional[float] = None,
        **kernel_params: float,
    ) -> "Model":
        g = as_graph_index(graph)
        kernel = get_kernel(coupling, **kernel_params)
        if scale is None:
            scale = 1.0 / g.max_degree if g.max_degree > 0 else 1.0
        local = get_kernel(anisotropy) if anisotropy is not None else None
        return cls(
            graph=g,
            coupling=kernel,
            scale=float(scale),
            Ks=float(Ks),
            anisotropy=local,
            noise_amplitude=float(noise_amplitude),
            verbosity=int(verbosity),
            divergence_factor=divergence_factor,
        )

    def with_options(self, **changes: Any) -> "Model":
        """Return a copy with tuned numeric options (graph and kernel stay fixed)."""
        unknown = set(changes) - _TUNABLE
        if unknown:
            raise ValueError(f"Options cannot be changed after construction: {sorted(unknown)}")
        return dataclasses.replace(self, **changes)

    @property
    def n(self) -> int:
        return self.graph.n

    @property
    def weighted(self) -> bool:
        return self.graph.weighted

    def local_form(self, V: np.ndarray) -> np.ndarray:
        kernel = self.anisotropy if self.anisotropy is not None else self.coupling
        return np.asarray(kernel.local(V), dtype=float)

    def report(self, reporter: Optional[Reporter], message: str, importance: int = 1) -> None:
        """Forward a message when its importance exceeds the configured verbosity."""
        if reporter is not None and importance > self.verbosity:
            reporter.emit(message, importance)

    def _validate_configuration(self) -> None:
        assert isinstance(self.graph, GraphIndex), "graph must be a GraphIndex (use Model.build)"
        assert isinstance(self.coupling, CouplingKernel), "coupling must be a kernel"
        assert math.isfinite(self.scale) and self.scale > 0.0, "scale must be > 0"
        assert math.isfinite(self.Ks), "Ks must be finite"
        assert self.noise_amplitude >= 0.0, "noise_amplitude must be non-negative"
        if self.divergence_factor is not None:
            assert self.divergence_factor > 0.0, "divergence_factor must be > 0"
