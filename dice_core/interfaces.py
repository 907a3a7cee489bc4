"""Interfaces for the dynamical max-cut engine.

Exposes strict typed Protocols for coupling kernels and message sinks.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np

__all__ = [
    "Real",
    "CouplingKernel",
    "SupportsPotential",
    "Reporter",
]

Real = float | np.ndarray


@runtime_checkable
class CouplingKernel(Protocol):
    """Periodic pairwise coupling F(v1 - v2) with F(0) = 0 and F(-v) = -F(v)."""

    name: str

    def __call__(self, v1: Real, v2: Real) -> Real:
        """Contribution of a neighbour at v2 to the rate of a node at v1."""
        ...

    def local(self, v: Real) -> Real:
        """Single-site (anisotropy) form; coupling(v, -v) unless overridden."""
        ...


@runtime_checkable
class SupportsPotential(Protocol):
    """Optional relaxed cut contribution P(v) of one edge: P(0) = 0, P(±2) = 1."""

    def potential(self, v: Real) -> Real:
        ...


@runtime_checkable
class Reporter(Protocol):
    """Message sink receiving (message, importance) pairs."""

    def emit(self, message: str, importance: int) -> None:
        ...
