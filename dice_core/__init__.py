"""Core package for the dynamical max-cut solver."""

from .cut import cut
from .dynamics import propagate, trajectories
from .graphs import GraphIndex
from .kernels import get_kernel
from .local_search import local_search, local_twosearch
from .model import Model
from .rounding import extract_configuration, get_best_configuration, get_best_cut, get_best_rounding
from .search import BranchSearch, SearchStatus, scan_for_best_configuration

__all__ = [
    "GraphIndex",
    "Model",
    "get_kernel",
    "cut",
    "propagate",
    "trajectories",
    "extract_configuration",
    "get_best_rounding",
    "get_best_configuration",
    "get_best_cut",
    "local_search",
    "local_twosearch",
    "BranchSearch",
    "SearchStatus",
    "scan_for_best_configuration",
]
