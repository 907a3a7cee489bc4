"""Multi-start search combining dynamics, rounding and local search.

`scan_for_best_configuration` samples random initial states around a centre,
propagates them and keeps the best rounded cut. `test_branch` deepens
iteratively: scan, refine by node and edge majority search, accept strict
improvements, re-centre and widen the trial budget, stop when a round fails
to improve, the depth limit is exceeded or the deadline passes.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

import numpy as np

from .cut import cut
from .dynamics import propagate
from .graphs import check_size
from .interfaces import Reporter
from .local_search import local_search, local_twosearch
from .model import Model
from .rounding import get_best_configuration
from .states import hamming_distance, roundup

__all__ = [
    "SearchStatus",
    "RoundRecord",
    "BranchResult",
    "BranchSearch",
    "scan_for_best_configuration",
    "test_branch",
]


class SearchStatus(str, Enum):
    IMPROVING = "improving"
    SATURATED = "saturated"
    DEPTH_EXCEEDED = "depth_exceeded"
    DEADLINE_REACHED = "deadline_reached"


@dataclass(frozen=True)
class RoundRecord:
    """Outcome of one deepening round, passed to on_round_completed hooks."""

    round: int
    scan_cut: float
    refined_cut: float
    best_cut: float
    accepted: bool
    trials: int
    displacement: int
    status: SearchStatus


@dataclass
class BranchResult:
    cut: float
    configuration: np.ndarray
    status: SearchStatus
    rounds: int
    trials: int


RoundCallback = Callable[[RoundRecord], None]


@dataclass
class BranchSearch:
    """Randomised multi-start search around a centre with iterative deepening."""

    model: Model
    domain: float = 0.5
    steps: int = 100
    trials: int = 10
    max_depth: int = 10
    trial_increment: int = 10
    deadline: Optional[float] = None  # wall-clock seconds, checked between rounds
    seed: Optional[int] = None
    rng: Optional[np.random.Generator] = None
    reporter: Optional[Reporter] = None

    on_round_completed: List[RoundCallback] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._validate_configuration()
        if self.rng is None:
            self.rng = np.random.default_rng(self.seed)

    def scan(self, center: np.ndarray, trials: Optional[int] = None) -> Tuple[float, np.ndarray]:
        """Best rounded cut from `trials` perturbed starts around center.

        The incumbent comes from rounding the centre itself, so the result is
        never worse. Improvements move the centre to the new configuration.
        """
        model = self.model
        g = model.graph
        n = g.n
        budget = self.trials if trials is None else int(trials)
        assert budget >= 0, "trials must be non-negative"
        central = np.array(center, dtype=float)
        check_size(g, central, what="centre vector")
        best_cut, best_conf = get_best_configuration(g, central)
        if n == 0:
            return best_cut, best_conf
        for _ in range(budget):
            start = central + self.domain * self.rng.uniform(-1.0, 1.0, size=n)
            start[self.rng.integers(n)] *= -1.1  # targeted kick on one node
            final = propagate(model, self.steps, start, self.rng)
            value, conf = get_best_configuration(g, roundup(final))
            if value > best_cut:
                model.report(self.reporter, f"Improvement by {value - best_cut:g}", 1)
                best_cut, best_conf = value, conf
                central = conf.astype(float)
        return best_cut, best_conf

    def run(self, start: np.ndarray) -> BranchResult:
        """Iterative deepening from `start` until saturation, depth or deadline."""
        model = self.model
        g = model.graph
        began = time.perf_counter()
        central = np.array(start, dtype=float)
        check_size(g, central, what="start vector")
        best_cut, best_conf = get_best_configuration(g, central)
        trials = int(self.trials)
        rounds = 0
        status = SearchStatus.IMPROVING
        while status is SearchStatus.IMPROVING:
            if self.deadline is not None and time.perf_counter() - began > self.deadline:
                status = SearchStatus.DEADLINE_REACHED
                model.report(self.reporter, f"Deadline reached after {rounds} rounds", 2)
                break
            rounds += 1
            scan_cut, conf = self.scan(central, trials)
            model.report(self.reporter, f"Prelocal cut = {scan_cut:g}", 2)
            local_search(g, conf)
            model.report(self.reporter, f"Post-local cut = {cut(g, conf):g}", 2)
            local_twosearch(g, conf)
            refined_cut = cut(g, conf)
            model.report(self.reporter, f"Post-local-2 cut = {refined_cut:g}", 2)
            displacement = hamming_distance(conf, best_conf)
            accepted = refined_cut > best_cut
            if accepted:
                best_cut, best_conf = refined_cut, conf
                central = conf.astype(float)
                trials += self.trial_increment
                model.report(
                    self.reporter,
                    f"Step {rounds} arrived at {best_cut:g} with the displacement {displacement}",
                    2,
                )
            else:
                status = SearchStatus.SATURATED
            if rounds > self.max_depth:
                status = SearchStatus.DEPTH_EXCEEDED
                model.report(self.reporter, "Exceeded maximal depth", 2)
            record = RoundRecord(
                round=rounds,
                scan_cut=float(scan_cut),
                refined_cut=float(refined_cut),
                best_cut=float(best_cut),
                accepted=accepted,
                trials=trials,
                displacement=displacement,
                status=status,
            )
            for callback in self.on_round_completed:
                callback(record)
        return BranchResult(cut=best_cut, configuration=best_conf, status=status, rounds=rounds, trials=trials)

    def _validate_configuration(self) -> None:
        assert isinstance(self.model, Model), "model must be a Model"
        assert self.domain >= 0.0, "domain must be non-negative"
        assert self.steps >= 1, "steps must be >= 1"
        assert self.trials >= 0, "trials must be non-negative"
        assert self.max_depth >= 0, "max_depth must be non-negative"
        assert self.trial_increment >= 0, "trial_increment must be non-negative"
        if self.deadline is not None:
            assert self.deadline >= 0.0, "deadline must be non-negative"


def scan_for_best_configuration(
    model: Model,
    center: np.ndarray,
    domain: float,
    steps: int,
    trials: int,
    *,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    reporter: Optional[Reporter] = None,
) -> Tuple[float, np.ndarray]:
    """Monte Carlo scan of the ±domain vicinity of center; returns (cut, configuration)."""
    search = BranchSearch(
        model=model,
        domain=domain,
        steps=steps,
        trials=trials,
        seed=seed,
        rng=rng,
        reporter=reporter,
    )
    return search.scan(center)


def test_branch(
    model: Model,
    start: np.ndarray,
    domain: float,
    steps: int,
    trials: int,
    max_depth: int,
    *,
    trial_increment: int = 10,
    deadline: Optional[float] = None,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    reporter: Optional[Reporter] = None,
) -> BranchResult:
    """Explore the branch starting from `start` by iterative deepening."""
    search = BranchSearch(
        model=model,
        domain=domain,
        steps=steps,
        trials=trials,
        max_depth=max_depth,
        trial_increment=trial_increment,
        deadline=deadline,
        seed=seed,
        rng=rng,
        reporter=reporter,
    )
    return search.run(start)
