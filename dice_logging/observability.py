from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import time

from dice_core.search import BranchSearch, RoundRecord
from dice_logging.metrics_log import log_records


@dataclass
class BranchTracker:
    """Attach to BranchSearch round hooks and log per-round cuts to Polars CSV.

    Usage:
        tracker = BranchTracker(name="branch_trace", run_id="demo")
        tracker.attach(search)
        search.run(V0)
        tracker.flush()
    """
    name: str
    run_id: str
    buffer: List[Dict[str, Any]] = field(default_factory=list)
    total_weight: Optional[float] = None
    prev_best: Optional[float] = None
    last_timestamp: Optional[float] = None

    def attach(self, search: BranchSearch) -> None:
        search.on_round_completed.append(self.on_round)
        self.total_weight = search.model.graph.total_weight
        self.last_timestamp = time.perf_counter()

    def on_round(self, record: RoundRecord) -> None:
        now = time.perf_counter()
        compute_cost = None
        if self.last_timestamp is not None:
            compute_cost = float(now - self.last_timestamp)
        self.last_timestamp = now
        gain = 0.0 if self.prev_best is None else float(record.best_cut - self.prev_best)
        self.prev_best = float(record.best_cut)
        cut_fraction = float("nan")
        if self.total_weight:
            cut_fraction = float(record.best_cut) / float(self.total_weight)
        self.buffer.append({
            "run_id": self.run_id,
            "round": int(record.round),
            "scan_cut": float(record.scan_cut),
            "refined_cut": float(record.refined_cut),
            "best_cut": float(record.best_cut),
            "best_gain": gain,
            "cut_fraction": cut_fraction,
            "accepted": int(record.accepted),
            "trials": int(record.trials),
            "displacement": int(record.displacement),
            "status": record.status.value,
            "compute_cost": float("nan") if compute_cost is None else compute_cost,
        })

    def flush(self) -> None:
        if self.buffer:
            log_records(self.name, self.buffer)
            self.buffer.clear()
