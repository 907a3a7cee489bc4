"""Max-cut sweep: iterative-deepening search per coupling kernel and seed.

Example:
  uv run python -m experiments.maxcut_sweep --nodes 60 --prob 0.1 --kernels triangular sine --seeds 3
"""

from __future__ import annotations

import argparse
import time
from typing import Any, Dict, List, Optional

import numpy as np

from dice_core.graph_io import get_er_graph, get_regular_graph, load_graph
from dice_core.graphs import GraphIndex
from dice_core.model import Model
from dice_core.search import BranchSearch
from dice_core.states import get_initial
from dice_logging.messages import MessageLog
from dice_logging.metrics_log import log_records
from dice_logging.observability import BranchTracker


def build_graph(nodes: int, prob: float, degree: Optional[int], graph_file: Optional[str], seed: int) -> GraphIndex:
    if graph_file:
        G = load_graph(graph_file)
    elif degree is not None:
        G = get_regular_graph(nodes, degree, seed=seed)
    else:
        G = get_er_graph(nodes, prob, seed=seed)
    return GraphIndex.from_networkx(G)


def run(
    graph: GraphIndex,
    kernels: List[str],
    seeds: int,
    domain: float,
    steps: int,
    trials: int,
    max_depth: int,
    deadline: Optional[float],
    verbosity: int,
    trace: bool,
) -> None:
    assert seeds >= 1, "seeds must be >= 1"
    rows: List[Dict[str, Any]] = []
    for kernel in kernels:
        model = Model.build(graph, coupling=kernel, verbosity=verbosity)
        for seed in range(seeds):
            reporter = MessageLog(name="maxcut_messages", run_id=f"{kernel}:{seed}", echo=True)
            search = BranchSearch(
                model=model,
                domain=domain,
                steps=steps,
                trials=trials,
                max_depth=max_depth,
                deadline=deadline,
                seed=seed,
                reporter=reporter,
            )
            tracker = BranchTracker(name="maxcut_rounds", run_id=f"{kernel}:{seed}")
            if trace:
                tracker.attach(search)
            start = get_initial(graph.n, (-1.0, 1.0), np.random.default_rng(seed))
            began = time.perf_counter()
            result = search.run(start)
            elapsed = time.perf_counter() - began
            tracker.flush()
            reporter.flush()
            rows.append({
                "kernel": kernel,
                "seed": int(seed),
                "nodes": int(graph.n),
                "edges": int(graph.num_edges),
                "cut": float(result.cut),
                "cut_fraction": float(result.cut / graph.total_weight) if graph.total_weight > 0 else 0.0,
                "rounds": int(result.rounds),
                "final_trials": int(result.trials),
                "status": result.status.value,
                "seconds": float(elapsed),
            })
            print(f"[{kernel} seed={seed}] cut={result.cut:g} rounds={result.rounds} status={result.status.value}")
    out = log_records("maxcut_sweep", rows)
    print(f"Wrote {len(rows)} rows to {out}")


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--nodes", type=int, default=60)
    parser.add_argument("--prob", type=float, default=0.1)
    parser.add_argument("--degree", type=int, default=None, help="use a random regular graph instead of G(n, p)")
    parser.add_argument("--graph_file", type=str, default=None, help="reduced MatrixMarket file")
    parser.add_argument("--graph_seed", type=int, default=0)
    parser.add_argument("--kernels", nargs="+", default=["triangular"])
    parser.add_argument("--seeds", type=int, default=3)
    parser.add_argument("--domain", type=float, default=0.5)
    parser.add_argument("--steps", type=int, default=100)
    parser.add_argument("--trials", type=int, default=10)
    parser.add_argument("--max_depth", type=int, default=10)
    parser.add_argument("--deadline", type=float, default=None)
    parser.add_argument("--verbosity", type=int, default=1)
    parser.add_argument("--trace", action="store_true", help="log per-round rows")
    args = parser.parse_args()
    graph = build_graph(args.nodes, args.prob, args.degree, args.graph_file, args.graph_seed)
    run(
        graph=graph,
        kernels=args.kernels,
        seeds=args.seeds,
        domain=args.domain,
        steps=args.steps,
        trials=args.trials,
        max_depth=args.max_depth,
        deadline=args.deadline,
        verbosity=args.verbosity,
        trace=args.trace,
    )


if __name__ == "__main__":
    main()
