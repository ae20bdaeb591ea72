import argparse
import os
import random
import sys
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

# Add project root to path for imports
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from whaleopt.woa import WOA
from benchmarks.reporting import curve_frame, render_summary, summarize, write_results

try:
    import opfunu.cec_based.cec2022 as cec2022
except ImportError as e:
    raise SystemExit("Missing dependency: opfunu. Install with: pip install -e .") from e


@dataclass(frozen=True)
class ExperimentConfig:
    dims: int
    runs: int
    max_iter: int
    pop_size: int
    seed: int
    functions: Tuple[str, ...]
    methods: Tuple[str, ...]
    n_jobs: int


def run_seed(cfg: ExperimentConfig, run_id: int) -> int:
    # Same seed for every method in a run, so methods share their initial population.
    return int(cfg.seed + run_id)


def spiral_from_method(method: str) -> Optional[float]:
    """
    "woa"          -> None (iteration-growing spiral factor)
    "woa:b<value>" -> constant spiral factor, e.g. "woa:b1" or "woa:b0.5"
    """
    m = method.strip().lower()
    if m == "woa":
        return None
    if m.startswith("woa:b"):
        try:
            return float(m[len("woa:b"):])
        except ValueError as e:
            raise ValueError(f"Bad spiral constant in method: {method}") from e
    raise ValueError(f"Unknown method: {method}. Expected 'woa' or 'woa:b<value>'.")


def method_label(method: str) -> str:
    b = spiral_from_method(method)
    return "WOA" if b is None else f"WOA[b={b:g}]"


def parse_functions(text: str) -> Tuple[str, ...]:
    """Accepts "all" or a comma list such as "F1,F11"; the 2022 suffix is optional."""
    if text.strip().lower() == "all":
        return tuple(f"F{i}2022" for i in range(1, 13))
    names = []
    for part in text.split(","):
        q = part.strip().upper()
        if not q:
            continue
        if not q.startswith("F"):
            q = "F" + q
        if not q.endswith("2022"):
            q += "2022"
        if q not in names:
            names.append(q)
    return tuple(names)


def make_problem(func_name: str, dims: int):
    if not hasattr(cec2022, func_name):
        raise ValueError(f"Unknown CEC2022 function: {func_name}")
    return getattr(cec2022, func_name)(ndim=dims)


def build_optimizer(method: str, problem: Any, *, dims: int, pop_size: int, max_iter: int, seed: int) -> WOA:
    return WOA(
        problem.evaluate,
        pop_size,
        float(np.min(problem.lb)),
        float(np.max(problem.ub)),
        dims,
        max_iter,
        rng=random.Random(seed),
        spiral_shape_const=spiral_from_method(method),
    )


def single_run(cfg: ExperimentConfig, method: str, func_name: str, run_id: int) -> Tuple[Dict[str, Any], pd.DataFrame]:
    seed = run_seed(cfg, run_id)
    problem = make_problem(func_name, cfg.dims)
    optimizer = build_optimizer(
        method, problem, dims=cfg.dims, pop_size=cfg.pop_size, max_iter=cfg.max_iter, seed=seed
    )

    t0 = time.time()
    optimizer.execute()
    elapsed = time.time() - t0

    label = method_label(method)
    row = {
        "method": label,
        "function": func_name,
        "run_id": int(run_id),
        "seed": seed,
        "evaluations": int(optimizer.evaluations),
        "best_fit": optimizer.optimal_score,
        "error": abs(optimizer.optimal_score - float(problem.f_global)),
        "wall_time_s": elapsed,
    }
    curve = curve_frame(optimizer.convergence_curve, method=label, function=func_name, run_id=run_id)
    return row, curve


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Seeded WOA runs on CEC2022 functions (opfunu).")
    p.add_argument("--dims", type=int, default=10)
    p.add_argument("--runs", type=int, default=30)
    p.add_argument("--max_iter", type=int, default=500)
    p.add_argument("--pop_size", type=int, default=30)
    p.add_argument("--functions", type=str, default="all", help='"all" or e.g. "F1,F2,F11"')
    p.add_argument(
        "--methods",
        type=str,
        default="woa,woa:b1",
        help='Comma list. "woa" uses the iteration-growing spiral, "woa:b<value>" a constant one.',
    )
    p.add_argument("--seed", type=int, default=12345)
    p.add_argument("--n_jobs", type=int, default=-1)
    p.add_argument("--out", type=str, default=os.path.join("results", "experiments"))
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    methods = tuple(m.strip().lower() for m in args.methods.split(",") if m.strip())
    for m in methods:
        spiral_from_method(m)

    cfg = ExperimentConfig(
        dims=args.dims,
        runs=args.runs,
        max_iter=args.max_iter,
        pop_size=args.pop_size,
        seed=args.seed,
        functions=parse_functions(args.functions),
        methods=methods,
        n_jobs=args.n_jobs,
    )

    tasks = [(m, fn, r) for m in cfg.methods for fn in cfg.functions for r in range(cfg.runs)]
    if cfg.n_jobs == 1:
        outputs = [single_run(cfg, m, fn, r) for m, fn, r in tasks]
    else:
        # Runs are independent; each one owns its seeded random source.
        outputs = Parallel(n_jobs=cfg.n_jobs, verbose=10)(delayed(single_run)(cfg, m, fn, r) for m, fn, r in tasks)

    rows = [row for row, _ in outputs]
    paths = write_results(args.out, rows, [curve for _, curve in outputs])

    print(render_summary(summarize(pd.DataFrame(rows))))
    print(f"\nSaved {paths['results_csv']} and {paths['convergence_csv']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
