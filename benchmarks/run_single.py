"""
Single WOA run on one CEC2022 function, printing the optimum as a table.

  python benchmarks/run_single.py --function F1 --dims 10 --max_iter 500 --seed 7

For multi-run experiments with structured outputs, use benchmarks/experiments.py.
"""

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

# Ensure project root is importable when executing this file directly.
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from benchmarks.experiments import build_optimizer, make_problem, method_label, parse_functions
from benchmarks.reporting import render_optimum


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Single WOA run on a CEC2022 function.")
    p.add_argument("--function", type=str, default="F1")
    p.add_argument("--dims", type=int, default=10)
    p.add_argument("--pop_size", type=int, default=30)
    p.add_argument("--max_iter", type=int, default=500)
    p.add_argument("--method", type=str, default="woa", help='"woa" or "woa:b<value>"')
    p.add_argument("--seed", type=int, default=12345)
    p.add_argument("--log_level", type=str, default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    funcs = parse_functions(args.function)
    if len(funcs) != 1:
        raise ValueError(f"Expected exactly one function, got: {args.function}")
    func_name = funcs[0]

    problem = make_problem(func_name, args.dims)
    optimizer = build_optimizer(
        args.method, problem, dims=args.dims, pop_size=args.pop_size, max_iter=args.max_iter, seed=args.seed
    )
    optimizer.execute()

    curve = optimizer.convergence_curve
    print(f"{method_label(args.method)} on {func_name} ({args.dims}D), seed={args.seed}")
    print(f"evaluations: {optimizer.evaluations}  first/last recorded best: {curve[0]:.5f} / {curve[-1]:.5f}")
    print(render_optimum(optimizer))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
