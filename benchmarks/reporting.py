from __future__ import annotations

import os
from typing import Any, Dict, List, Mapping

import numpy as np
import pandas as pd
from tabulate import tabulate


def render_optimum(optimizer: Any, floatfmt: str = ".5f") -> str:
    """
    Plain-text table of the best score followed by each leader coordinate.
    Reads only the optimizer's public accessors.
    """
    pos = np.asarray(optimizer.leader_pos, dtype=float)
    headers = ["optimal"] + [f"dim{i}" for i in range(pos.size)]
    row = [float(optimizer.optimal_score)] + [float(v) for v in pos]
    return tabulate([row], headers=headers, tablefmt="grid", floatfmt=floatfmt)


def curve_frame(curve: np.ndarray, **labels: Any) -> pd.DataFrame:
    """One row per iteration with the best score recorded for it."""
    curve = np.asarray(curve, dtype=float)
    df = pd.DataFrame({"iteration": np.arange(curve.size), "best": curve})
    for k, v in labels.items():
        df[k] = v
    return df


def summarize(results: pd.DataFrame) -> pd.DataFrame:
    """Best/median/worst error per (method, function) over all runs."""
    out = results.groupby(["method", "function"], as_index=False)["error"].agg(
        runs="count",
        best_error="min",
        median_error="median",
        worst_error="max",
    )
    return out.sort_values(["function", "method"]).reset_index(drop=True)


def render_summary(summary: pd.DataFrame, floatfmt: str = ".3e") -> str:
    return tabulate(summary, headers="keys", tablefmt="github", floatfmt=floatfmt, showindex=False)


def write_results(out_dir: str, results: List[Mapping[str, Any]], curves: List[pd.DataFrame]) -> Dict[str, str]:
    """Writes results.csv (one row per run) and convergence.csv (one row per run and iteration)."""
    os.makedirs(out_dir, exist_ok=True)

    results_csv = os.path.join(out_dir, "results.csv")
    pd.DataFrame(list(results)).to_csv(results_csv, index=False)

    convergence_csv = os.path.join(out_dir, "convergence.csv")
    pd.concat(curves, ignore_index=True).to_csv(convergence_csv, index=False)

    return {"results_csv": results_csv, "convergence_csv": convergence_csv}
