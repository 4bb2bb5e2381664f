"""
Benchmark sweep: time sort adapters over growing input sizes.

Usage:
    from recsort.bench.runner import run_benchmark, print_summary

    report = run_benchmark("bench.yaml")     # or a dict with the same keys
    print_summary(report)

Config keys:
    seed             int    RNG seed for dataset generation              (required)
    repeats          int    timed samples per (algorithm, n)             (required)
    warmup           bool   one untimed call before sampling             (required)
    disable_gc       bool   GC off during the timed loop                 (required)
    timeout_seconds  float  per-sample limit; slower algos skip larger n (required)
    dataset          dict   {"dist": ..., "params": {...}}, see datasets (required)
    sizes            list   input sizes, ascending                       (required)
    algorithms       list   [{"name": <module>, "label": str?, "config": dict?}] (required)
    experiment_name  str    free-form label copied into the meta
    count_comparisons bool  also record engine comparator calls for every
                            hybrid_quicksort entry (default false)
    show_progress    bool   tqdm bar over sizes (default true)

Behaviour:
- For each size n ONE dataset is generated and every algorithm sorts the same input.
- On timeout or error an algorithm is skipped for all larger sizes.
- Nothing is written to disk; the report holds pandas frames the caller can save.
"""

from __future__ import annotations

import datetime as _dt
import importlib
import logging
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import numpy as np
import pandas as pd
import psutil
import yaml
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from recsort.bench.measure import count_comparisons, time_sort_call
from recsort.config import SortConfig
from recsort.datasets import make_dataset
from recsort.errors import ConfigError

__all__ = ["AlgoSpec", "BenchmarkReport", "run_benchmark", "print_summary"]

logger = logging.getLogger(__name__)

REQUIRED_KEYS = (
    "seed",
    "repeats",
    "warmup",
    "disable_gc",
    "timeout_seconds",
    "dataset",
    "sizes",
    "algorithms",
)
SUMMARY_COLUMNS = ["algo", "n", "samples_ok", "median_ns", "iqr_ns", "min_ns", "max_ns"]


# ------------------------- data structures ------------------------- #


@dataclass(frozen=True)
class AlgoSpec:
    label: str
    name: str
    sort_fn: Callable[..., List[int]]
    config: Dict[str, Any]


@dataclass
class BenchmarkReport:
    samples: pd.DataFrame                      # algo, n, trial, time_ns
    summary: pd.DataFrame                      # SUMMARY_COLUMNS (+ comparisons)
    meta: Dict[str, Any]
    failures: List[Dict[str, Any]] = field(default_factory=list)
    sizes: List[int] = field(default_factory=list)


# ------------------------- helpers ------------------------- #


def _load_cfg(cfg: Union[str, Path, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(cfg, Mapping):
        return dict(cfg)
    path = Path(cfg)
    with path.open("r", encoding="utf-8") as f:
        loaded = yaml.safe_load(f)
    if not isinstance(loaded, dict):
        raise ConfigError(f"benchmark config {path} must be a mapping")
    return loaded


def _gather_meta(experiment_name: str) -> Dict[str, Any]:
    return {
        "experiment_name": experiment_name,
        "python": platform.python_version(),
        "numpy": np.__version__,
        "pandas": pd.__version__,
        "psutil": psutil.__version__,
        "machine": {
            "cpu": platform.processor() or platform.machine(),
            "cores_logical": psutil.cpu_count(logical=True),
            "cores_physical": psutil.cpu_count(logical=False),
            "ram_gb": round(psutil.virtual_memory().total / (1024**3), 2),
            "platform": platform.platform(),
        },
        "start_time": _dt.datetime.now().isoformat(timespec="seconds"),
        "pid": os.getpid(),
    }


def _resolve_algorithms(entries: List[Dict[str, Any]]) -> List[AlgoSpec]:
    specs: List[AlgoSpec] = []
    seen = set()
    for entry in entries:
        name = entry.get("name")
        if not name or not isinstance(name, str):
            raise ConfigError("Each algorithm must have a string 'name' field")
        label = str(entry.get("label") or name)
        if label in seen:
            raise ConfigError(f"Duplicate algorithm label in config: {label}")
        seen.add(label)

        try:
            mod = importlib.import_module(f"recsort.algorithms.{name}")
        except ImportError as e:
            raise ConfigError(f"Unknown algorithm module 'recsort.algorithms.{name}': {e!r}") from e
        sort_fn = getattr(mod, "sort", None)
        if not callable(sort_fn):
            raise ConfigError(f"Algorithm module '{name}' must define `sort(a, *, config=None)`")

        config = entry.get("config") or {}
        if not isinstance(config, dict):
            raise ConfigError(f"Algorithm '{label}': 'config' must be a dict if provided")
        specs.append(AlgoSpec(label=label, name=name, sort_fn=sort_fn, config=config))
    return specs


def _aggregate_summary(samples: pd.DataFrame) -> pd.DataFrame:
    if samples.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    grouped = samples.groupby(["algo", "n"])["time_ns"]
    out = grouped.agg(
        samples_ok="count", median_ns="median", min_ns="min", max_ns="max"
    ).reset_index()
    quart = grouped.quantile([0.25, 0.75]).unstack()
    iqr = (quart[0.75] - quart[0.25]).rename("iqr_ns").reset_index()
    out = out.merge(iqr, on=["algo", "n"], how="left")
    ns_cols = ["median_ns", "iqr_ns", "min_ns", "max_ns"]
    out[ns_cols] = out[ns_cols].astype("int64")
    return out[SUMMARY_COLUMNS].sort_values(["algo", "n"], ignore_index=True)


# ------------------------- core runner ------------------------- #


def run_benchmark(cfg: Union[str, Path, Mapping[str, Any]]) -> BenchmarkReport:
    """Run one sweep described by `cfg` (a mapping or a YAML path) and return the report."""
    cfg = _load_cfg(cfg)
    missing = [k for k in REQUIRED_KEYS if k not in cfg]
    if missing:
        raise ConfigError(f"Missing required benchmark config keys: {missing}")

    sizes = [int(n) for n in cfg["sizes"]]
    if not sizes or any(n < 0 for n in sizes):
        raise ConfigError("Config 'sizes' must be a non-empty list of nonnegative integers")
    repeats = int(cfg["repeats"])
    warmup = bool(cfg["warmup"])
    disable_gc = bool(cfg["disable_gc"])
    timeout_seconds = float(cfg["timeout_seconds"])
    dataset_spec = dict(cfg["dataset"])
    want_comparisons = bool(cfg.get("count_comparisons", False))
    algos = _resolve_algorithms(list(cfg["algorithms"]))

    meta = _gather_meta(str(cfg.get("experiment_name", "benchmark")))
    rng = np.random.default_rng(int(cfg["seed"]))
    skipped = set()
    rows: List[Dict[str, Any]] = []
    comparisons: List[Dict[str, Any]] = []
    failures: List[Dict[str, Any]] = []

    logger.info("benchmark %s: %s over n=%s", meta["experiment_name"],
                ", ".join(a.label for a in algos), sizes)

    for n in tqdm(sizes, desc="Sizes", unit="n", disable=not cfg.get("show_progress", True)):
        base_a = make_dataset(n, dataset_spec, rng)

        for spec in algos:
            if spec.label in skipped:
                continue

            res = time_sort_call(
                algo_name=spec.label,
                algo_fn=spec.sort_fn,
                a=base_a,
                config=spec.config,
                repeats=repeats,
                warmup=warmup,
                disable_gc=disable_gc,
                timeout_seconds=timeout_seconds,
                defensive_copy=True,
            )
            rows.extend(
                {"algo": spec.label, "n": n, "trial": i, "time_ns": t}
                for i, t in enumerate(res["samples_ns"])
            )

            if res["status"] != "ok":
                skipped.add(spec.label)
                failures.append({
                    "algo": spec.label,
                    "n": n,
                    "status": res["status"],
                    "error": res["error"],
                    "timed_out_on_repeat": res["timed_out_on_repeat"],
                })
                logger.warning("%s skipped from n=%d on: %s", spec.label, n, res["status"])
                continue

            if want_comparisons and spec.name == "hybrid_quicksort":
                opts = dict(spec.config)
                size = opts.pop("record_size", 8)
                comparisons.append({
                    "algo": spec.label,
                    "n": n,
                    "comparisons": count_comparisons(
                        base_a, record_size=size, config=SortConfig.from_dict(opts)
                    ),
                })

    samples = pd.DataFrame(rows, columns=["algo", "n", "trial", "time_ns"])
    summary = _aggregate_summary(samples)
    if comparisons:
        summary = summary.merge(pd.DataFrame(comparisons), on=["algo", "n"], how="left")

    return BenchmarkReport(samples=samples, summary=summary, meta=meta,
                           failures=failures, sizes=sizes)


def print_summary(report: BenchmarkReport, console: Optional[Console] = None) -> None:
    """Render median ± IQR (ms) at the first, middle and last size as a rich table."""
    console = console or Console()
    summary = report.summary
    sizes = report.sizes

    table = Table(title="Benchmark Summary (median ± IQR in ms)")
    table.add_column("Algorithm", style="bold")
    picks = sorted({sizes[0], sizes[len(sizes) // 2], sizes[-1]}) if sizes else []
    for n in picks:
        table.add_column(f"n={n}", justify="right")

    def _cell(median_ns: int, iqr_ns: int) -> str:
        return f"{median_ns / 1e6:.2f} ± {iqr_ns / 1e6:.2f}"

    for algo in summary["algo"].unique():
        row = [str(algo)]
        for n in picks:
            s = summary[(summary["algo"] == algo) & (summary["n"] == n)]
            row.append("—" if s.empty else _cell(int(s["median_ns"].iloc[0]), int(s["iqr_ns"].iloc[0])))
        table.add_row(*row)

    console.print()
    console.print(table)
    for f in report.failures:
        console.print(f"[bold red]{f['algo']}[/] stopped at n={f['n']}: {f['status']}")
    console.print()
