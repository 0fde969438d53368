"""CLI entrypoint: load puzzle(s), run solver, and report steps and timing."""

import argparse
import csv
import os
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from solver import solve_puzzle
from src.kenken.exceptions import KenKenError
from src.kenken.loader import load_puzzles
from src.kenken.model import CandidateStore
from src.kenken.parser import parse_puzzle
from src.kenken.propagation import propagate
from src.kenken.render import format_candidates, format_grid, format_solution
from src.kenken.solver_core import Solved
from src.utils.trace import Tracer, get_tracer, reset_tracer

PUZZLE_SUFFIXES = {".txt", ".ken", ".json", ".jsonl", ".csv", ".parquet"}


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Solve KenKen puzzles")
    parser.add_argument("inputs", type=Path, nargs="+", help="Puzzle files or directories of puzzles")
    parser.add_argument("--output", type=Path, default=None, help="Optional CSV path for per-puzzle results")
    parser.add_argument(
        "--trace-dir",
        type=Path,
        default=os.environ.get("KENKEN_TRACE_DIR") or None,
        help="Write one solver trace CSV per puzzle into this directory.",
    )
    parser.add_argument(
        "--no-propagation",
        action="store_true",
        help="Skip constraint propagation and search from full domains.",
    )
    parser.add_argument(
        "--style",
        choices=["box", "plain"],
        default="box",
        help="Grid style used when a single solution is printed.",
    )
    parser.add_argument(
        "--show-candidates",
        action="store_true",
        help="Print the candidate table left by propagation before solving.",
    )
    return parser.parse_args(argv)


def collect_puzzles(inputs: List[Path]) -> List[Dict[str, Any]]:
    puzzles: List[Dict[str, Any]] = []
    for path in inputs:
        if path.is_dir():
            files = [p for p in sorted(path.iterdir()) if p.suffix in PUZZLE_SUFFIXES]
        else:
            files = [path]
        for file_path in files:
            try:
                puzzles.extend(load_puzzles(str(file_path)))
            except (OSError, ValueError) as e:
                print(f"*** Error loading {file_path}: {e}")
    return puzzles


def format_summary(puzzle_id: str, steps: int, elapsed_ms: float) -> str:
    return f"{puzzle_id:<20} {steps:8} steps {elapsed_ms:10.4f} ms"


def write_results_csv(results, output_path: Path):
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "solution", "steps", "elapsed_ms"])

        for r in results:
            writer.writerow([
                r["id"],
                r["solution"],
                r["steps"],
                f"{r['elapsed_ms']:.4f}",
            ])


def _flatten(grid: List[List[int]]) -> str:
    return "/".join("".join(f"{v:x}" for v in row) for row in grid)


def show_candidates(model) -> None:
    store = CandidateStore.full(model)
    propagate(model, store, Tracer(enabled=False))
    print(format_candidates(model, store), end="")


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    puzzles = collect_puzzles(args.inputs)
    show_solution = len(puzzles) == 1
    results = []

    for record in puzzles:
        puzzle_id = record.get("id", "unknown")
        reset_tracer()
        tracer = get_tracer()

        try:
            model = parse_puzzle(record)
        except KenKenError as e:
            print(f"*** Error loading {puzzle_id}: {e}")
            continue

        if args.show_candidates:
            show_candidates(model)

        start = time.perf_counter()
        result = solve_puzzle(model, propagate=not args.no_propagation)
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        if args.trace_dir:
            tracer.to_csv(Path(args.trace_dir) / f"{puzzle_id}.csv")

        if not isinstance(result, Solved):
            print(f"*** Error solving {puzzle_id}: found no solution")
            results.append({"id": puzzle_id, "solution": "", "steps": result.steps, "elapsed_ms": elapsed_ms})
            continue

        if show_solution:
            if args.style == "plain":
                print(format_grid(result.grid), end="")
            else:
                print(format_solution(model, result.grid), end="")
        print(format_summary(puzzle_id, result.steps, elapsed_ms))
        results.append({
            "id": puzzle_id,
            "solution": _flatten(result.grid),
            "steps": result.steps,
            "elapsed_ms": elapsed_ms,
        })

    if args.output:
        write_results_csv(results, args.output)
    return results


if __name__ == "__main__":
    main()
