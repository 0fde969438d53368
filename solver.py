"""Top-level KenKen solve interface.

Expose `solve_puzzle(puzzle)` that accepts either a pre-built Puzzle, puzzle
text, or a raw puzzle record compatible with `src.kenken.parser.parse_puzzle`.
"""

from typing import Any

from src.kenken import solver_core
from src.kenken.model import Puzzle
from src.kenken.parser import parse_puzzle
from src.kenken.solver_core import SolveResult


def solve_puzzle(puzzle: Any, propagate: bool = True) -> SolveResult:
    """
    Solve a puzzle and return `Solved` (assignment + steps) or `Unsatisfiable`.
    Accepts:
      - Puzzle instances (used directly)
      - Puzzle text or record dictionaries (parsed via `parse_puzzle`)
    """
    if isinstance(puzzle, Puzzle):
        model = puzzle
    elif isinstance(puzzle, (dict, str)):
        model = parse_puzzle(puzzle)
    else:
        raise TypeError("solve_puzzle expects a Puzzle, puzzle text or puzzle dictionary")

    return solver_core.solve(model, propagate=propagate)


__all__ = ["solve_puzzle"]
