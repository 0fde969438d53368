"""KenKen puzzle model, parsing, propagation and backtracking solver."""

from .exceptions import InvalidPuzzle, KenKenError, PuzzleFormatError
from .model import Cage, CandidateStore, Op, Puzzle
from .parser import parse_puzzle
from .solver_core import Solved, SolveResult, Unsatisfiable, solve

__all__ = [
    "Cage",
    "CandidateStore",
    "InvalidPuzzle",
    "KenKenError",
    "Op",
    "Puzzle",
    "PuzzleFormatError",
    "Solved",
    "SolveResult",
    "Unsatisfiable",
    "parse_puzzle",
    "solve",
]
