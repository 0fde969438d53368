"""Puzzle model and the mutable candidate store shared by propagation and search."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from .exceptions import InvalidPuzzle

Cell = Tuple[int, int]
UndoLog = List[Tuple[Cell, int]]

MAX_SIZE = 15


class Op(Enum):
    """Cage operation; the value is the symbol used in puzzle text."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    CONST = "="


@dataclass(frozen=True)
class Cage:
    cells: Tuple[Cell, ...]
    operation: Op
    target: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "cells", tuple(tuple(c) for c in self.cells))


@dataclass(frozen=True, eq=False)
class Puzzle:
    """
    Immutable puzzle description: grid size, cages keyed by integer id and the
    cell -> cage id map, both exposed as read-only mappings. Construction
    validates the structure and raises `InvalidPuzzle` on the first problem
    found. Puzzles compare and hash by identity.
    """

    size: int
    cages: Mapping[int, Cage]
    cell_cage: Mapping[Cell, int]
    _line_peers: Dict[Cell, Tuple[Cell, ...]] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "cages", MappingProxyType(dict(self.cages)))
        object.__setattr__(self, "cell_cage", MappingProxyType(dict(self.cell_cage)))
        self._validate()
        peers = {cell: self._compute_line_peers(cell) for cell in self.cells()}
        object.__setattr__(self, "_line_peers", peers)

    @classmethod
    def from_cages(cls, size: int, cages: Iterable[Cage]) -> "Puzzle":
        cage_map: Dict[int, Cage] = {}
        cell_cage: Dict[Cell, int] = {}
        for cage_id, cage in enumerate(cages):
            cage_map[cage_id] = cage
            for cell in cage.cells:
                if cell in cell_cage:
                    raise InvalidPuzzle(
                        f"cell {cell} belongs to cages {cell_cage[cell]} and {cage_id}"
                    )
                cell_cage[cell] = cage_id
        return cls(size=size, cages=cage_map, cell_cage=cell_cage)

    def _validate(self) -> None:
        if not isinstance(self.size, int) or not 1 <= self.size <= MAX_SIZE:
            raise InvalidPuzzle(f"grid size must be in [1, {MAX_SIZE}] (found {self.size!r})")

        seen: Dict[Cell, int] = {}
        for cage_id, cage in self.cages.items():
            if not cage.cells:
                raise InvalidPuzzle(f"cage {cage_id} has no cells")
            if not isinstance(cage.operation, Op):
                raise InvalidPuzzle(f"cage {cage_id} has unknown operation {cage.operation!r}")
            if not isinstance(cage.target, int) or isinstance(cage.target, bool) or cage.target < 1:
                raise InvalidPuzzle(f"cage {cage_id} has invalid target {cage.target!r}")
            if cage.operation is Op.CONST:
                if len(cage.cells) != 1:
                    raise InvalidPuzzle(
                        f"constant cage {cage_id} must have exactly one cell, not {len(cage.cells)}"
                    )
                if cage.target > self.size:
                    raise InvalidPuzzle(
                        f"constant cage {cage_id} value {cage.target} exceeds grid size {self.size}"
                    )
            for cell in cage.cells:
                row, col = cell
                if not (0 <= row < self.size and 0 <= col < self.size):
                    raise InvalidPuzzle(f"cage {cage_id} references cell {cell} outside the grid")
                if cell in seen:
                    raise InvalidPuzzle(f"cell {cell} belongs to cages {seen[cell]} and {cage_id}")
                seen[cell] = cage_id

        for cell in self.cells():
            if cell not in seen:
                raise InvalidPuzzle(f"cell {cell} is not covered by any cage")
        if seen != dict(self.cell_cage):
            raise InvalidPuzzle("cell_cage mapping disagrees with cage cells")

    def cells(self) -> List[Cell]:
        """All cells in row-major order."""
        return [(row, col) for row in range(self.size) for col in range(self.size)]

    def lines(self) -> List[List[Cell]]:
        """Every row followed by every column."""
        rows = [[(r, c) for c in range(self.size)] for r in range(self.size)]
        cols = [[(r, c) for r in range(self.size)] for c in range(self.size)]
        return rows + cols

    def cage_of(self, cell: Cell) -> Cage:
        return self.cages[self.cell_cage[cell]]

    def line_peers(self, cell: Cell) -> Tuple[Cell, ...]:
        """Cells sharing a row or a column with `cell`, excluding it."""
        return self._line_peers[cell]

    def _compute_line_peers(self, cell: Cell) -> Tuple[Cell, ...]:
        row, col = cell
        same_row = [(row, c) for c in range(self.size) if c != col]
        same_col = [(r, col) for r in range(self.size) if r != row]
        return tuple(same_row + same_col)


class CandidateStore:
    """
    Per-cell candidate domains. Mutators return whether anything changed and,
    when given an undo log, append one `(cell, value)` record per removed value
    so a search branch can restore exactly what it took away.
    """

    def __init__(self, size: int, domains: Dict[Cell, Set[int]]):
        self.size = size
        self.domains = domains

    @classmethod
    def full(cls, puzzle: Puzzle) -> "CandidateStore":
        values = range(1, puzzle.size + 1)
        return cls(puzzle.size, {cell: set(values) for cell in puzzle.cells()})

    def get(self, cell: Cell) -> Set[int]:
        return self.domains[cell]

    def remove(self, cell: Cell, value: int, log: Optional[UndoLog] = None) -> bool:
        domain = self.domains[cell]
        if value not in domain:
            return False
        domain.discard(value)
        if log is not None:
            log.append((cell, value))
        return True

    def restrict(self, cell: Cell, allowed: Iterable[int], log: Optional[UndoLog] = None) -> bool:
        """Intersect the domain of `cell` with `allowed`."""
        allowed = set(allowed)
        dropped = [v for v in self.domains[cell] if v not in allowed]
        for value in dropped:
            self.remove(cell, value, log)
        return bool(dropped)

    def restore(self, log: UndoLog) -> None:
        while log:
            cell, value = log.pop()
            self.domains[cell].add(value)

    def snapshot(self) -> Dict[Cell, FrozenSet[int]]:
        return {cell: frozenset(values) for cell, values in self.domains.items()}

    def copy(self) -> "CandidateStore":
        return CandidateStore(self.size, {cell: set(values) for cell, values in self.domains.items()})

    def is_solved(self) -> bool:
        return all(len(values) == 1 for values in self.domains.values())

    def values(self) -> List[List[int]]:
        """Grid of the fixed values; 0 where a cell is not yet a singleton."""
        grid = [[0] * self.size for _ in range(self.size)]
        for (row, col), domain in self.domains.items():
            if len(domain) == 1:
                grid[row][col] = next(iter(domain))
        return grid
