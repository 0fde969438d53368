"""Backtracking KenKen solver with MRV, forward checking, and cage re-evaluation."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from .cages import evaluate, is_extendable
from .model import CandidateStore, Cell, Puzzle, UndoLog
from .propagation import propagate as run_propagation
from src.utils.trace import Tracer, get_tracer

Assignment = Dict[Cell, int]


@dataclass
class Solved:
    assignment: Assignment
    steps: int
    size: int

    @property
    def grid(self) -> List[List[int]]:
        return [[self.assignment[(r, c)] for c in range(self.size)] for r in range(self.size)]


@dataclass
class Unsatisfiable:
    steps: int


SolveResult = Union[Solved, Unsatisfiable]


@dataclass
class SearchState:
    """Everything one search owns: the candidate store, the assignment and the step counter."""

    puzzle: Puzzle
    store: CandidateStore
    tracer: Tracer
    assignment: Assignment = field(default_factory=dict)
    steps: int = 0


def solve(puzzle: Puzzle, propagate: bool = True, tracer: Optional[Tracer] = None) -> SolveResult:
    """
    Solve a puzzle: propagate candidate domains to a fixpoint, then search.
    Returns `Solved` with the first solution found or `Unsatisfiable`; both
    carry the number of assignment attempts made.
    """
    tracer = tracer or get_tracer()
    store = CandidateStore.full(puzzle)
    if propagate and not run_propagation(puzzle, store, tracer):
        return Unsatisfiable(steps=0)

    state = SearchState(puzzle=puzzle, store=store, tracer=tracer)
    if _backtrack(state):
        tracer.log_solution_found(depth=len(state.assignment))
        return Solved(assignment=dict(state.assignment), steps=state.steps, size=puzzle.size)

    tracer.log_unsatisfiable(reason="Search space exhausted")
    return Unsatisfiable(steps=state.steps)


def _backtrack(state: SearchState) -> bool:
    cell = _select_unassigned_cell(state)
    if cell is None:
        return True

    for value in _order_domain_values(state, cell):
        state.steps += 1
        depth = len(state.assignment) + 1
        if not _is_value_consistent(state, cell, value):
            state.tracer.log_assign(cell, value, len(state.store.get(cell)), depth, is_valid=False)
            continue
        state.tracer.log_assign(cell, value, len(state.store.get(cell)), depth)

        state.assignment[cell] = value
        undo: UndoLog = []
        if _forward_check(state, cell, value, undo) and _backtrack(state):
            return True

        state.store.restore(undo)
        del state.assignment[cell]

    state.tracer.log_backtrack(cell)
    return False


def _select_unassigned_cell(state: SearchState) -> Optional[Cell]:
    unassigned = [c for c in state.puzzle.cells() if c not in state.assignment]
    if not unassigned:
        return None
    # Minimum Remaining Values, ties broken row-major.
    return min(unassigned, key=lambda c: (len(state.store.get(c)), c))


def _order_domain_values(state: SearchState, cell: Cell) -> List[int]:
    return sorted(state.store.get(cell))


def _is_value_consistent(state: SearchState, cell: Cell, value: int) -> bool:
    assignment = state.assignment
    for peer in state.puzzle.line_peers(cell):
        if assignment.get(peer) == value:
            return False

    cage = state.puzzle.cage_of(cell)
    assigned = [value]
    remaining = 0
    for mate in cage.cells:
        if mate == cell:
            continue
        if mate in assignment:
            assigned.append(assignment[mate])
        else:
            remaining += 1
    return is_extendable(cage, assigned, remaining, state.puzzle.size)


def _forward_check(state: SearchState, cell: Cell, value: int, undo: UndoLog) -> bool:
    """
    Fix `cell` to `value`, drop the value from unassigned row/column peers and
    narrow unassigned cage-mates to what the cage still allows. Every removal
    is appended to `undo`. Returns False when some domain is wiped out.
    """
    store = state.store
    pruned = len(undo)
    store.restrict(cell, {value}, undo)

    for peer in state.puzzle.line_peers(cell):
        if peer in state.assignment:
            continue
        store.remove(peer, value, undo)
        if not store.get(peer):
            state.tracer.log_forward_check(cell, len(undo) - pruned, is_valid=False)
            return False

    cage = state.puzzle.cage_of(cell)
    open_mates = [mate for mate in cage.cells if mate not in state.assignment]
    if open_mates:
        domains = [
            {state.assignment[mate]} if mate in state.assignment else store.get(mate)
            for mate in cage.cells
        ]
        ok, achievable = evaluate(cage, domains)
        if not ok:
            state.tracer.log_forward_check(cell, len(undo) - pruned, is_valid=False)
            return False
        for mate, allowed in zip(cage.cells, achievable):
            if mate not in state.assignment:
                store.restrict(mate, allowed, undo)

    state.tracer.log_forward_check(cell, len(undo) - pruned)
    return True
