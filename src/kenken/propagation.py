"""Constraint propagation to a fixpoint over cage and Latin-square rules."""

from typing import List, Optional

from .cages import evaluate
from .model import CandidateStore, Cell, Puzzle
from src.utils.trace import Tracer, get_tracer


def propagate(puzzle: Puzzle, store: CandidateStore, tracer: Optional[Tracer] = None) -> bool:
    """
    Narrow `store` in place until a full pass changes nothing.
    Returns False as soon as some cell, cage or line is proven infeasible.
    """
    tracer = tracer or get_tracer()
    pass_number = 0
    while True:
        pass_number += 1
        before = _candidate_count(store)

        if not _reduce_cages(puzzle, store):
            tracer.log_unsatisfiable(reason=f"Cage rejected in propagation pass {pass_number}")
            return False
        if not _eliminate_singles(puzzle, store):
            tracer.log_unsatisfiable(reason=f"Empty domain in propagation pass {pass_number}")
            return False
        if not _eliminate_pairs(puzzle, store):
            tracer.log_unsatisfiable(reason=f"Empty domain in propagation pass {pass_number}")
            return False
        if not _lines_complete(puzzle, store):
            tracer.log_unsatisfiable(reason=f"Value without a home in propagation pass {pass_number}")
            return False

        removed = before - _candidate_count(store)
        tracer.log_propagation_pass(pass_number=pass_number, values_removed=removed)
        if not removed:
            return True


def _candidate_count(store: CandidateStore) -> int:
    return sum(len(values) for values in store.domains.values())


def _reduce_cages(puzzle: Puzzle, store: CandidateStore) -> bool:
    """Keep only values achievable in some satisfying completion of each cage."""
    for cage_id in sorted(puzzle.cages):
        cage = puzzle.cages[cage_id]
        ok, achievable = evaluate(cage, [store.get(cell) for cell in cage.cells])
        if not ok:
            return False
        for cell, allowed in zip(cage.cells, achievable):
            store.restrict(cell, allowed)
    return True


def _eliminate_singles(puzzle: Puzzle, store: CandidateStore) -> bool:
    """Remove every fixed value from the other cells of its row and column."""
    pending: List[Cell] = [cell for cell in puzzle.cells() if len(store.get(cell)) == 1]
    while pending:
        cell = pending.pop()
        domain = store.get(cell)
        if not domain:
            return False
        value = next(iter(domain))
        for peer in puzzle.line_peers(cell):
            if store.remove(peer, value):
                remaining = len(store.get(peer))
                if remaining == 0:
                    return False
                if remaining == 1:
                    pending.append(peer)
    return True


def _eliminate_pairs(puzzle: Puzzle, store: CandidateStore) -> bool:
    """Two cells of a line sharing the same two candidates claim both values."""
    for line in puzzle.lines():
        for i, first in enumerate(line):
            pair = store.get(first)
            if len(pair) != 2:
                continue
            for second in line[i + 1:]:
                if store.get(second) != pair:
                    continue
                claimed = set(pair)
                for other in line:
                    if other in (first, second):
                        continue
                    for value in claimed:
                        store.remove(other, value)
                    if not store.get(other):
                        return False
    return True


def _lines_complete(puzzle: Puzzle, store: CandidateStore) -> bool:
    """Every value 1..N must still fit somewhere in every row and column."""
    values = set(range(1, puzzle.size + 1))
    for line in puzzle.lines():
        available = set()
        for cell in line:
            available |= store.get(cell)
        if available != values:
            return False
    return True
