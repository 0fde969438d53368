"""Unit tests for the backtracking search helpers."""

from src.kenken import solver_core
from src.kenken.model import Cage, CandidateStore, Op, Puzzle
from src.kenken.parser import parse_puzzle
from src.utils.trace import Tracer

CANONICAL = """\
abbc
a2cc
ddef
4def

a: 1-
b: 3-
c: 36*
d: 7+
e: 2/
f: 2/
"""


def _state(puzzle: Puzzle) -> solver_core.SearchState:
    return solver_core.SearchState(
        puzzle=puzzle,
        store=CandidateStore.full(puzzle),
        tracer=Tracer(enabled=False),
    )


def _column_pairs_puzzle() -> Puzzle:
    # Column 1 asks for 5 from two distinct values in [1, 2]: no solution.
    return Puzzle.from_cages(2, [
        Cage(cells=((0, 0), (1, 0)), operation=Op.ADD, target=3),
        Cage(cells=((0, 1), (1, 1)), operation=Op.ADD, target=5),
    ])


def test_mrv_picks_smallest_domain_then_row_major():
    state = _state(parse_puzzle(CANONICAL))
    state.store.restrict((2, 3), {1, 2})
    state.store.restrict((3, 1), {1, 3})
    assert solver_core._select_unassigned_cell(state) == (2, 3)

    state.assignment[(2, 3)] = 1
    assert solver_core._select_unassigned_cell(state) == (3, 1)


def test_select_returns_none_when_everything_is_assigned():
    state = _state(_column_pairs_puzzle())
    state.assignment.update({(0, 0): 1, (0, 1): 2, (1, 0): 2, (1, 1): 1})
    assert solver_core._select_unassigned_cell(state) is None


def test_value_consistency_checks_lines_and_cage_bounds():
    state = _state(parse_puzzle(CANONICAL))
    state.assignment[(0, 0)] = 2
    assert not solver_core._is_value_consistent(state, (0, 3), 2)
    assert not solver_core._is_value_consistent(state, (3, 0), 2)
    # cage a is 1-: with 2 fixed the partner can be 1 or 3
    assert solver_core._is_value_consistent(state, (1, 0), 1)
    assert not solver_core._is_value_consistent(state, (1, 0), 2)


def test_forward_check_prunes_line_peers_and_narrows_cage_mates():
    state = _state(parse_puzzle(CANONICAL))
    undo = []
    state.assignment[(0, 3)] = 3

    assert solver_core._forward_check(state, (0, 3), 3, undo)
    assert state.store.get((0, 3)) == {3}
    assert 3 not in state.store.get((0, 0))
    assert 3 not in state.store.get((3, 3))
    # (1, 2) shares cage c with (0, 3) but no line, so it may repeat the 3
    assert state.store.get((1, 2)) == {3}
    assert state.store.get((1, 3)) == {4}


def test_forward_check_undo_restores_domains():
    state = _state(parse_puzzle(CANONICAL))
    before = state.store.snapshot()
    undo = []
    state.assignment[(0, 3)] = 3
    solver_core._forward_check(state, (0, 3), 3, undo)
    assert undo

    state.store.restore(undo)
    assert state.store.snapshot() == before


def test_forward_check_fails_on_wiped_out_peer():
    state = _state(_column_pairs_puzzle())
    state.store.restrict((0, 1), {1})
    undo = []
    state.assignment[(0, 0)] = 1
    assert not solver_core._forward_check(state, (0, 0), 1, undo)


def test_failed_search_leaves_no_domain_changes():
    state = _state(_column_pairs_puzzle())
    before = state.store.snapshot()

    assert not solver_core._backtrack(state)
    assert state.store.snapshot() == before
    assert state.assignment == {}
    assert state.steps > 0


def test_each_attempt_counts_one_step():
    puzzle = Puzzle.from_cages(2, [
        Cage(cells=((0, 0), (0, 1)), operation=Op.ADD, target=50),
        Cage(cells=((1, 0), (1, 1)), operation=Op.ADD, target=3),
    ])
    state = _state(puzzle)
    assert not solver_core._backtrack(state)
    # both candidates of (0, 0) are tried and rejected by the cage bound
    assert state.steps == 2
