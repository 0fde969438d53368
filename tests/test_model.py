"""Unit tests for the puzzle model and candidate store."""

import pytest

from src.kenken.exceptions import InvalidPuzzle
from src.kenken.model import Cage, CandidateStore, Op, Puzzle


def _two_by_two() -> Puzzle:
    return Puzzle.from_cages(2, [
        Cage(cells=((0, 0), (0, 1)), operation=Op.ADD, target=3),
        Cage(cells=((1, 0), (1, 1)), operation=Op.MUL, target=2),
    ])


def test_from_cages_numbers_cages_and_maps_cells():
    puzzle = _two_by_two()
    assert sorted(puzzle.cages) == [0, 1]
    assert puzzle.cell_cage[(0, 1)] == 0
    assert puzzle.cell_cage[(1, 0)] == 1
    assert puzzle.cage_of((1, 1)).operation is Op.MUL


def test_cells_are_row_major_and_peers_exclude_self():
    puzzle = Puzzle.from_cages(3, [Cage(cells=((r, c),), operation=Op.ADD, target=1)
                                   for r in range(3) for c in range(3)])
    assert puzzle.cells()[:4] == [(0, 0), (0, 1), (0, 2), (1, 0)]
    peers = set(puzzle.line_peers((1, 1)))
    assert peers == {(1, 0), (1, 2), (0, 1), (2, 1)}
    assert len(puzzle.lines()) == 6


@pytest.mark.parametrize("size", [0, 16])
def test_size_out_of_range_is_rejected(size):
    with pytest.raises(InvalidPuzzle):
        Puzzle.from_cages(size, [Cage(cells=((0, 0),), operation=Op.CONST, target=1)])


def test_uncovered_cell_is_rejected():
    with pytest.raises(InvalidPuzzle, match="not covered"):
        Puzzle.from_cages(2, [Cage(cells=((0, 0), (0, 1), (1, 0)), operation=Op.ADD, target=4)])


def test_overlapping_cages_are_rejected():
    with pytest.raises(InvalidPuzzle, match="belongs to cages"):
        Puzzle.from_cages(2, [
            Cage(cells=((0, 0), (0, 1)), operation=Op.ADD, target=3),
            Cage(cells=((0, 1), (1, 0), (1, 1)), operation=Op.ADD, target=4),
        ])


def test_cell_outside_grid_is_rejected():
    with pytest.raises(InvalidPuzzle, match="outside the grid"):
        Puzzle.from_cages(1, [Cage(cells=((0, 0), (0, 1)), operation=Op.ADD, target=3)])


def test_constant_cage_rules():
    with pytest.raises(InvalidPuzzle, match="exactly one cell"):
        Puzzle.from_cages(2, [
            Cage(cells=((0, 0), (0, 1)), operation=Op.CONST, target=1),
            Cage(cells=((1, 0), (1, 1)), operation=Op.ADD, target=3),
        ])
    with pytest.raises(InvalidPuzzle, match="exceeds grid size"):
        Puzzle.from_cages(1, [Cage(cells=((0, 0),), operation=Op.CONST, target=2)])


def test_unknown_operation_and_bad_target_are_rejected():
    with pytest.raises(InvalidPuzzle, match="unknown operation"):
        Puzzle.from_cages(1, [Cage(cells=((0, 0),), operation="%", target=1)])
    with pytest.raises(InvalidPuzzle, match="invalid target"):
        Puzzle.from_cages(1, [Cage(cells=((0, 0),), operation=Op.ADD, target=0)])


def test_mismatched_cell_cage_map_is_rejected():
    cage = Cage(cells=((0, 0),), operation=Op.CONST, target=1)
    with pytest.raises(InvalidPuzzle, match="disagrees"):
        Puzzle(size=1, cages={0: cage}, cell_cage={(0, 0): 7})


def test_store_remove_restrict_and_restore():
    puzzle = _two_by_two()
    store = CandidateStore.full(puzzle)
    before = store.snapshot()
    undo = []

    assert store.remove((0, 0), 2, undo)
    assert not store.remove((0, 0), 2, undo)
    assert store.restrict((1, 1), {1}, undo)
    assert store.get((0, 0)) == {1}
    assert store.get((1, 1)) == {1}
    assert undo == [((0, 0), 2), ((1, 1), 2)]

    store.restore(undo)
    assert undo == []
    assert store.snapshot() == before


def test_store_values_and_copy():
    puzzle = _two_by_two()
    store = CandidateStore.full(puzzle)
    for cell, value in {(0, 0): 1, (0, 1): 2, (1, 0): 2, (1, 1): 1}.items():
        store.restrict(cell, {value})
    assert store.is_solved()
    assert store.values() == [[1, 2], [2, 1]]

    clone = store.copy()
    clone.remove((0, 0), 1)
    assert store.get((0, 0)) == {1}


def test_puzzle_maps_are_read_only_and_puzzle_is_hashable():
    cage_map = {0: Cage(cells=((0, 0),), operation=Op.CONST, target=1)}
    puzzle = Puzzle(size=1, cages=cage_map, cell_cage={(0, 0): 0})

    with pytest.raises(TypeError):
        puzzle.cages[1] = cage_map[0]
    with pytest.raises(TypeError):
        puzzle.cell_cage[(0, 0)] = 5

    cage_map.clear()
    assert len(puzzle.cages) == 1
    assert {puzzle: "seen"}[puzzle] == "seen"
