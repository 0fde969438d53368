"""Text rendering of solved grids and candidate tables."""

from typing import Any, List, Sequence

from .model import CandidateStore, Puzzle

# Box-drawing junctions keyed by which of the four surrounding cells share a
# cage: a=(i, j), b=(i, j+1), c=(i+1, j), d=(i+1, j+1).
_JUNCTIONS: List[tuple] = [
    (lambda a, b, c, d: a == b == c == d, "┼"),
    (lambda a, b, c, d: a == b and c == d, "┿"),
    (lambda a, b, c, d: a == c and b == d, "╂"),
    (lambda a, b, c, d: a == b == c, "╆"),
    (lambda a, b, c, d: a == b == d, "╅"),
    (lambda a, b, c, d: a == c == d, "╄"),
    (lambda a, b, c, d: b == c == d, "╃"),
    (lambda a, b, c, d: a == b, "╈"),
    (lambda a, b, c, d: a == c, "╊"),
    (lambda a, b, c, d: b == d, "╉"),
    (lambda a, b, c, d: c == d, "╇"),
]


def format_grid(grid: Sequence[Sequence[int]]) -> str:
    """Plain framed grid, one `| v ` per cell."""
    size = len(grid)
    sep = "+---" * size + "+\n"
    out = []
    for row in grid:
        out.append(sep)
        out.append("".join(f"| {value} " for value in row) + "|\n")
    out.append(sep)
    return "".join(out)


def format_square(puzzle: Puzzle, contents: Sequence[Any], cellsize: int = 3) -> str:
    """
    Draw `contents` (row-major, one entry per cell) inside a box-drawing grid
    whose heavy lines follow the cage borders.
    """
    size = puzzle.size
    last = size - 1

    def cage_at(i: int, j: int) -> int:
        return puzzle.cell_cage[(i, j)] if i <= last and j <= last else -1

    def bar(ch: str) -> str:
        return ch * cellsize

    out = ["┏"]
    for j in range(size):
        out.append(bar("━"))
        if j < last:
            out.append("┳" if cage_at(0, j) != cage_at(0, j + 1) else "┯")
        else:
            out.append("┓\n")

    for i in range(size):
        out.append("┃")
        for j in range(size):
            out.append(f"{str(contents[i * size + j]):^{cellsize}}")
            out.append("┃" if cage_at(i, j) != cage_at(i, j + 1) else "│")
        out.append("\n")

        if i < last:
            out.append("┣" if cage_at(i, 0) != cage_at(i + 1, 0) else "┠")
            for j in range(size):
                a, b = cage_at(i, j), cage_at(i, j + 1)
                c, d = cage_at(i + 1, j), cage_at(i + 1, j + 1)
                out.append(bar("━" if a != c else "─"))
                if j < last:
                    out.append(_junction(a, b, c, d))
                else:
                    out.append("┫\n" if a != c else "┨\n")
        else:
            out.append("┗")
            for j in range(size):
                out.append(bar("━"))
                if j < last:
                    out.append("┻" if cage_at(i, j) != cage_at(i, j + 1) else "┷")
                else:
                    out.append("┛\n")
    return "".join(out)


def _junction(a: int, b: int, c: int, d: int) -> str:
    for matches, symbol in _JUNCTIONS:
        if matches(a, b, c, d):
            return symbol
    return "╋"


def format_solution(puzzle: Puzzle, grid: Sequence[Sequence[int]]) -> str:
    return format_square(puzzle, [value for row in grid for value in row])


def format_candidates(puzzle: Puzzle, store: CandidateStore) -> str:
    """Candidate sets of every cell, drawn on the cage layout."""
    sep = "," if puzzle.size > 9 else ""
    contents = [sep.join(str(v) for v in sorted(store.get(cell))) for cell in puzzle.cells()]
    width = max(len(text) for text in contents) + 2
    return format_square(puzzle, contents, cellsize=width)
