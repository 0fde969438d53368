"""Puzzle parser: convert the textual KenKen description into a `Puzzle`.

Format:
- N lines of N characters describing the grid; a letter names a cage and a
  digit is a single-cell constant cage holding that value
- a blank line
- one rule per letter cage, e.g. "a: 12+" (operators + - * /)
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Tuple, Union

from .exceptions import PuzzleFormatError
from .model import MAX_SIZE, Cage, Cell, Op, Puzzle

_RULE_RE = re.compile(r"^(?P<key>\S)\s*:\s*(?P<target>\S*?)\s*(?P<op>\S)$")


def parse_puzzle(puzzle: Union[str, Dict[str, Any]]) -> Puzzle:
    """Parse puzzle text, or a record dict carrying it under "puzzle"."""
    if isinstance(puzzle, dict):
        text = str(puzzle.get("puzzle", "") or "")
    elif isinstance(puzzle, str):
        text = puzzle
    else:
        raise TypeError("parse_puzzle expects puzzle text or a puzzle dictionary")

    grid_lines, rule_lines = _split_sections(text)
    size = len(grid_lines[0]) if grid_lines else 0
    if not 1 <= size <= MAX_SIZE:
        raise PuzzleFormatError(f"kenken size must be in [1, {MAX_SIZE}] (found {size})")
    if len(grid_lines) != size:
        raise PuzzleFormatError(f"grid must have {size} lines, not {len(grid_lines)}")

    # 1) Grid: collect cells per letter, digits become constant cages directly
    order: List[Tuple[str, Union[str, Cell]]] = []
    letter_cells: Dict[str, List[Cell]] = {}
    for row, line in enumerate(grid_lines):
        if len(line) != size:
            raise PuzzleFormatError(
                f"unequal line lengths (expected {size}, found {len(line)})"
            )
        for col, ch in enumerate(line):
            if ch in "0123456789":
                order.append(("const", (row, col)))
            elif ch.isalpha():
                if ch not in letter_cells:
                    letter_cells[ch] = []
                    order.append(("letter", ch))
                letter_cells[ch].append((row, col))
            else:
                raise PuzzleFormatError(f"invalid grid character {ch!r} at {(row, col)}")

    # 2) Rules
    rules: Dict[str, Tuple[Op, int]] = {}
    for line in rule_lines:
        key, op, target = _parse_rule(line)
        if key not in letter_cells:
            raise PuzzleFormatError(f"reference to undefined cage {key}")
        if key in rules:
            raise PuzzleFormatError(f"duplicate rule for cage {key}")
        rules[key] = (op, target)

    # 3) Cages in row-major order of first appearance
    cages: List[Cage] = []
    for kind, ref in order:
        if kind == "const":
            row, col = ref
            cages.append(Cage(cells=(ref,), operation=Op.CONST, target=int(grid_lines[row][col])))
            continue
        if ref not in rules:
            raise PuzzleFormatError(f"found cage ({ref}) without defined goal")
        op, target = rules[ref]
        cages.append(Cage(cells=tuple(letter_cells[ref]), operation=op, target=target))

    return Puzzle.from_cages(size, cages)


def _split_sections(text: str) -> Tuple[List[str], List[str]]:
    lines = [line.strip() for line in text.strip().splitlines()]
    if "" in lines:
        split_at = lines.index("")
        grid, rules = lines[:split_at], lines[split_at + 1:]
    else:
        grid, rules = lines, []
    # rules end at the next blank line
    if "" in rules:
        rules = rules[:rules.index("")]
    return grid, rules


def _parse_rule(line: str) -> Tuple[str, Op, int]:
    match = _RULE_RE.match(line)
    if not match:
        raise PuzzleFormatError(f"invalid line with cage: {line}")
    key, raw_target, symbol = match.group("key"), match.group("target"), match.group("op")
    if symbol == Op.CONST.value or symbol not in {op.value for op in Op}:
        raise PuzzleFormatError(f"invalid operator: {symbol}")
    try:
        target = int(raw_target)
    except ValueError:
        raise PuzzleFormatError(f"invalid number: {raw_target}") from None
    return key, Op(symbol), target
