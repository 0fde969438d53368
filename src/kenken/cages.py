"""Cage arithmetic: evaluation, achievable-value enumeration and search-time bound checks."""

from itertools import product
from typing import Iterator, List, Optional, Sequence, Set, Tuple

from .model import Cage, Op

Combination = Tuple[int, ...]


def apply_operation(op: Op, values: Sequence[int]) -> Optional[int]:
    """
    Combine cage values canonically. SUB and DIV fold over the values sorted in
    descending order and return None as soon as an intermediate result stops
    being a positive integer.
    """
    if not values:
        return None
    if op is Op.ADD:
        return sum(values)
    if op is Op.MUL:
        result = 1
        for value in values:
            result *= value
        return result
    if op is Op.CONST:
        return values[0] if len(values) == 1 else None

    ordered = sorted(values, reverse=True)
    result = ordered[0]
    for value in ordered[1:]:
        if op is Op.SUB:
            result -= value
            if result < 1:
                return None
        else:
            if result % value:
                return None
            result //= value
    return result


def satisfies(cage: Cage, values: Sequence[int]) -> bool:
    if len(values) != len(cage.cells):
        return False
    return apply_operation(cage.operation, values) == cage.target


def evaluate(cage: Cage, domains: Sequence[Set[int]]) -> Tuple[bool, List[Set[int]]]:
    """
    Return whether some combination drawn from `domains` (one value per cage
    cell, same order as `cage.cells`) satisfies the cage, together with the
    per-cell values that occur in at least one satisfying combination.
    """
    achievable: List[Set[int]] = [set() for _ in domains]
    if any(not domain for domain in domains):
        return False, achievable

    # Enumeration can stop once every candidate is known to be supported.
    unsupported = sum(len(domain) for domain in domains)
    for combination in _combinations(cage, domains):
        for position, value in enumerate(combination):
            if value not in achievable[position]:
                achievable[position].add(value)
                unsupported -= 1
        if not unsupported:
            break

    return any(achievable), achievable


def _combinations(cage: Cage, domains: Sequence[Set[int]]) -> Iterator[Combination]:
    ordered = [sorted(domain) for domain in domains]
    if cage.operation is Op.ADD:
        return _sum_combinations(ordered, cage.target)
    if cage.operation is Op.MUL:
        return _product_combinations(ordered, cage.target)
    return (combo for combo in product(*ordered) if satisfies(cage, combo))


def _sum_combinations(ordered: List[List[int]], target: int) -> Iterator[Combination]:
    n = len(ordered)
    # min_rest[i] / max_rest[i]: bounds on the sum of positions i..n-1
    min_rest = [0] * (n + 1)
    max_rest = [0] * (n + 1)
    for i in range(n - 1, -1, -1):
        min_rest[i] = min_rest[i + 1] + ordered[i][0]
        max_rest[i] = max_rest[i + 1] + ordered[i][-1]

    chosen: List[int] = []

    def walk(i: int, total: int) -> Iterator[Combination]:
        if i == n:
            if total == target:
                yield tuple(chosen)
            return
        for value in ordered[i]:
            running = total + value
            if running + min_rest[i + 1] > target:
                break
            if running + max_rest[i + 1] < target:
                continue
            chosen.append(value)
            yield from walk(i + 1, running)
            chosen.pop()

    return walk(0, 0)


def _product_combinations(ordered: List[List[int]], target: int) -> Iterator[Combination]:
    n = len(ordered)
    chosen: List[int] = []

    def walk(i: int, total: int) -> Iterator[Combination]:
        if i == n:
            if total == target:
                yield tuple(chosen)
            return
        for value in ordered[i]:
            running = total * value
            if target % running:
                continue
            chosen.append(value)
            yield from walk(i + 1, running)
            chosen.pop()

    return walk(0, 1)


def is_extendable(cage: Cage, assigned: Sequence[int], remaining: int, size: int) -> bool:
    """
    Cheap check that the assigned cage values can still be completed by
    `remaining` more values in [1, size]. Exact once the cage is full.
    """
    if remaining == 0:
        return len(assigned) == len(cage.cells) and apply_operation(cage.operation, assigned) == cage.target
    if not assigned:
        return True

    op, target = cage.operation, cage.target
    if op is Op.ADD:
        total = sum(assigned)
        return total + remaining <= target <= total + remaining * size
    if op is Op.MUL:
        total = apply_operation(op, assigned)
        return target % total == 0 and target // total <= size ** remaining
    if len(cage.cells) == 2:
        value = assigned[0]
        if op is Op.SUB:
            return value - target >= 1 or value + target <= size
        if op is Op.DIV:
            return value % target == 0 or value * target <= size
    return True
