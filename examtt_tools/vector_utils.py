"""Index, selection and bin-packing helpers used when assigning rooms to exams.

Bins are given as sequences of ``(index, size)`` pairs. The packing helpers
expect them ordered by ascending size, which is how callers prepare them.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Hashable, Iterable, Sequence
from itertools import groupby, islice
from typing import Any

Bin = tuple[int, int]
BinResult = tuple[set[int], int]

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


def indexes_where(values: Sequence[int], predicate: Callable[[int], bool]) -> set[int]:
    """Return the indexes of ``values`` whose value satisfies ``predicate``."""
    return indexes_where_all([values], predicate)


def indexes_where_all(
    vectors: Sequence[Sequence[int]], predicate: Callable[[int], bool]
) -> set[int]:
    """Return the indexes at which ``predicate`` holds for every vector.

    All vectors must have the same length.
    """
    if not vectors:
        raise ValueError("no vectors given")
    length = len(vectors[0])
    if any(len(vector) != length for vector in vectors):
        raise ValueError("Vectors have different sizes")
    return {
        index
        for index, column in enumerate(zip(*vectors))
        if all(predicate(value) for value in column)
    }


def _parse_int(text: str) -> int | None:
    match = _INT_PREFIX.match(text)
    if match is None:
        return None
    number = int(match.group(1))
    if not _INT_MIN <= number <= _INT_MAX:
        return None
    return number


def index_for_value(values: Sequence[int], value: int | str) -> int:
    """Return the first index holding ``value``, or -1 if it is absent.

    A string is read as a leading integer (surrounding text after the digits
    is ignored); a string without one yields -1.
    """
    if isinstance(value, str):
        parsed = _parse_int(value)
        if parsed is None:
            return -1
        value = parsed
    try:
        return list(values).index(value)
    except ValueError:
        return -1


def sorted_index_value_pairs(
    indexes: Iterable[int],
    values: Sequence[int],
    key: Callable[[tuple[int, int]], Any] | None = None,
    reverse: bool = False,
) -> list[tuple[int, int]]:
    """Pair each index with ``values[index]`` and sort the pairs."""
    pairs = [(index, values[index]) for index in sorted(indexes)]
    pairs.sort(key=key, reverse=reverse)
    return pairs


def least_bins_required(item_size: int, bins: Sequence[Bin]) -> tuple[int, int]:
    """Return how many of the largest bins are needed for the item, and their sum.

    If the bins together cannot hold the item, the count is 0 and the sum is
    the total of all bins.
    """
    if not bins or item_size == 0:
        return 0, 0
    total = 0
    for count, (_, size) in enumerate(reversed(bins), start=1):
        total += size
        if total >= item_size:
            return count, total
    return 0, total


def smallest_least_bins(
    item_size: int, bins_required: int, max_sum: int, bins: Sequence[Bin]
) -> tuple[set[int], int]:
    """Find the combination of at most ``bins_required`` bins with the smallest
    capacity that still holds the item, capped at ``max_sum``.

    Returns the chosen bin indexes and their summed size. When no combination
    fits, the set is empty and ``max_sum`` is returned unchanged.
    """
    bins = list(bins)
    best: set[int] = set()
    best_sum = max_sum

    def search(chosen: tuple[int, ...], start: int, total: int) -> None:
        nonlocal best, best_sum
        if item_size <= total <= best_sum:
            best_sum = total
            best = set(chosen)
        if len(chosen) >= bins_required:
            return
        limit = len(bins) - bins_required + len(chosen) + 1
        i = start
        while i < limit:
            index, size = bins[i]
            search(chosen + (index,), i + 1, total + size)
            # Swapping a bin for one of equal size cannot give a new sum.
            if i + 1 < limit and bins[i + 1][1] == size:
                i += 1
            i += 1

    search((), 0, 0)
    return best, best_sum


def all_least_bin_combinations(
    item_size: int, bins: Sequence[Bin], bins_required: int
) -> list[set[int]]:
    """Return every combination of at most ``bins_required`` bins that holds the item."""
    bins = list(bins)
    results: list[set[int]] = []

    def search(chosen: tuple[int, ...], start: int, total: int) -> None:
        if total >= item_size:
            results.append(set(chosen))
            return
        if len(chosen) >= bins_required:
            return
        stop = max(len(bins) - bins_required + len(chosen) + 1, 0)
        for position, (index, size) in enumerate(islice(bins, start, stop), start):
            search(chosen + (index,), position + 1, total + size)

    search((), 0, 0)
    return results


def all_bin_combinations(item_size: int, bins: Sequence[Bin]) -> list[BinResult]:
    """Return every minimal run of bins that holds the item, with its summed size."""
    bins = list(bins)

    def search(chosen: tuple[int, ...], start: int, total: int) -> list[BinResult]:
        if total >= item_size:
            return [(set(chosen), total)]
        found: list[BinResult] = []
        for position, (index, size) in enumerate(islice(bins, start, None), start):
            sub_results = search(chosen + (index,), position + 1, total + size)
            if not sub_results:
                break
            found.extend(sub_results)
        return found

    return search((), 0, 0)


def bin_result_key(result: BinResult) -> tuple[int, int, int]:
    """Sort key: fewest bins, then smallest sum, then narrowest index spread."""
    chosen, total = result
    spread = max(chosen) - min(chosen) if chosen else 0
    return len(chosen), total, spread


def sort_bin_results(results: list[BinResult]) -> None:
    """Sort bin results in place by :func:`bin_result_key`."""
    results.sort(key=bin_result_key)


def subsets_of(
    container: set[int], bin_results: Iterable[BinResult], limit: int = 0
) -> list[set[int]] | None:
    """Return the bin sets that lie within ``container``, in order.

    At most ``limit`` sets are returned (0 means no limit). Returns ``None``
    when none fits.
    """
    found: list[set[int]] | None = None
    for chosen, _ in bin_results:
        if not set(chosen) <= container:
            continue
        if found is None:
            found = []
        found.append(set(chosen))
        if len(found) == limit:
            break
    return found


def indexes_equal_to(values: Sequence[int], compare_value: int) -> set[int]:
    """Return the indexes whose value equals ``compare_value``."""
    return {index for index, value in enumerate(values) if value == compare_value}


def inline_key_values(rows: Iterable[Sequence[Hashable]]) -> list[tuple[Any, set[Any]]]:
    """Group consecutive ``(key, value, ...)`` rows sharing a key into ``(key, values)``."""
    return [
        (key, {row[1] for row in group})
        for key, group in groupby(rows, key=lambda row: row[0])
    ]