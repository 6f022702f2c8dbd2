import pytest

from examtt_tools.vector_utils import (
    all_bin_combinations,
    all_least_bin_combinations,
    bin_result_key,
    index_for_value,
    indexes_equal_to,
    indexes_where,
    indexes_where_all,
    inline_key_values,
    least_bins_required,
    smallest_least_bins,
    sort_bin_results,
    sorted_index_value_pairs,
    subsets_of,
)

BINS = [(0, 10), (1, 20), (2, 20), (3, 40), (4, 60)]
SIZES = dict(BINS)


def _total(chosen):
    return sum(SIZES[index] for index in chosen)


def test_indexes_where_matches_predicate():
    values = [5, 0, 7, 0, 3]
    result = indexes_where(values, lambda v: v > 0)
    assert all(values[i] > 0 for i in result)
    assert all(values[i] <= 0 for i in set(range(len(values))) - result)


def test_indexes_where_all_requires_every_vector():
    first = [1, 0, 1, 1]
    second = [1, 1, 0, 1]
    result = indexes_where_all([first, second], lambda v: v == 1)
    for i in range(len(first)):
        assert (i in result) == (first[i] == 1 and second[i] == 1)


def test_indexes_where_all_rejects_different_sizes():
    with pytest.raises(ValueError):
        indexes_where_all([[1, 2], [1, 2, 3]], lambda v: True)


def test_indexes_where_all_rejects_no_vectors():
    with pytest.raises(ValueError):
        indexes_where_all([], lambda v: True)


def test_index_for_value_finds_value():
    values = [4, 8, 15, 8]
    index = index_for_value(values, 8)
    assert values[index] == 8
    assert index == values.index(8)


def test_index_for_value_missing_gives_minus_one():
    assert index_for_value([4, 8, 15], 99) == -1


@pytest.mark.parametrize("text", ["15", " 15", "15abc", "+15"])
def test_index_for_value_string_reads_leading_integer(text):
    values = [4, 8, 15]
    assert index_for_value(values, text) == index_for_value(values, 15)


@pytest.mark.parametrize("text", ["abc", "", "99999999999"])
def test_index_for_value_unparsable_string(text):
    assert index_for_value([4, 8, 15], text) == -1


def test_sorted_index_value_pairs_sorted_by_key():
    values = [30, 10, 50, 20, 40]
    pairs = sorted_index_value_pairs({0, 1, 3, 4}, values, key=lambda p: p[1])
    assert {i for i, _ in pairs} == {0, 1, 3, 4}
    assert all(values[i] == v for i, v in pairs)
    sizes = [v for _, v in pairs]
    assert sizes == sorted(sizes)


def test_sorted_index_value_pairs_reverse():
    values = [30, 10, 50, 20]
    pairs = sorted_index_value_pairs({0, 1, 2, 3}, values, key=lambda p: p[1], reverse=True)
    sizes = [v for _, v in pairs]
    assert sizes == sorted(sizes, reverse=True)


def test_least_bins_required_empty_and_zero():
    assert least_bins_required(10, []) == (0, 0)
    assert least_bins_required(0, BINS) == (0, 0)


def test_least_bins_required_insufficient():
    assert least_bins_required(10_000, BINS) == (0, sum(s for _, s in BINS))


def test_least_bins_required_takes_largest():
    count, total = least_bins_required(90, BINS)
    largest = [s for _, s in BINS][::-1]
    assert total == sum(largest[:count])
    assert total >= 90
    assert sum(largest[: count - 1]) < 90


def test_smallest_least_bins_invariants():
    required, _ = least_bins_required(75, BINS)
    chosen, total = smallest_least_bins(75, required, 1000, BINS)
    assert chosen
    assert len(chosen) <= required
    assert total == _total(chosen)
    assert total >= 75


def test_smallest_least_bins_not_worse_than_any_combination():
    required = 2
    chosen, total = smallest_least_bins(35, required, 1000, BINS)
    for combo in all_least_bin_combinations(35, BINS, required):
        assert total <= _total(combo)


def test_smallest_least_bins_impossible_keeps_max_sum():
    chosen, total = smallest_least_bins(10_000, 2, 500, BINS)
    assert chosen == set()
    assert total == 500


def test_all_least_bin_combinations_invariants():
    required, _ = least_bins_required(70, BINS)
    results = all_least_bin_combinations(70, BINS, required)
    assert results
    for combo in results:
        assert len(combo) <= required
        assert _total(combo) >= 70
    assert len({frozenset(c) for c in results}) == len(results)


def test_all_bin_combinations_invariants():
    results = all_bin_combinations(50, BINS)
    assert results
    for chosen, total in results:
        assert total == _total(chosen)
        assert total >= 50


def test_all_bin_combinations_impossible():
    assert all_bin_combinations(10_000, BINS) == []


def test_sort_bin_results_order():
    a = ({1, 2}, 30)
    b = ({5}, 40)
    c = ({1, 4}, 30)
    results = [a, c, b]
    sort_bin_results(results)
    assert results == [b, a, c]
    keys = [bin_result_key(r) for r in results]
    assert keys == sorted(keys)


def test_subsets_of_filters_and_limits():
    bin_results = [({1, 2}, 30), ({5}, 40), ({2, 3}, 35), ({1, 3}, 20)]
    container = {1, 2, 3}
    found = subsets_of(container, bin_results)
    assert found == [{1, 2}, {2, 3}, {1, 3}]
    assert subsets_of(container, bin_results, 1) == [{1, 2}]


def test_subsets_of_none_found():
    assert subsets_of({7}, [({1}, 10), ({2}, 10)]) is None


def test_indexes_equal_to():
    values = [1, 0, 1, 1, 0]
    result = indexes_equal_to(values, 0)
    for i, v in enumerate(values):
        assert (i in result) == (v == 0)


def test_inline_key_values_groups_consecutive():
    rows = [["a", "1"], ["a", "2"], ["b", "3"], ["a", "4"]]
    assert inline_key_values(rows) == [("a", {"1", "2"}), ("b", {"3"}), ("a", {"4"})]