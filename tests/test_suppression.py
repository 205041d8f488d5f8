import numpy as np
import pytest

from peakscan.core.suppression import order_peaks, select_by_distance


def test_tallest_peak_suppresses_neighbours() -> None:
    out = select_by_distance(np.array([3.0, 10.0, 3.0]), np.array([1.0, 3.0, 5.0]), 3.0)
    assert out.tolist() == [1]


def test_value_ties_keep_earlier_peak() -> None:
    out = select_by_distance(np.array([5.0, 5.0]), np.array([0.0, 1.0]), 2.0)
    assert out.tolist() == [0]


def test_greedy_sweep_does_not_revisit_removed_peaks() -> None:
    # 3 and 4 are far enough apart but both sit inside the window of 5
    out = select_by_distance(np.array([3.0, 5.0, 4.0]), np.array([0.0, 2.0, 4.0]), 2.0)
    assert out.tolist() == [1]


def test_window_edges_are_inclusive_within_epsilon() -> None:
    out = select_by_distance(np.array([2.0, 1.0]), np.array([0.0, 0.1 + 0.2]), 0.3)
    assert out.tolist() == [0]


def test_peaks_just_outside_window_survive() -> None:
    out = select_by_distance(np.array([2.0, 1.0]), np.array([0.0, 1.0]), 0.999)
    assert out.tolist() == [0, 1]


@pytest.mark.parametrize(
    "sort_order, expected",
    [("none", [0, 1, 2]), ("descend", [1, 2, 0]), ("ascend", [0, 2, 1])],
)
def test_sort_orders_after_suppression(sort_order: str, expected: list[int]) -> None:
    vals = np.array([1.0, 3.0, 2.0])
    locs = np.array([0.0, 10.0, 20.0])
    assert select_by_distance(vals, locs, 1.0, sort_order).tolist() == expected


@pytest.mark.parametrize(
    "sort_order, expected",
    [("none", [0, 1, 2, 3]), ("descend", [1, 3, 2, 0]), ("ascend", [0, 2, 1, 3])],
)
def test_zero_distance_only_orders(sort_order: str, expected: list[int]) -> None:
    vals = np.array([1.0, 3.0, 2.0, 3.0])
    locs = np.array([0.0, 1.0, 2.0, 3.0])
    assert select_by_distance(vals, locs, 0.0, sort_order).tolist() == expected


def test_infinite_values_rank_first() -> None:
    vals = np.array([8.0, np.inf])
    locs = np.array([1.0, 4.0])
    assert select_by_distance(vals, locs, 3.0).tolist() == [1]


def test_empty_input() -> None:
    out = select_by_distance(np.zeros(0), np.zeros(0), 2.0, "descend")
    assert out.size == 0


def test_length_mismatch_rejected() -> None:
    with pytest.raises(ValueError, match="same length"):
        select_by_distance(np.zeros(2), np.zeros(3), 1.0)


def test_order_peaks_rejects_unknown_order() -> None:
    with pytest.raises(ValueError, match="Unsupported sort_order"):
        order_peaks(np.array([1.0, 2.0]), np.array([0, 1]), "sideways")
