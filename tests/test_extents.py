import numpy as np
import pytest
from scipy.signal import find_peaks as scipy_find_peaks
from scipy.signal import peak_prominences, peak_widths

from peakscan.core.compute import find_peaks
from peakscan.core.extents import find_extents, find_peak_bases, find_peak_widths
from peakscan.core.extrema import find_local_extrema


def _extents(y, x=None, **kwargs):
    y = np.asarray(y, dtype=float)
    x = np.arange(y.size, dtype=float) if x is None else np.asarray(x, dtype=float)
    finite, inf, inflect = find_local_extrema(y)
    return find_extents(y, x, finite, finite, inf, inflect, **kwargs)


def test_bases_of_isolated_peaks() -> None:
    y = np.array([0.0, 5.0, 0.0, 10.0, 0.0, 5.0, 0.0])
    finite, _, inflect = find_local_extrema(y)
    levels, left, right = find_peak_bases(y, finite, finite, inflect)
    np.testing.assert_allclose(levels, [0.0, 0.0, 0.0])
    assert left.tolist() == [0, 2, 4]
    assert right.tolist() == [2, 4, 6]


def test_prominence_stops_at_higher_peak() -> None:
    ext = _extents([0.0, 8.0, 6.0, 10.0, 0.0])
    assert ext.indices.tolist() == [1, 3]
    np.testing.assert_allclose(ext.bases, [6.0, 0.0])


def test_equal_peaks_do_not_stop_prominence_but_bound_width() -> None:
    y = np.array([0.0, 5.0, 1.0, 5.0, 0.0])
    finite, _, inflect = find_local_extrema(y)
    levels, left, right = find_peak_bases(y, finite, finite, inflect)
    np.testing.assert_allclose(levels, [0.0, 0.0])
    assert left.tolist() == [0, 2]
    assert right.tolist() == [2, 4]

    ext = _extents(y)
    np.testing.assert_allclose(ext.width_bounds_x[0], [0.5, 1.625])
    np.testing.assert_allclose(ext.width_bounds_x[1], [2.375, 3.5])


def test_half_prominence_interpolation() -> None:
    ext = _extents([0.0, 5.0, 0.0, 0.0, 4.0, 8.0, 4.0, 0.0])
    assert ext.indices.tolist() == [1, 5]
    np.testing.assert_allclose(ext.width_bounds_x, [[0.5, 1.5], [4.0, 6.0]])
    np.testing.assert_allclose(ext.base_bounds_x, [[0.0, 2.0], [2.0, 7.0]])
    np.testing.assert_allclose(ext.base_bounds_y, [[0.0, 0.0], [0.0, 0.0]])


def test_crossing_uses_x_coordinates() -> None:
    x = np.array([0.0, 1.0, 3.0])
    ext = _extents([0.0, 4.0, 0.0], x=x)
    np.testing.assert_allclose(ext.width_bounds_x, [[0.5, 2.0]])


def test_interpolation_toward_raised_base() -> None:
    ext = _extents([0.0, 8.0, 6.0, 10.0, 0.0])
    np.testing.assert_allclose(ext.width_bounds_x[0], [0.875, 1.5])


def test_crossing_pins_to_saddle_when_reference_not_reached() -> None:
    # the saddle at 4 never drops below the half-prominence line of 2.5
    ext = _extents([0.0, 5.0, 4.0, 5.0, 0.0])
    np.testing.assert_allclose(ext.width_bounds_x, [[0.5, 2.0], [2.0, 3.5]])
    np.testing.assert_allclose(ext.bases, [0.0, 0.0])


def test_half_height_clips_each_side_independently() -> None:
    ext = _extents([0.0, 8.0, 6.0, 10.0, 0.0], width_reference="halfheight")
    # short peak: right side clipped at the shared valley (index 2)
    np.testing.assert_allclose(ext.width_bounds_x[0], [0.5, 2.0])
    # tall peak: left side clipped at the same valley, right side free
    np.testing.assert_allclose(ext.width_bounds_x[1], [2.0, 3.5])
    np.testing.assert_allclose(ext.base_bounds_x[1], [2.0, 4.0])


def test_half_height_borders_between_three_peaks() -> None:
    y = np.array([0.0, 4.0, 1.0, 10.0, 3.0, 6.0, 0.0])
    finite, _, inflect = find_local_extrema(y)
    levels, left, right = find_peak_bases(y, finite, finite, inflect)
    bounds, lo, hi = find_peak_widths(
        y, np.arange(y.size, dtype=float), finite, levels, left, right, "halfheight"
    )
    assert lo.tolist() == [0, 2, 4]
    assert hi.tolist() == [2, 4, 6]
    np.testing.assert_allclose(
        bounds,
        [[0.5, 2.0 - 1.0 / 3.0], [2.0 + 4.0 / 9.0, 4.0 - 2.0 / 7.0], [4.0, 5.5]],
    )


def test_prominence_filter_is_inclusive() -> None:
    y = [0.0, 2.0, 1.0, 6.0, 0.0]
    assert _extents(y, min_prominence=1.0).indices.tolist() == [1, 3]
    assert _extents(y, min_prominence=1.5).indices.tolist() == [3]


def test_width_window_filter() -> None:
    y = [0.0, 5.0, 0.0, 0.0, 4.0, 8.0, 4.0, 0.0]
    assert _extents(y, min_width=1.5).indices.tolist() == [5]
    assert _extents(y, max_width=1.5).indices.tolist() == [1]
    assert _extents(y, min_width=1.0, max_width=2.0).indices.tolist() == [1, 5]


def test_infinite_peak_extents() -> None:
    ext = _extents([0.0, 1.0, np.inf, 1.0, 0.0])
    assert ext.indices.tolist() == [2]
    np.testing.assert_allclose(ext.bases, [0.0])
    np.testing.assert_allclose(ext.base_bounds_x, [[1.5, 2.5]])
    np.testing.assert_allclose(ext.base_bounds_y, [[1.0, 1.0]])
    np.testing.assert_allclose(ext.width_bounds_x, [[1.5, 2.5]])


def test_infinite_sample_acts_as_border_for_neighbours() -> None:
    # left scan of the peak at index 3 stops at the +Inf border
    ext = _extents([0.0, np.inf, 2.0, 5.0, 1.0])
    assert ext.indices.tolist() == [1, 3]
    np.testing.assert_allclose(ext.bases, [0.0, 2.0])


def test_negative_infinity_valley_gives_infinite_prominence() -> None:
    res = find_peaks([-np.inf, 3.0, -np.inf, 3.0, -np.inf], return_extents=True)
    assert res.indices.tolist() == [1, 3]
    assert np.all(np.isposinf(res.prominences))
    np.testing.assert_allclose(res.width_bounds_x, [[0.5, 1.5], [2.5, 3.5]])


def test_no_candidates_gives_empty_extents() -> None:
    ext = _extents([1.0, 2.0, 3.0])
    assert ext.indices.size == 0
    assert ext.width_bounds_x.shape == (0, 2)
    assert ext.base_bounds_y.shape == (0, 2)


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_matches_scipy_on_random_signal(seed: int) -> None:
    rng = np.random.default_rng(seed)
    y = rng.normal(size=400)

    res = find_peaks(y, return_extents=True)
    ref_peaks, _ = scipy_find_peaks(y)
    assert res.indices.tolist() == ref_peaks.tolist()

    prom_data = peak_prominences(y, ref_peaks)
    np.testing.assert_allclose(res.prominences, prom_data[0], rtol=0, atol=1e-12)

    ref_widths = peak_widths(y, ref_peaks, rel_height=0.5, prominence_data=prom_data)[0]
    np.testing.assert_allclose(res.widths, ref_widths, rtol=0, atol=1e-9)
