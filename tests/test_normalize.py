import numpy as np
import pytest

from normalize import normalize_points, robust_frame
from order_stats import rank_index


def _axes(points):
    pts = np.asarray(points, dtype=np.float64)
    return [pts[:, i].copy() for i in range(3)]


def test_three_points_on_x_axis():
    xs, ys, zs = _axes([(0, 0, 0), (10, 0, 0), (20, 0, 0)])
    frame = robust_frame(xs, ys, zs)
    np.testing.assert_array_equal(frame.center, [10.0, 0.0, 0.0])
    # floor(0.05*2) = 0 and floor(0.95*2) = 1
    assert frame.low[0] == 0.0
    assert frame.high[0] == 10.0
    np.testing.assert_array_equal(frame.extent, [10.0, 0.0, 0.0])
    assert frame.scale == pytest.approx(0.1)


def test_identical_points_fall_back_to_unit_scale():
    xs, ys, zs = _axes([(5, 5, 5)] * 3)
    frame = robust_frame(xs, ys, zs)
    np.testing.assert_array_equal(frame.center, [5.0, 5.0, 5.0])
    np.testing.assert_array_equal(frame.extent, [0.0, 0.0, 0.0])
    assert frame.scale == 1.0


def test_tiny_extent_guard():
    xs = np.array([0.0, 5e-7, 1e-6, 1e-6])
    frame = robust_frame(xs, np.zeros(4), np.zeros(4), lower=0.0, upper=1.0)
    assert frame.extent[0] == pytest.approx(1e-6)
    assert frame.scale == 1.0

    xs = np.array([0.0, 1e-3])
    frame = robust_frame(xs, np.zeros(2), np.zeros(2), lower=0.0, upper=1.0)
    assert frame.scale == pytest.approx(1000.0)


def test_scale_uses_largest_axis_and_is_positive():
    rng = np.random.default_rng(0)
    pts = rng.normal(size=(1000, 3)) * np.array([1.0, 4.0, 0.5])
    xs, ys, zs = _axes(pts)
    frame = robust_frame(xs, ys, zs)
    assert frame.scale > 0
    assert np.argmax(frame.extent) == 1
    assert frame.scale == pytest.approx(1.0 / frame.extent.max())


def test_outliers_do_not_move_center_or_scale_much():
    rng = np.random.default_rng(1)
    pts = rng.uniform(-1, 1, size=(1000, 3))
    clean = robust_frame(*_axes(pts))
    dirty_pts = pts.copy()
    dirty_pts[:20] = 1e6
    dirty = robust_frame(*_axes(dirty_pts))
    assert np.abs(dirty.center - clean.center).max() < 0.1
    assert dirty.scale == pytest.approx(clean.scale, rel=0.1)


def test_matches_sorted_reference():
    rng = np.random.default_rng(5)
    pts = rng.normal(size=(301, 3))
    frame = robust_frame(*_axes(pts))
    s = np.sort(pts, axis=0)
    np.testing.assert_array_equal(frame.center, s[150])
    np.testing.assert_array_equal(frame.low, s[rank_index(301, 0.05)])
    np.testing.assert_array_equal(frame.high, s[rank_index(301, 0.95)])


def test_copy_leaves_inputs_untouched_and_agrees():
    rng = np.random.default_rng(9)
    pts = rng.normal(size=(200, 3))
    xs, ys, zs = _axes(pts)
    a = robust_frame(xs, ys, zs, copy=True)
    np.testing.assert_array_equal(xs, pts[:, 0])
    b = robust_frame(xs, ys, zs)
    np.testing.assert_array_equal(a.center, b.center)
    assert a.scale == b.scale


@pytest.mark.parametrize("lower,upper", [(-0.1, 0.9), (0.6, 0.4), (0.1, 1.5)])
def test_bad_percentiles(lower, upper):
    xs, ys, zs = _axes([(0, 0, 0), (1, 1, 1)])
    with pytest.raises(ValueError):
        robust_frame(xs, ys, zs, lower=lower, upper=upper)


def test_empty_axes_are_fatal():
    e = np.array([], dtype=float)
    with pytest.raises(ValueError):
        robust_frame(e, e.copy(), e.copy())


def test_normalize_points_closed_form():
    pts = np.array([[0.0, 0.0, 0.0], [10.0, 2.0, -4.0], [20.0, 4.0, 8.0]])
    out = normalize_points(pts, [10.0, 2.0, 0.0], 0.5)
    np.testing.assert_allclose(out, [[-5.0, -1.0, 0.0], [0.0, 0.0, -2.0], [5.0, 1.0, 4.0]])
    # input untouched
    assert pts[1, 0] == 10.0


def test_scale_stays_positive_for_huge_coordinates():
    xs = np.array([-1.5e308, 0.0, 1.5e308])
    frame = robust_frame(xs, np.zeros(3), np.zeros(3), lower=0.0, upper=1.0)
    assert np.isinf(frame.extent[0])
    assert frame.scale > 0
    assert frame.scale * 1e308 == pytest.approx(1.0 / 3.0)
