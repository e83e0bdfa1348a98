"""Tests for save-time output sizing."""

from __future__ import annotations

import pytest

from insetmap.engine.errors import InsetAdvisory, InvalidRatioError, MissingDimensionError
from insetmap.engine.sizing import compute_save_size


def test_width_derives_height():
    assert compute_save_size(2.0, width=10) == pytest.approx((10.0, 5.0))


def test_height_derives_width():
    assert compute_save_size(2.0, height=5) == pytest.approx((10.0, 5.0))


def test_ratio_scale_widens_output():
    assert compute_save_size(2.0, height=5, ratio_scale=1.5) == pytest.approx((15.0, 5.0))


def test_ratio_scale_narrows_output():
    assert compute_save_size(2.0, width=10, ratio_scale=0.5) == pytest.approx((10.0, 10.0))


def test_both_given_returned_with_advisory():
    with pytest.warns(InsetAdvisory, match="Both width and height"):
        assert compute_save_size(2.0, width=7, height=7) == (7.0, 7.0)


def test_neither_given():
    with pytest.raises(MissingDimensionError, match="Either width or height"):
        compute_save_size(2.0)


@pytest.mark.parametrize("main_ratio,ratio_scale", [(0, 1.0), (-2.0, 1.0), (2.0, 0), (2.0, -1.0)])
def test_invalid_ratios(main_ratio, ratio_scale):
    with pytest.raises(InvalidRatioError):
        compute_save_size(main_ratio, width=10, ratio_scale=ratio_scale)
