"""Tests for p-value adjustment, symbols and bracket placement."""

import pytest
import numpy as np

from phenoplot.stats.significance import (
    adjust_pvalues,
    p_to_symbol,
    bracket_positions,
    bracket_span,
)


def test_bonferroni_multiplies_by_family_size():
    """Bonferroni scales each p-value by the number of tests."""
    p_adj = adjust_pvalues([0.01, 0.02, 0.2])

    assert p_adj == pytest.approx([0.03, 0.06, 0.6])


def test_bonferroni_caps_at_one():
    """Adjusted p-values never exceed 1."""
    p_adj = adjust_pvalues([0.5, 0.9, 0.001])

    assert p_adj[0] == pytest.approx(1.0)
    assert p_adj[1] == pytest.approx(1.0)
    assert p_adj[2] == pytest.approx(0.003)


def test_adjusted_never_below_raw():
    """Adjusted p-values are >= raw p-values."""
    raw = np.random.default_rng(0).uniform(0, 1, size=20)

    for method in ["bonferroni", "holm", "fdr_bh", "sidak"]:
        adj = adjust_pvalues(raw, method=method)
        assert np.all(adj >= raw - 1e-12), method


def test_adjust_keeps_nan_out_of_family():
    """NaN p-values stay NaN and do not count towards the family."""
    p_adj = adjust_pvalues([0.01, np.nan, 0.02])

    assert np.isnan(p_adj[1])
    assert p_adj[0] == pytest.approx(0.02)
    assert p_adj[2] == pytest.approx(0.04)


@pytest.mark.parametrize(
    "p, symbol",
    [
        (0.0, "***"),
        (0.0009, "***"),
        (0.001, "**"),
        (0.0099, "**"),
        (0.01, "*"),
        (0.049, "*"),
        (0.05, "ns"),
        (0.8, "ns"),
        (1.0, "ns"),
    ],
)
def test_p_to_symbol_thresholds(p, symbol):
    """Significance symbols follow fixed cutpoints."""
    assert p_to_symbol(p) == symbol


def test_p_to_symbol_nan():
    """Missing p-values are labelled ns."""
    assert p_to_symbol(np.nan) == "ns"
    assert p_to_symbol(None) == "ns"


def test_bracket_positions_stack_above_max():
    """Brackets start above the data maximum and strictly increase."""
    ys = bracket_positions(3, y_max=10.0, y_min=0.0, step_increase=0.1, bracket_offset=0.05)

    assert ys == pytest.approx([10.5, 11.5, 12.5])
    assert all(y > 10.0 for y in ys)
    assert all(b > a for a, b in zip(ys, ys[1:]))


def test_bracket_positions_constant_data():
    """Zero-span data still places brackets above the maximum."""
    ys = bracket_positions(2, y_max=5.0, y_min=5.0)

    assert all(y > 5.0 for y in ys)
    assert ys[1] > ys[0]


def test_bracket_positions_empty():
    assert bracket_positions(0, 1.0, 0.0) == []


def test_bracket_positions_scale_with_range_not_magnitude():
    """The span is the data range, even when the values sit far from zero."""
    ys = bracket_positions(1, y_max=10.0, y_min=8.0, step_increase=0.12, bracket_offset=0.08)

    assert ys == pytest.approx([10.16])


def test_bracket_positions_all_zero():
    assert bracket_positions(1, y_max=0.0, y_min=0.0) == pytest.approx([0.08])


@pytest.mark.parametrize(
    "y_max,y_min,span",
    [
        (10.0, 8.0, 2.0),
        (-1.0, -5.0, 4.0),
        (5.0, 5.0, 5.0),
        (-3.0, -3.0, 3.0),
        (0.2, 0.2, 1.0),
        (np.nan, 0.0, 1.0),
    ],
)
def test_bracket_span(y_max, y_min, span):
    assert bracket_span(y_max, y_min) == pytest.approx(span)
