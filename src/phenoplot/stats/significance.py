"""P-value adjustment, significance symbols and bracket placement."""

from __future__ import annotations

from typing import Sequence, List

import numpy as np
from statsmodels.stats.multitest import multipletests

# (upper bound, symbol), checked in order
SIGNIFICANCE_CUTPOINTS = [
    (0.001, "***"),
    (0.01, "**"),
    (0.05, "*"),
]
NS_SYMBOL = "ns"


def adjust_pvalues(pvals: Sequence[float], method: str = "bonferroni") -> np.ndarray:
    """Adjust a family of p-values for multiple comparisons.

    NaN entries are left as NaN and excluded from the family size.

    Args:
        pvals: Raw p-values
        method: statsmodels multipletests method (bonferroni, holm, fdr_bh, ...)

    Returns:
        Array of adjusted p-values, capped at 1
    """
    pvals = np.asarray(pvals, dtype=float)
    p_adj = np.full_like(pvals, np.nan)

    mask = np.isfinite(pvals)
    if mask.sum() > 0:
        _, p_adj_subset, _, _ = multipletests(pvals[mask], method=method)
        p_adj[mask] = np.minimum(p_adj_subset, 1.0)

    return p_adj


def p_to_symbol(p: float) -> str:
    """Map a p-value to its significance symbol (***, **, *, ns)."""
    if p is None or not np.isfinite(p):
        return NS_SYMBOL
    for cutoff, symbol in SIGNIFICANCE_CUTPOINTS:
        if p < cutoff:
            return symbol
    return NS_SYMBOL


def bracket_span(y_max: float, y_min: float) -> float:
    """Vertical scale for bracket placement: the data range, or max(|y_max|, 1) when flat."""
    span = float(y_max) - float(y_min)
    if not np.isfinite(span) or span <= 0:
        span = max(abs(float(y_max)), 1.0)
    return span


def bracket_positions(
    n: int,
    y_max: float,
    y_min: float,
    step_increase: float = 0.12,
    bracket_offset: float = 0.08,
) -> List[float]:
    """Compute heights for ``n`` stacked significance brackets.

    The first bracket sits ``bracket_offset`` spans above ``y_max`` and each
    following one ``step_increase`` spans higher, so brackets never cross the
    data or each other.

    Args:
        n: Number of brackets
        y_max: Largest observed value in the panel
        y_min: Smallest observed value in the panel
        step_increase: Step between brackets as a fraction of the span
        bracket_offset: Gap above y_max as a fraction of the span

    Returns:
        List of y positions, lowest first
    """
    span = bracket_span(y_max, y_min)
    return [float(y_max) + span * (bracket_offset + k * step_increase) for k in range(n)]
