"""One-way ANOVA, Tukey HSD post-hoc and partitioned group comparison."""

from __future__ import annotations

import logging
from typing import List, Dict, Any, Optional, Hashable

import numpy as np
import pandas as pd
import statsmodels.api as sm
from statsmodels.formula.api import ols
from statsmodels.stats.multicomp import pairwise_tukeyhsd

from phenoplot.data.loaders import validate_columns
from phenoplot.stats.significance import adjust_pvalues, p_to_symbol, bracket_positions

logger = logging.getLogger(__name__)

COMPARISON_COLUMNS = [
    "partition_key",
    "group_a",
    "group_b",
    "n_a",
    "n_b",
    "mean_diff",
    "ci_low",
    "ci_high",
    "raw_p",
    "adjusted_p",
    "significance_label",
    "reject",
    "bracket_y_position",
    "anova_f",
    "anova_p",
]


def group_order(series: pd.Series) -> List[str]:
    """Return display order of the labels present in ``series``.

    Categorical columns keep their category order; anything else uses order
    of first appearance.
    """
    present = set(series.dropna().astype(str).unique())
    if isinstance(series.dtype, pd.CategoricalDtype):
        return [str(c) for c in series.cat.categories if str(c) in present]
    return [str(v) for v in pd.unique(series.dropna().astype(str))]


def anova_oneway(df: pd.DataFrame, value_col: str, group_col: str) -> Dict[str, Any]:
    """Fit ``value ~ C(group)`` by OLS and return the one-way ANOVA table row.

    Args:
        df: Dataframe with value and group columns
        value_col: Numeric response column
        group_col: Grouping column

    Returns:
        Dictionary with keys: statistic, p_value, k_groups, N, df1, df2
    """
    data = pd.DataFrame(
        {
            "value": df[value_col].astype(float).to_numpy(),
            "group": df[group_col].astype(str).to_numpy(),
        }
    )
    model = ols("value ~ C(group)", data=data).fit()
    table = sm.stats.anova_lm(model, typ=2)

    effect = table.loc["C(group)"]
    return {
        "statistic": float(effect["F"]),
        "p_value": float(effect["PR(>F)"]),
        "k_groups": int(data["group"].nunique()),
        "N": int(len(data)),
        "df1": int(effect["df"]),
        "df2": int(table.loc["Residual", "df"]),
    }


def tukey_posthoc(
    df: pd.DataFrame,
    value_col: str,
    group_col: str,
    alpha: float = 0.05,
    order: Optional[List[str]] = None,
) -> List[Dict[str, Any]]:
    """Perform Tukey HSD for all group pairs.

    Pairs are oriented and sorted by the display ``order`` so that
    ``mean_diff`` is always ``mean(group2) - mean(group1)``.

    Args:
        df: Dataframe with value and group columns
        value_col: Numeric response column
        group_col: Grouping column
        alpha: Family-wise error rate for the confidence intervals
        order: Display order of groups (defaults to ``group_order``)

    Returns:
        List of dictionaries, one per pairwise comparison
        Keys: group1, group2, mean_diff, p_value, ci_low, ci_high, reject
    """
    if order is None:
        order = group_order(df[group_col])
    rank = {g: i for i, g in enumerate(order)}

    tuk = pairwise_tukeyhsd(
        endog=df[value_col].astype(float).to_numpy(),
        groups=df[group_col].astype(str).to_numpy(),
        alpha=alpha,
    )
    labels = [str(g) for g in tuk.groupsunique]
    idx1, idx2 = np.triu_indices(len(labels), 1)

    rows = []
    for k, (i, j) in enumerate(zip(idx1, idx2)):
        g1, g2 = labels[i], labels[j]
        diff = float(tuk.meandiffs[k])
        lo, hi = float(tuk.confint[k][0]), float(tuk.confint[k][1])
        if rank[g1] > rank[g2]:
            g1, g2 = g2, g1
            diff, lo, hi = -diff, -hi, -lo
        rows.append(
            {
                "group1": g1,
                "group2": g2,
                "mean_diff": diff,
                "p_value": float(tuk.pvalues[k]),
                "ci_low": lo,
                "ci_high": hi,
                "reject": bool(tuk.reject[k]),
            }
        )

    rows.sort(key=lambda r: (rank[r["group1"]], rank[r["group2"]]))
    return rows


def check_partition(
    sub: pd.DataFrame, value_col: str, group_col: str, key: Optional[Hashable] = None
) -> pd.Series:
    """Check that a partition supports ANOVA and return per-group counts.

    Raises:
        ValueError: If fewer than two groups are present or any group has
            fewer than two observations
    """
    where = "" if key is None else f" in partition '{key}'"
    counts = sub.groupby(sub[group_col].astype(str))[value_col].size()

    if len(counts) < 2:
        raise ValueError(
            f"At least 2 groups required for comparison{where}, found {len(counts)}"
        )

    small = counts[counts < 2]
    if len(small) > 0:
        raise ValueError(
            f"Each group needs at least 2 observations{where}; "
            f"too few in: {small.to_dict()}"
        )

    return counts


def _iter_partitions(df: pd.DataFrame, partition_col: Optional[str]):
    if partition_col is None:
        yield None, df
        return

    for key in group_order(df[partition_col]):
        yield key, df[df[partition_col].astype(str) == key]


def compare_groups(
    df: pd.DataFrame,
    value_col: str,
    group_col: str,
    partition_col: Optional[str] = None,
    alpha: float = 0.05,
    p_adjust: str = "bonferroni",
    step_increase: float = 0.12,
    bracket_offset: float = 0.08,
) -> pd.DataFrame:
    """Compare phenotype groups within each partition.

    For each partition (or the whole table when ``partition_col`` is None):
    fit a one-way ANOVA of value against group, run Tukey HSD for all pairs,
    adjust the pairwise p-values within the partition, label significance and
    place one bracket per pair above the partition maximum.

    Args:
        df: Long dataframe of observations
        value_col: Numeric response column
        group_col: Phenotype group column
        partition_col: Optional secondary grouping (e.g. cell type)
        alpha: Significance level for the Tukey intervals and ``reject`` flag
        p_adjust: Adjustment applied to the Tukey p-values (default: bonferroni)
        step_increase: Bracket step as a fraction of the partition span
        bracket_offset: Gap between data maximum and first bracket

    Returns:
        DataFrame with one row per pair per partition (see ``COMPARISON_COLUMNS``)

    Raises:
        ValueError: If columns are missing or a partition is degenerate
    """
    required = [value_col, group_col] + ([partition_col] if partition_col else [])
    validate_columns(df, required)

    data = df.dropna(subset=[value_col, group_col])
    if len(data) < len(df):
        logger.warning(
            f"Dropping {len(df) - len(data)} rows with missing '{value_col}' or '{group_col}'"
        )

    order = group_order(data[group_col])
    rows = []

    for key, sub in _iter_partitions(data, partition_col):
        counts = check_partition(sub, value_col, group_col, key)
        sub_order = [g for g in order if g in counts.index]

        anova = anova_oneway(sub, value_col, group_col)
        pairs = tukey_posthoc(sub, value_col, group_col, alpha=alpha, order=sub_order)
        p_adj = adjust_pvalues([p["p_value"] for p in pairs], method=p_adjust)

        # Narrow brackets get the lower slots
        rank = {g: i for i, g in enumerate(sub_order)}
        slot_order = sorted(
            range(len(pairs)),
            key=lambda k: (
                rank[pairs[k]["group2"]] - rank[pairs[k]["group1"]],
                rank[pairs[k]["group1"]],
            ),
        )
        heights = bracket_positions(
            len(pairs),
            sub[value_col].max(),
            sub[value_col].min(),
            step_increase=step_increase,
            bracket_offset=bracket_offset,
        )
        y_pos = [0.0] * len(pairs)
        for slot, k in enumerate(slot_order):
            y_pos[k] = heights[slot]

        logger.info(
            f"Partition {key!r}: ANOVA F={anova['statistic']:.3f}, "
            f"p={anova['p_value']:.3g}, {len(pairs)} pairwise comparisons"
        )

        for k, pair in enumerate(pairs):
            rows.append(
                {
                    "partition_key": key,
                    "group_a": pair["group1"],
                    "group_b": pair["group2"],
                    "n_a": int(counts[pair["group1"]]),
                    "n_b": int(counts[pair["group2"]]),
                    "mean_diff": pair["mean_diff"],
                    "ci_low": pair["ci_low"],
                    "ci_high": pair["ci_high"],
                    "raw_p": pair["p_value"],
                    "adjusted_p": float(p_adj[k]),
                    "significance_label": p_to_symbol(p_adj[k]),
                    "reject": bool(p_adj[k] < alpha),
                    "bracket_y_position": y_pos[k],
                    "anova_f": anova["statistic"],
                    "anova_p": anova["p_value"],
                }
            )

    return pd.DataFrame(rows, columns=COMPARISON_COLUMNS)
