"""Stacked composition bar charts faceted by phenotype group."""

from __future__ import annotations

import logging
from typing import List, Dict, Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from phenoplot.config import StackedBarConfig
from phenoplot.data.loaders import validate_columns
from phenoplot.plots.palettes import SIGNATURE_COLORS, choose_colors
from phenoplot.stats.tests import group_order

logger = logging.getLogger(__name__)


def sample_groups(df: pd.DataFrame, sample_col: str, group_col: str) -> pd.Series:
    """Map each sample id to its phenotype group.

    Raises:
        ValueError: If a sample is tagged with more than one group
    """
    pairs = df[[sample_col, group_col]].dropna()
    unassigned = set(df[sample_col].dropna().astype(str)) - set(pairs[sample_col].astype(str))
    if unassigned:
        logger.warning(
            f"Dropping {len(unassigned)} samples with missing '{group_col}': {sorted(unassigned)[:10]}"
        )
    pairs = pairs.astype(str).drop_duplicates()
    dup = pairs[pairs[sample_col].duplicated(keep=False)]
    if len(dup) > 0:
        raise ValueError(
            f"Samples assigned to more than one {group_col}: {sorted(dup[sample_col].unique())[:10]}"
        )
    return pairs.set_index(sample_col)[group_col]


def order_samples(
    df: pd.DataFrame,
    sample_col: str,
    group_col: str,
    category_col: str,
    value_col: str,
    sort_by: Optional[str] = None,
    categories: Optional[List[str]] = None,
) -> List[str]:
    """Order samples by phenotype group, then by descending value.

    Within a group samples are ranked by their total value, or by the value of
    the ``sort_by`` category when given. When ``categories`` is given, totals
    only count those categories. Ties keep sample id order.

    Returns:
        Sample ids (as strings) in display order
    """
    validate_columns(df, [sample_col, group_col, category_col, value_col])
    group_of = sample_groups(df, sample_col, group_col)

    data = df.assign(_sid=df[sample_col].astype(str))
    if sort_by is None:
        if categories is not None:
            data = data[data[category_col].astype(str).isin([str(c) for c in categories])]
        key = data.groupby("_sid")[value_col].sum()
        key = key.reindex(group_of.index, fill_value=0.0)
    else:
        mask = data[category_col].astype(str) == str(sort_by)
        if not mask.any():
            raise ValueError(f"sort_by category '{sort_by}' not found in '{category_col}'")
        key = data[mask].groupby("_sid")[value_col].sum()
        key = key.reindex(group_of.index, fill_value=0.0)

    ordered = []
    for g in group_order(df[group_col]):
        members = sorted(group_of.index[group_of == g])
        ranked = key.reindex(members).sort_values(ascending=False, kind="mergesort")
        ordered.extend(ranked.index.tolist())

    return ordered


def plot_stacked_composition(
    df: pd.DataFrame,
    config: StackedBarConfig,
    sample_order: Optional[List[str]] = None,
    colors: Optional[Dict[str, tuple]] = None,
) -> Figure:
    """Draw one stacked bar per sample, faceted by phenotype group.

    Each (sample, category) pair becomes exactly one bar segment; pairs absent
    from the table are drawn with zero height.

    Args:
        df: Long dataframe of observations
        config: StackedBarConfig with column names and styling
        sample_order: Optional sample display order (defaults to ``order_samples``)
        colors: Optional category -> color mapping (defaults to ``SIGNATURE_COLORS``)

    Returns:
        The rendered matplotlib Figure
    """
    validate_columns(df, config.required_columns)
    sample_col, group_col = config.sample_col, config.group_col
    category_col, value_col = config.category_col, config.value_col

    groups = group_order(df[group_col])
    categories = (
        [str(c) for c in config.categories]
        if config.categories is not None
        else group_order(df[category_col])
    )
    if sample_order is None:
        sample_order = order_samples(
            df, sample_col, group_col, category_col, value_col, config.sort_by, categories
        )
    if colors is None:
        colors = choose_colors(categories, base=SIGNATURE_COLORS)

    group_of = sample_groups(df, sample_col, group_col)
    wide = (
        df.assign(_sid=df[sample_col].astype(str), _cat=df[category_col].astype(str))
        .pivot_table(index="_sid", columns="_cat", values=value_col, aggfunc="sum", fill_value=0.0)
        .reindex(index=sample_order, columns=categories, fill_value=0.0)
    )
    if config.normalize:
        totals = wide.sum(axis=1).replace(0, np.nan)
        wide = wide.div(totals, axis=0).fillna(0.0)

    members = {g: [s for s in sample_order if group_of.get(s) == g] for g in groups}
    logger.info(
        f"Stacked chart: {len(sample_order)} samples, {len(categories)} categories, "
        f"{len(groups)} groups"
    )

    fig, axes = plt.subplots(
        1,
        len(groups),
        sharey=True,
        squeeze=False,
        figsize=(max(4.0, 0.45 * len(sample_order) + 1.5 * len(groups)), config.panel_height),
        dpi=config.fig_dpi,
        gridspec_kw={"width_ratios": [max(len(members[g]), 1) for g in groups]},
    )
    axes = axes[0]

    for ax, g in zip(axes, groups):
        samples = members[g]
        x = np.arange(len(samples))
        bottom = np.zeros(len(samples))

        for cat in categories:
            heights = wide.loc[samples, cat].to_numpy(dtype=float)
            ax.bar(
                x,
                heights,
                bottom=bottom,
                width=config.bar_width,
                color=colors[cat],
                edgecolor="black",
                linewidth=0.4,
                label=cat,
            )
            bottom = bottom + heights

        ax.set_xticks(x)
        ax.set_xticklabels(samples, rotation=90, fontsize=8)
        ax.set_title(f"{g} (n={len(samples)})")
        ax.grid(axis="y", alpha=0.2)
        ax.set_axisbelow(True)

    axes[0].set_ylabel("Proportion" if config.normalize else value_col)
    if config.normalize:
        axes[0].set_ylim(0, 1)

    handles, labels = axes[0].get_legend_handles_labels()
    fig.legend(
        handles,
        labels,
        title=category_col,
        loc="center left",
        bbox_to_anchor=(1.0, 0.5),
        frameon=False,
    )
    if config.title:
        fig.suptitle(config.title)
    fig.tight_layout()

    return fig
