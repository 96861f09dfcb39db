"""Boxplots of phenotype groups with significance brackets."""

from __future__ import annotations

import logging
import math
import warnings
from typing import Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure
import seaborn as sns

from phenoplot.config import ComparisonConfig
from phenoplot.data.loaders import validate_columns
from phenoplot.plots.palettes import choose_colors
from phenoplot.stats.significance import bracket_span
from phenoplot.stats.tests import group_order

# Suppress seaborn/pandas FutureWarnings
warnings.filterwarnings("ignore", category=FutureWarning, module="seaborn")
warnings.filterwarnings("ignore", category=FutureWarning, module="pandas")

logger = logging.getLogger(__name__)

# Constant facet column used when the data are not partitioned
PLACEHOLDER_FACET = "_facet"
PLACEHOLDER_LABEL = "All"


def draw_bracket(
    ax: Axes,
    x1: float,
    x2: float,
    y: float,
    label: str,
    tip: float,
    fontsize: float = 10,
) -> None:
    """Draw a bracket from x1 to x2 at height y with a label above it."""
    ax.plot([x1, x1, x2, x2], [y - tip, y, y, y - tip], color="black", linewidth=1.0)
    ax.text((x1 + x2) / 2, y, label, ha="center", va="bottom", fontsize=fontsize)


def _panel_comparisons(
    comparisons: Optional[pd.DataFrame], panel: str, partitioned: bool, hide_ns: bool
) -> pd.DataFrame:
    if comparisons is None or len(comparisons) == 0:
        return pd.DataFrame()

    if partitioned:
        sel = comparisons[comparisons["partition_key"].astype(str) == panel]
    else:
        sel = comparisons[comparisons["partition_key"].isna()]

    if hide_ns:
        sel = sel[sel["significance_label"] != "ns"]
    return sel


def plot_comparison_boxplot(
    df: pd.DataFrame,
    config: ComparisonConfig,
    comparisons: Optional[pd.DataFrame] = None,
) -> Figure:
    """Draw a boxplot of value by phenotype group, one panel per partition.

    When ``comparisons`` (from ``compare_groups``) is given, each row becomes a
    bracket at its ``bracket_y_position`` labelled with its significance symbol.

    Args:
        df: Long dataframe of observations
        config: ComparisonConfig with column names and styling
        comparisons: Optional comparison table

    Returns:
        The rendered matplotlib Figure
    """
    validate_columns(df, config.required_columns)
    value_col, group_col = config.value_col, config.group_col

    data = df.dropna(subset=[value_col, group_col]).copy()
    partitioned = config.partition_col is not None
    facet_col = config.partition_col if partitioned else PLACEHOLDER_FACET
    if not partitioned:
        data[facet_col] = PLACEHOLDER_LABEL

    groups = group_order(data[group_col])
    panels = group_order(data[facet_col])
    colors = choose_colors(groups)
    data["_grp"] = data[group_col].astype(str)

    ncols = min(config.boxplot_ncols, len(panels))
    nrows = math.ceil(len(panels) / ncols)
    fig, axes = plt.subplots(
        nrows,
        ncols,
        squeeze=False,
        figsize=(max(3.5, 1.2 * len(groups) + 1.5) * ncols, 4.5 * nrows),
        dpi=config.fig_dpi,
    )

    for ax, panel in zip(axes.flat, panels):
        sub = data[data[facet_col].astype(str) == panel]

        sns.boxplot(
            data=sub,
            x="_grp",
            y=value_col,
            order=groups,
            hue="_grp",
            hue_order=groups,
            palette=colors,
            legend=False,
            fliersize=0,
            width=0.6,
            ax=ax,
        )
        sns.stripplot(
            data=sub,
            x="_grp",
            y=value_col,
            order=groups,
            color="black",
            size=np.sqrt(config.point_size),
            alpha=config.alpha_points * 0.6,
            jitter=0.2,
            ax=ax,
        )

        ax.set_title(panel if partitioned else value_col)
        ax.set_xlabel(group_col)
        ax.set_ylabel(value_col)
        ax.grid(axis="y", alpha=0.2)

        sel = _panel_comparisons(comparisons, panel, partitioned, config.hide_ns)
        if len(sel) == 0:
            continue

        y_max, y_min = float(sub[value_col].max()), float(sub[value_col].min())
        span = bracket_span(y_max, y_min)
        pos = {g: i for i, g in enumerate(groups)}
        for _, r in sel.iterrows():
            draw_bracket(
                ax,
                pos[str(r["group_a"])],
                pos[str(r["group_b"])],
                float(r["bracket_y_position"]),
                str(r["significance_label"]),
                tip=0.02 * span,
            )

        top = float(sel["bracket_y_position"].max()) + 0.1 * span
        bottom, current_top = ax.get_ylim()
        ax.set_ylim(bottom, max(current_top, top))
        logger.debug(f"Panel {panel!r}: drew {len(sel)} brackets")

    for ax in axes.flat[len(panels) :]:
        ax.remove()

    fig.tight_layout()
    return fig
