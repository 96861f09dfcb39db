"""Configuration dataclasses for the chart pipelines."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, List

VALID_P_ADJUST = ["bonferroni", "holm", "fdr_bh", "fdr_by", "sidak"]


@dataclass
class StackedBarConfig:
    """Configuration for the stacked composition chart.

    Attributes:
        sample_col: Name of the sample identifier column
        group_col: Name of the phenotype group column
        category_col: Name of the stacked category column (e.g. signature)
        value_col: Name of the numeric value column
        phenotypes: Optional display order of phenotype groups (None = order of appearance)
        categories: Optional stacking order of categories (None = order of appearance)
        sort_by: Optional category used to order samples within a group
            (None = descending total)
        normalize: Rescale each sample to proportions (default: False)
        bar_width: Width of each bar (default: 0.8)
        panel_height: Figure height in inches (default: 4.5)
        fig_dpi: Figure DPI (default: 160)
        title: Optional figure title
        outfile: Optional path to save the rendered chart
    """

    sample_col: str = "sample_id"
    group_col: str = "phenotype"
    category_col: str = "signature"
    value_col: str = "exposure"
    phenotypes: Optional[List[str]] = None
    categories: Optional[List[str]] = None
    sort_by: Optional[str] = None
    normalize: bool = False
    bar_width: float = 0.8
    panel_height: float = 4.5
    fig_dpi: int = 160
    title: Optional[str] = None
    outfile: Optional[Path] = None

    def __post_init__(self):
        """Validate configuration."""
        if self.outfile is not None:
            self.outfile = Path(self.outfile)

        if not 0 < self.bar_width <= 1:
            raise ValueError(f"bar_width must be in (0, 1], got {self.bar_width}")

        if self.panel_height <= 0:
            raise ValueError(f"panel_height must be > 0, got {self.panel_height}")

        if self.categories is not None and self.sort_by is not None:
            if self.sort_by not in self.categories:
                raise ValueError(
                    f"sort_by '{self.sort_by}' is not one of the categories {self.categories}"
                )

    @property
    def required_columns(self) -> List[str]:
        return [self.sample_col, self.group_col, self.category_col, self.value_col]


@dataclass
class ComparisonConfig:
    """Configuration for the grouped statistical comparison chart.

    Attributes:
        value_col: Name of the numeric value column
        group_col: Name of the phenotype group column
        partition_col: Optional secondary grouping (e.g. cell type); None compares
            the whole dataset at once
        phenotypes: Optional display order of phenotype groups
        alpha: Family-wise significance level passed to Tukey HSD (default: 0.05)
        p_adjust: P-value adjustment method applied after Tukey HSD
            Options: bonferroni, holm, fdr_bh, fdr_by, sidak
        step_increase: Vertical step between stacked brackets, as a fraction of
            the data span (default: 0.12)
        bracket_offset: Gap between the data maximum and the first bracket, as a
            fraction of the data span (default: 0.08)
        hide_ns: Skip brackets for non-significant comparisons (default: False)
        boxplot_ncols: Number of facet columns (default: 3)
        fig_dpi: Figure DPI (default: 160)
        point_size: Strip plot marker area (default: 24.0)
        alpha_points: Strip plot transparency (default: 0.9)
        outdir: Optional output directory for figure and result tables
        prefix: File name prefix for outputs (default: "comparison")
    """

    value_col: str = "value"
    group_col: str = "phenotype"
    partition_col: Optional[str] = "cell_type"
    phenotypes: Optional[List[str]] = None
    alpha: float = 0.05
    p_adjust: str = "bonferroni"
    step_increase: float = 0.12
    bracket_offset: float = 0.08
    hide_ns: bool = False
    boxplot_ncols: int = 3
    fig_dpi: int = 160
    point_size: float = 24.0
    alpha_points: float = 0.9
    outdir: Optional[Path] = None
    prefix: str = "comparison"

    def __post_init__(self):
        """Validate configuration."""
        if self.outdir is not None:
            self.outdir = Path(self.outdir)

        if self.alpha <= 0 or self.alpha >= 1:
            raise ValueError(f"Alpha must be in (0, 1), got {self.alpha}")

        if self.p_adjust not in VALID_P_ADJUST:
            raise ValueError(
                f"p_adjust must be one of {VALID_P_ADJUST}, got {self.p_adjust}"
            )

        if self.step_increase < 0:
            raise ValueError(f"step_increase must be >= 0, got {self.step_increase}")

        if self.bracket_offset <= 0:
            raise ValueError(f"bracket_offset must be > 0, got {self.bracket_offset}")

        if self.boxplot_ncols < 1:
            raise ValueError(f"boxplot_ncols must be >= 1, got {self.boxplot_ncols}")

    @property
    def required_columns(self) -> List[str]:
        cols = [self.group_col, self.value_col]
        if self.partition_col is not None:
            cols.append(self.partition_col)
        return cols
