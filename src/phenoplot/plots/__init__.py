"""Chart rendering for composition and comparison plots."""

from phenoplot.plots.stacked import plot_stacked_composition, order_samples
from phenoplot.plots.boxplot import plot_comparison_boxplot
from phenoplot.plots.palettes import choose_colors, SIGNATURE_COLORS, PHENOTYPE_COLORS
from phenoplot.plots.schemas import (
    PairwiseComparison,
    ComparisonReport,
    comparisons_to_report,
    save_comparison_report,
)

__all__ = [
    "plot_stacked_composition",
    "order_samples",
    "plot_comparison_boxplot",
    "choose_colors",
    "SIGNATURE_COLORS",
    "PHENOTYPE_COLORS",
    "PairwiseComparison",
    "ComparisonReport",
    "comparisons_to_report",
    "save_comparison_report",
]
