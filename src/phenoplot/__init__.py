"""
phenoplot: Composition and group-comparison charts for phenotype-grouped data.

This package provides:
- Example data synthesizers for signature exposures and cell-type measurements
- One-way ANOVA + Tukey HSD comparisons with Bonferroni-adjusted p-values
- Stacked composition bar charts faceted by phenotype group
- Boxplots annotated with significance brackets
- CLI tools for rendering both chart types
"""

__version__ = "0.1.0"

from phenoplot.config import StackedBarConfig, ComparisonConfig
from phenoplot.pipelines import run_stacked_pipeline, run_comparison_pipeline
from phenoplot.stats.tests import compare_groups

__all__ = [
    "__version__",
    "StackedBarConfig",
    "ComparisonConfig",
    "run_stacked_pipeline",
    "run_comparison_pipeline",
    "compare_groups",
]
