"""Statistical comparison of phenotype groups.

Public API:
-----------
from phenoplot.stats import compare_groups

# One row per pairwise comparison per cell type
comparisons = compare_groups(
    df,
    value_col="value",
    group_col="phenotype",
    partition_col="cell_type",
)
"""

from phenoplot.stats.tests import compare_groups, anova_oneway, tukey_posthoc
from phenoplot.stats.significance import adjust_pvalues, p_to_symbol, bracket_positions, bracket_span

__all__ = [
    "compare_groups",
    "anova_oneway",
    "tukey_posthoc",
    "adjust_pvalues",
    "p_to_symbol",
    "bracket_positions",
    "bracket_span",
]
