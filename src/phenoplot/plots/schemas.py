"""JSON schemas for group comparison results.

Pydantic models used to export the comparison table next to the rendered
chart, so bracket positions and p-values can be reused without re-running the
statistics.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class PairwiseComparison(BaseModel):
    """One pairwise group comparison within a partition."""

    partition_key: Optional[str] = Field(
        default=None, description="Partition label (e.g. cell type); None when unpartitioned"
    )
    group_a: str = Field(..., description="First group in display order")
    group_b: str = Field(..., description="Second group in display order")
    mean_diff: Optional[float] = Field(default=None, description="mean(group_b) - mean(group_a)")
    raw_p: Optional[float] = Field(default=None, description="Tukey HSD p-value")
    adjusted_p: Optional[float] = Field(default=None, description="Adjusted p-value")
    significance_label: str = Field(..., description="One of ***, **, *, ns")
    bracket_y_position: float = Field(..., description="Bracket height in data units")


class ComparisonReport(BaseModel):
    """Comparison results for one chart."""

    generated_at: datetime = Field(default_factory=datetime.now)
    phenoplot_version: str
    value_col: str
    group_col: str
    partition_col: Optional[str] = None
    p_adjust: str = "bonferroni"
    comparisons: list[PairwiseComparison] = Field(default_factory=list)


def _clean(value) -> Optional[float]:
    if value is None:
        return None
    value = float(value)
    return None if math.isnan(value) else value


def comparisons_to_report(
    comparisons: pd.DataFrame,
    value_col: str,
    group_col: str,
    partition_col: Optional[str] = None,
    p_adjust: str = "bonferroni",
) -> ComparisonReport:
    """Build a ComparisonReport from a ``compare_groups`` table."""
    import phenoplot

    rows = []
    for _, r in comparisons.iterrows():
        key = r["partition_key"]
        rows.append(
            PairwiseComparison(
                partition_key=None if pd.isna(key) else str(key),
                group_a=str(r["group_a"]),
                group_b=str(r["group_b"]),
                mean_diff=_clean(r["mean_diff"]),
                raw_p=_clean(r["raw_p"]),
                adjusted_p=_clean(r["adjusted_p"]),
                significance_label=str(r["significance_label"]),
                bracket_y_position=float(r["bracket_y_position"]),
            )
        )

    return ComparisonReport(
        phenoplot_version=phenoplot.__version__,
        value_col=value_col,
        group_col=group_col,
        partition_col=partition_col,
        p_adjust=p_adjust,
        comparisons=rows,
    )


def save_comparison_report(report: ComparisonReport, output_path: Path) -> None:
    """Save a ComparisonReport to a JSON file."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        json.dump(
            report.model_dump(mode="json"),
            f,
            indent=2,
            default=str,
        )

    logger.info(f"Saved comparison report to {output_path}")
