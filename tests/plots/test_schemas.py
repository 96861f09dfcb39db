"""Tests for comparison report serialization."""

import json

import pytest

import phenoplot
from phenoplot.plots.palettes import choose_colors, PHENOTYPE_COLORS
from phenoplot.plots.schemas import (
    ComparisonReport,
    comparisons_to_report,
    save_comparison_report,
)
from phenoplot.stats.tests import compare_groups


def test_report_from_partitioned_comparisons(cell_type_data):
    df = compare_groups(cell_type_data, "value", "phenotype", partition_col="cell_type")

    report = comparisons_to_report(df, "value", "phenotype", partition_col="cell_type")

    assert report.phenoplot_version == phenoplot.__version__
    assert len(report.comparisons) == 6
    first = report.comparisons[0]
    assert first.partition_key == "CD8 T cell"
    assert (first.group_a, first.group_b) == ("Responder", "Stable")
    assert first.adjusted_p >= first.raw_p
    assert first.bracket_y_position == pytest.approx(df["bracket_y_position"].iloc[0])


def test_report_unpartitioned_has_null_key(separated_groups):
    df = compare_groups(separated_groups, "value", "phenotype")

    report = comparisons_to_report(df, "value", "phenotype")

    assert all(c.partition_key is None for c in report.comparisons)


def test_save_report_roundtrip(tmp_path, cell_type_data):
    df = compare_groups(cell_type_data, "value", "phenotype", partition_col="cell_type")
    report = comparisons_to_report(df, "value", "phenotype", partition_col="cell_type")
    path = tmp_path / "nested" / "report.json"

    save_comparison_report(report, path)

    payload = json.loads(path.read_text())
    assert payload["p_adjust"] == "bonferroni"
    assert len(payload["comparisons"]) == 6
    loaded = ComparisonReport.model_validate(payload)
    assert loaded.comparisons == report.comparisons


def test_choose_colors_base_then_tab20():
    labels = [f"g{i}" for i in range(len(PHENOTYPE_COLORS) + 2)]

    colors = choose_colors(labels)

    assert len(colors) == len(labels)
    assert colors["g0"] == pytest.approx((0x1B / 255, 0x9E / 255, 0x77 / 255, 1.0))
    assert len(set(colors.values())) == len(labels)
