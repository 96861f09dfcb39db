"""Tests for the stacked composition chart."""

import pytest
import numpy as np
import pandas as pd

from phenoplot.config import StackedBarConfig
from phenoplot.plots.stacked import order_samples, plot_stacked_composition, sample_groups


def _segments(fig):
    return [patch for ax in fig.axes for c in ax.containers for patch in c]


class TestPlotStackedComposition:
    def test_one_segment_per_sample_category(self, signature_data):
        """Example data renders exactly 10 x 3 bar segments."""
        fig = plot_stacked_composition(signature_data, StackedBarConfig())

        assert len(_segments(fig)) == 30

    def test_one_panel_per_phenotype(self, signature_data):
        fig = plot_stacked_composition(signature_data, StackedBarConfig())

        assert len(fig.axes) == 3
        assert [ax.get_title() for ax in fig.axes] == [
            "Responder (n=4)",
            "Stable (n=3)",
            "Progressor (n=3)",
        ]

    def test_segment_heights_match_values(self, signature_data):
        """Stacked tops equal per-sample totals."""
        fig = plot_stacked_composition(signature_data, StackedBarConfig())
        totals = signature_data.groupby("sample_id")["exposure"].sum()

        for ax in fig.axes:
            labels = [t.get_text() for t in ax.get_xticklabels()]
            tops = np.zeros(len(labels))
            for container in ax.containers:
                tops += np.array([p.get_height() for p in container])
            assert tops == pytest.approx(totals.loc[labels].to_numpy())

    def test_normalize_sums_to_one(self, signature_data):
        fig = plot_stacked_composition(signature_data, StackedBarConfig(normalize=True))

        for ax in fig.axes:
            n = len(ax.containers[0])
            tops = np.zeros(n)
            for container in ax.containers:
                tops += np.array([p.get_height() for p in container])
            assert tops == pytest.approx(np.ones(n))
        assert fig.axes[0].get_ylabel() == "Proportion"

    def test_missing_pair_drawn_with_zero_height(self, signature_data):
        """A dropped (sample, category) row still yields a zero-height segment."""
        df = signature_data.iloc[1:]

        fig = plot_stacked_composition(df, StackedBarConfig())
        heights = [p.get_height() for p in _segments(fig)]

        assert len(heights) == 30
        assert heights.count(0.0) == 1

    def test_category_order_from_config(self, signature_data):
        config = StackedBarConfig(categories=["SBS40", "SBS1", "SBS5"])

        fig = plot_stacked_composition(signature_data, config)
        labels = [c.get_label() for c in fig.axes[0].containers]

        assert labels == ["SBS40", "SBS1", "SBS5"]

    def test_missing_column(self, signature_data):
        with pytest.raises(ValueError, match="exposure"):
            plot_stacked_composition(signature_data.drop(columns="exposure"), StackedBarConfig())


class TestOrderSamples:
    def test_grouped_then_descending_total(self, signature_data):
        order = order_samples(signature_data, "sample_id", "phenotype", "signature", "exposure")
        totals = signature_data.groupby("sample_id")["exposure"].sum()
        group_of = sample_groups(signature_data, "sample_id", "phenotype")

        assert len(order) == 10
        assert [group_of[s] for s in order] == ["Responder"] * 4 + ["Stable"] * 3 + [
            "Progressor"
        ] * 3
        for g in ["Responder", "Stable", "Progressor"]:
            vals = [totals[s] for s in order if group_of[s] == g]
            assert vals == sorted(vals, reverse=True)

    def test_sort_by_category(self, signature_data):
        order = order_samples(
            signature_data, "sample_id", "phenotype", "signature", "exposure", sort_by="SBS5"
        )
        sbs5 = signature_data[signature_data["signature"] == "SBS5"].set_index("sample_id")[
            "exposure"
        ]
        responders = order[:4]

        assert [sbs5[s] for s in responders] == sorted(
            [sbs5[s] for s in responders], reverse=True
        )

    def test_sort_by_unknown_category(self, signature_data):
        with pytest.raises(ValueError, match="SBS13"):
            order_samples(
                signature_data, "sample_id", "phenotype", "signature", "exposure", sort_by="SBS13"
            )

    def test_sample_in_two_groups(self):
        df = pd.DataFrame(
            {
                "sample_id": ["s1", "s1"],
                "phenotype": ["A", "B"],
                "signature": ["SBS1", "SBS5"],
                "exposure": [0.1, 0.2],
            }
        )

        with pytest.raises(ValueError, match="more than one phenotype"):
            order_samples(df, "sample_id", "phenotype", "signature", "exposure")

    def test_subset_categories_rank_by_drawn_total(self, signature_data):
        """With a category subset, bars within a facet descend by the drawn height."""
        fig = plot_stacked_composition(signature_data, StackedBarConfig(categories=["SBS1"]))

        for ax in fig.axes:
            heights = [p.get_height() for p in ax.containers[0]]
            assert heights == sorted(heights, reverse=True)

    def test_order_restricted_to_categories(self, signature_data):
        order = order_samples(
            signature_data,
            "sample_id",
            "phenotype",
            "signature",
            "exposure",
            categories=["SBS1", "SBS40"],
        )
        subset = signature_data[signature_data["signature"].isin(["SBS1", "SBS40"])]
        totals = subset.groupby(subset["sample_id"].astype(str))["exposure"].sum()
        group_of = sample_groups(signature_data, "sample_id", "phenotype")

        assert len(order) == 10
        for g in ["Responder", "Stable", "Progressor"]:
            vals = [totals[s] for s in order if group_of[s] == g]
            assert vals == sorted(vals, reverse=True)

    def test_missing_phenotype_dropped_with_warning(self, signature_data, caplog):
        df = signature_data.copy()
        first = df["sample_id"].iloc[0]
        df.loc[df["sample_id"] == first, "phenotype"] = None

        with caplog.at_level("WARNING", logger="phenoplot.plots.stacked"):
            groups = sample_groups(df, "sample_id", "phenotype")

        assert len(groups) == 9
        assert str(first) not in groups.index
        assert "Dropping 1 samples with missing 'phenotype'" in caplog.text
