"""Pytest configuration and fixtures."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402
import pytest  # noqa: E402

from phenoplot.data.synthetic import (  # noqa: E402
    make_signature_exposures,
    make_cell_type_measurements,
)


@pytest.fixture(autouse=True)
def close_figures():
    """Close all figures after each test."""
    yield
    plt.close("all")


@pytest.fixture
def signature_data():
    """Example signature exposures: 10 samples x 3 signatures."""
    return make_signature_exposures(n_samples=10, seed=42)


@pytest.fixture
def cell_type_data():
    """Mock cell-type measurements: 3 phenotypes x 2 cell types."""
    return make_cell_type_measurements(n_per_group=10, seed=123)


@pytest.fixture
def separated_groups():
    """Single-partition data with one clearly shifted group."""
    rng = np.random.default_rng(7)
    return pd.DataFrame(
        {
            "phenotype": ["A"] * 12 + ["B"] * 12 + ["C"] * 12,
            "value": np.concatenate(
                [
                    rng.normal(10.0, 1.0, 12),
                    rng.normal(10.5, 1.0, 12),
                    rng.normal(20.0, 1.0, 12),
                ]
            ),
        }
    )


@pytest.fixture
def temp_outdir(tmp_path):
    """Provide temporary output directory."""
    outdir = tmp_path / "derived"
    outdir.mkdir()
    return outdir
