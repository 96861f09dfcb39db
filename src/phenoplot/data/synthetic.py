"""Seeded example datasets for both chart pipelines."""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

DEFAULT_SIGNATURES = ("SBS1", "SBS5", "SBS40")
DEFAULT_PHENOTYPES = ("Responder", "Stable", "Progressor")
DEFAULT_CELL_TYPES = ("CD8 T cell", "Macrophage")


def make_signature_exposures(
    n_samples: int = 10,
    signatures: Sequence[str] = DEFAULT_SIGNATURES,
    phenotypes: Sequence[str] = DEFAULT_PHENOTYPES,
    seed: int = 42,
) -> pd.DataFrame:
    """Generate per-sample signature exposures.

    Phenotypes are assigned round-robin so every group is represented; each
    (sample, signature) exposure is drawn uniformly from [0, 1).

    Args:
        n_samples: Number of samples
        signatures: Signature (category) names, in stacking order
        phenotypes: Phenotype group labels, in display order
        seed: Random seed

    Returns:
        Long dataframe with columns: sample_id, phenotype, signature, exposure
    """
    if n_samples < len(phenotypes):
        raise ValueError(
            f"n_samples ({n_samples}) must be >= number of phenotypes ({len(phenotypes)})"
        )

    rng = np.random.default_rng(seed)
    sample_ids = [f"S{i + 1:02d}" for i in range(n_samples)]
    sample_groups = np.resize(np.asarray(phenotypes, dtype=object), n_samples)
    exposures = rng.uniform(0.0, 1.0, size=(n_samples, len(signatures)))

    df = pd.DataFrame(
        {
            "sample_id": np.repeat(sample_ids, len(signatures)),
            "phenotype": np.repeat(sample_groups, len(signatures)),
            "signature": np.tile(list(signatures), n_samples),
            "exposure": exposures.ravel(),
        }
    )
    df["phenotype"] = pd.Categorical(df["phenotype"], categories=list(phenotypes), ordered=True)
    df["signature"] = pd.Categorical(df["signature"], categories=list(signatures), ordered=True)
    return df


def make_cell_type_measurements(
    n_per_group: int = 10,
    cell_types: Sequence[str] = DEFAULT_CELL_TYPES,
    phenotypes: Sequence[str] = DEFAULT_PHENOTYPES,
    shifts: Sequence[float] = (0.0, 4.0, 10.0),
    base_mean: float = 20.0,
    sd: float = 5.0,
    seed: int = 123,
) -> pd.DataFrame:
    """Generate immune cell-type measurements per phenotype group.

    Values are normal draws around ``base_mean + shift`` for each phenotype,
    clipped at zero.

    Returns:
        Long dataframe with columns: sample_id, phenotype, cell_type, value
    """
    if len(shifts) != len(phenotypes):
        raise ValueError(
            f"Expected one shift per phenotype ({len(phenotypes)}), got {len(shifts)}"
        )
    if n_per_group < 2:
        raise ValueError(f"n_per_group must be >= 2, got {n_per_group}")

    rng = np.random.default_rng(seed)
    frames = []
    for cell_type in cell_types:
        for g_idx, (phenotype, shift) in enumerate(zip(phenotypes, shifts)):
            values = rng.normal(base_mean + shift, sd, size=n_per_group)
            frames.append(
                pd.DataFrame(
                    {
                        "sample_id": [
                            f"{phenotype[:3].upper()}{g_idx}_{i + 1:02d}"
                            for i in range(n_per_group)
                        ],
                        "phenotype": phenotype,
                        "cell_type": cell_type,
                        "value": np.clip(values, 0.0, None),
                    }
                )
            )

    df = pd.concat(frames, ignore_index=True)
    df["phenotype"] = pd.Categorical(df["phenotype"], categories=list(phenotypes), ordered=True)
    df["cell_type"] = pd.Categorical(df["cell_type"], categories=list(cell_types), ordered=True)
    return df
