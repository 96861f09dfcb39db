"""Tabular loading and reshaping for phenotype-grouped observations.

Observations are held in long format: one row per (sample, category) value,
tagged with a phenotype group.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, List, Sequence

import pandas as pd

logger = logging.getLogger(__name__)


class DataFormat(str, Enum):
    """Supported input formats."""

    CSV = "csv"
    PARQUET = "parquet"
    PARQUET_DATASET = "parquet_dataset"

    @classmethod
    def from_path(cls, path: Path) -> DataFormat:
        """
        Infer format from path.

        Raises
        ------
        ValueError
            If format cannot be inferred
        """
        path = Path(path)

        if path.is_dir():
            return cls.PARQUET_DATASET

        suffix = path.suffix.lower()
        if suffix in (".csv", ".tsv"):
            return cls.CSV
        elif suffix == ".parquet":
            return cls.PARQUET
        else:
            raise ValueError(
                f"Cannot infer data format from path: {path}. "
                f"Expected .csv, .tsv, .parquet file, or directory for parquet dataset."
            )


def validate_parquet_available() -> None:
    """
    Check if PyArrow is available for Parquet operations.

    Raises
    ------
    ImportError
        If PyArrow is not installed
    """
    try:
        import pyarrow  # noqa: F401
    except ImportError as e:
        raise ImportError(
            "PyArrow is required for Parquet support but is not installed.\n"
            "Install with: pip install phenoplot[parquet] or pip install pyarrow"
        ) from e


def load_table(path: Path | str, columns: Optional[List[str]] = None) -> pd.DataFrame:
    """
    Load a table from file (CSV/TSV, Parquet, or Parquet dataset directory).

    Parameters
    ----------
    path : Path
        Path to data file or directory
    columns : List[str], optional
        Subset of columns to load

    Returns
    -------
    pd.DataFrame
        Loaded data

    Raises
    ------
    FileNotFoundError
        If the path does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data path not found: {path}")

    fmt = DataFormat.from_path(path)
    logger.info(f"Loading table from {path} (format: {fmt.value})")

    if fmt == DataFormat.CSV:
        sep = "\t" if path.suffix.lower() == ".tsv" else ","
        kwargs = {"sep": sep}
        if columns is not None:
            kwargs["usecols"] = columns
        df = pd.read_csv(path, **kwargs)
    else:
        validate_parquet_available()
        import pyarrow.dataset as ds

        dataset = ds.dataset(str(path), format="parquet")
        df = dataset.to_table(columns=columns).to_pandas()

    logger.info(f"Loaded {len(df)} rows, {len(df.columns)} columns")
    return df


def validate_columns(df: pd.DataFrame, required: Sequence[str]) -> None:
    """
    Validate that required columns exist in DataFrame.

    Raises
    ------
    ValueError
        If any required column is missing
    """
    available = set(df.columns)
    missing = [c for c in required if c not in available]
    if missing:
        raise ValueError(
            f"Required columns not found: {missing}. Available: {sorted(map(str, available))[:10]}"
        )


def to_long(
    df: pd.DataFrame,
    id_col: str,
    group_col: str,
    value_cols: Optional[List[str]] = None,
    category_name: str = "category",
    value_name: str = "value",
) -> pd.DataFrame:
    """
    Melt a wide table (one column per category) into long observations.

    Parameters
    ----------
    df : pd.DataFrame
        Wide table with an id column, a phenotype column and numeric columns
    id_col : str
        Sample identifier column
    group_col : str
        Phenotype group column
    value_cols : List[str], optional
        Category columns to melt; defaults to every numeric column
    category_name : str
        Name of the resulting category column
    value_name : str
        Name of the resulting value column

    Returns
    -------
    pd.DataFrame
        Long table with columns [id_col, group_col, category_name, value_name]
    """
    validate_columns(df, [id_col, group_col])

    if value_cols is None:
        value_cols = (
            df.drop(columns=[id_col, group_col]).select_dtypes(include="number").columns.tolist()
        )
    else:
        validate_columns(df, value_cols)

    if not value_cols:
        raise ValueError("No numeric value columns to reshape")

    long_df = df.melt(
        id_vars=[id_col, group_col],
        value_vars=value_cols,
        var_name=category_name,
        value_name=value_name,
    )
    # Keep category order as given by the wide layout
    long_df[category_name] = pd.Categorical(
        long_df[category_name], categories=value_cols, ordered=True
    )
    return long_df


def order_phenotypes(
    df: pd.DataFrame, group_col: str, order: Optional[List[str]] = None
) -> pd.DataFrame:
    """
    Make the phenotype column an ordered categorical.

    Parameters
    ----------
    df : pd.DataFrame
        Input dataframe
    group_col : str
        Phenotype group column
    order : List[str], optional
        Display order of groups; defaults to the existing category order, or
        the order of first appearance for non-categorical columns

    Returns
    -------
    pd.DataFrame
        Copy with an ordered categorical phenotype column

    Raises
    ------
    ValueError
        If the data contains labels absent from ``order``
    """
    validate_columns(df, [group_col])
    df = df.copy()
    raw = df[group_col].astype(object)
    labels = raw.where(raw.isna(), raw.astype(str))

    if order is None and isinstance(df[group_col].dtype, pd.CategoricalDtype):
        present = set(labels.dropna())
        order = [str(c) for c in df[group_col].cat.categories if str(c) in present]
    elif order is None:
        order = list(pd.unique(labels.dropna()))
    else:
        order = [str(o) for o in order]
        unknown = sorted(set(labels.dropna().unique()) - set(order))
        if unknown:
            raise ValueError(f"Phenotype labels not in order {order}: {unknown}")

    df[group_col] = pd.Categorical(labels, categories=order, ordered=True)
    return df
