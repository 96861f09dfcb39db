"""Data loading, reshaping and example datasets."""

from phenoplot.data.loaders import (
    load_table,
    validate_columns,
    to_long,
    order_phenotypes,
)
from phenoplot.data.synthetic import (
    make_signature_exposures,
    make_cell_type_measurements,
)

__all__ = [
    "load_table",
    "validate_columns",
    "to_long",
    "order_phenotypes",
    "make_signature_exposures",
    "make_cell_type_measurements",
]
