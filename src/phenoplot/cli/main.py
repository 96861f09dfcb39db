"""Main CLI entrypoint using Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, List

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import typer  # noqa: E402

from phenoplot import __version__  # noqa: E402
from phenoplot.config import StackedBarConfig, ComparisonConfig  # noqa: E402

app = typer.Typer(
    name="phenoplot",
    help="Composition and group-comparison charts for phenotype-grouped data.",
    add_completion=False,
)

# Logging setup
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"phenoplot {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
):
    """phenoplot: stacked composition charts and annotated group comparisons."""
    pass


@app.command()
def stacked(
    data: Optional[Path] = typer.Option(
        None,
        "--data",
        help="Long table (.csv, .tsv, .parquet) with sample, phenotype, category and value "
        "columns. Omit to render the example signature exposures.",
    ),
    out: Path = typer.Option(Path("derived/composition.png"), "--out", help="Output image file"),
    sample_col: str = typer.Option("sample_id", "--sample-col", help="Sample ID column"),
    group_col: str = typer.Option("phenotype", "--group-col", help="Phenotype group column"),
    category_col: str = typer.Option("signature", "--category-col", help="Stacked category column"),
    value_col: str = typer.Option("exposure", "--value-col", help="Value column"),
    phenotypes: Optional[List[str]] = typer.Option(None, "--phenotype", help="Phenotype display order"),
    sort_by: Optional[str] = typer.Option(None, "--sort-by", help="Category used to order samples"),
    normalize: bool = typer.Option(False, "--normalize", help="Show per-sample proportions"),
    title: Optional[str] = typer.Option(None, "--title", help="Figure title"),
    fig_dpi: int = typer.Option(160, "--fig-dpi", help="Figure DPI"),
    seed: int = typer.Option(42, "--seed", help="Random seed for the example data"),
):
    """
    Render a stacked composition bar chart faceted by phenotype group.

    Examples:
        # Example data
        phenoplot stacked --out composition.png

        # Own exposures, proportions, ordered by SBS1
        phenoplot stacked --data exposures.csv --normalize --sort-by SBS1
    """
    from phenoplot.data.loaders import load_table
    from phenoplot.pipelines import run_stacked_pipeline

    try:
        config = StackedBarConfig(
            sample_col=sample_col,
            group_col=group_col,
            category_col=category_col,
            value_col=value_col,
            phenotypes=phenotypes or None,
            sort_by=sort_by,
            normalize=normalize,
            fig_dpi=fig_dpi,
            title=title,
            outfile=out,
        )
        df = load_table(data) if data is not None else None

        typer.echo("Rendering stacked composition chart...")
        results = run_stacked_pipeline(df, config, seed=seed)
        plt.close(results["figure"])

        typer.secho("\n✓ Chart complete!", fg=typer.colors.GREEN)
        typer.echo(f"  Figure: {results['figure_path']}")
        typer.echo(f"  Samples: {results['n_samples']}")
        typer.echo(f"  Groups: {results['n_groups']}")

    except Exception as e:
        typer.secho(f"\n✗ Chart failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command()
def compare(
    data: Optional[Path] = typer.Option(
        None,
        "--data",
        help="Long table (.csv, .tsv, .parquet) with phenotype, partition and value "
        "columns. Omit to render the example cell-type measurements.",
    ),
    outdir: Path = typer.Option(Path("derived"), "--outdir", help="Output directory"),
    prefix: str = typer.Option("comparison", "--prefix", help="Output file name prefix"),
    value_col: str = typer.Option("value", "--value-col", help="Value column"),
    group_col: str = typer.Option("phenotype", "--group-col", help="Phenotype group column"),
    partition_col: str = typer.Option("cell_type", "--partition-col", help="Facet/partition column"),
    no_partition: bool = typer.Option(False, "--no-partition", help="Compare the whole dataset at once"),
    phenotypes: Optional[List[str]] = typer.Option(None, "--phenotype", help="Phenotype display order"),
    alpha: float = typer.Option(0.05, "--alpha", help="Significance threshold"),
    p_adjust: str = typer.Option("bonferroni", "--p-adjust", help="P-value adjustment after Tukey HSD"),
    hide_ns: bool = typer.Option(False, "--hide-ns", help="Hide non-significant brackets"),
    image_format: str = typer.Option("png", "--format", help="Figure format (png, pdf, svg)"),
    fig_dpi: int = typer.Option(160, "--fig-dpi", help="Figure DPI"),
    seed: int = typer.Option(123, "--seed", help="Random seed for the example data"),
):
    """
    Compare phenotype groups (ANOVA + Tukey HSD) and render annotated boxplots.

    Writes the figure, a CSV of pairwise comparisons and a JSON report.

    Examples:
        # Example data, one panel per cell type
        phenoplot compare --outdir derived

        # Own data, no partitioning, Holm adjustment
        phenoplot compare --data cells.csv --no-partition --p-adjust holm
    """
    from phenoplot.data.loaders import load_table
    from phenoplot.pipelines import run_comparison_pipeline

    try:
        config = ComparisonConfig(
            value_col=value_col,
            group_col=group_col,
            partition_col=None if no_partition else partition_col,
            phenotypes=phenotypes or None,
            alpha=alpha,
            p_adjust=p_adjust,
            hide_ns=hide_ns,
            fig_dpi=fig_dpi,
            outdir=outdir,
            prefix=prefix,
        )
        df = load_table(data) if data is not None else None

        typer.echo("Running group comparisons...")
        results = run_comparison_pipeline(df, config, seed=seed, image_format=image_format)
        plt.close(results["figure"])

        comparisons = results["comparisons"]
        typer.secho("\n✓ Comparison complete!", fg=typer.colors.GREEN)
        typer.echo(f"  Figure: {results['figure_path']}")
        typer.echo(f"  Comparisons table: {results['table_path']}")
        typer.echo(f"  Report: {results['report_path']}")
        typer.echo(f"\n  Comparisons: {len(comparisons)}")
        typer.echo(f"  Significant: {int((comparisons['significance_label'] != 'ns').sum())}")

    except Exception as e:
        typer.secho(f"\n✗ Comparison failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
