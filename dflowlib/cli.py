"""
dflowlib command-line interface.

Provides CLI commands for validating the design flow pipeline against
its reference benchmarks.
"""

from __future__ import annotations

import logging

import click


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log pipeline details.")
def cli(verbose: bool) -> None:
    """dflowlib - DFLOW design flow analysis tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
def validate() -> None:
    """Run validation benchmarks against hand-computed design flows."""
    from dflowlib.validation.benchmarks import print_benchmark_report, run_all_benchmarks

    click.echo("Running validation benchmarks...")
    results = run_all_benchmarks()
    print_benchmark_report(results)

    n_pass = sum(1 for r in results.values() if r.passed)
    n_total = len(results)
    if n_pass < n_total:
        raise SystemExit(1)


@cli.command()
@click.option("--format", "fmt", type=click.Choice(["text", "json"]), default="text")
def benchmark(fmt: str) -> None:
    """Run benchmarks and generate a report.

    Parameters
    ----------
    fmt : str
        Output format: 'text' or 'json'.
    """
    from dflowlib.validation.benchmarks import run_all_benchmarks
    from dflowlib.validation.reports import generate_json_report, generate_text_report

    if fmt == "json":
        click.echo(generate_json_report(run_all_benchmarks()))
    else:
        click.echo("Running benchmarks...")
        click.echo(generate_text_report(run_all_benchmarks()))


if __name__ == "__main__":
    cli()
