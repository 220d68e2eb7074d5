"""CLI for storagedriver."""

import logging
import os
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from .config import load_config
from .constants import STORAGEDRIVER_VERSION
from .errors import ConfigError, StorageError
from .factory import available_drivers, make_driver
from .paths import is_valid_path
from .testsuites.benchmarks import CATEGORIES, DEFAULT_SIZES, BenchmarkRunner, render_results
from .testsuites.generators import ContentGenerator

app = typer.Typer(help="""\
Storage driver tooling: inspect registered drivers, check path grammar,
and benchmark a configured driver.""")

console = Console()


def _version_callback(value: bool):
    if value:
        console.print(f"storagedriver {STORAGEDRIVER_VERSION}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Configure logging for every command."""
    level = logging.DEBUG if verbose or os.environ.get("DEBUG") else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command()
def drivers():
    """List registered storage drivers."""
    table = Table(title="Registered storage drivers")
    table.add_column("Name", style="cyan")
    for name in available_drivers():
        table.add_row(name)
    console.print(table)


@app.command("check-paths")
def check_paths(
    paths: List[str] = typer.Argument(..., help="Paths to validate"),
):
    """Validate paths against the storage path grammar."""
    invalid = 0
    for path in paths:
        if is_valid_path(path):
            console.print(f"[green]✓[/green] {path}")
        else:
            invalid += 1
            console.print(f"[red]✗[/red] {path!r}")
    if invalid:
        raise typer.Exit(1)


@app.command()
def bench(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (default: ./storagedriver.yaml)"),
    driver: Optional[str] = typer.Option(None, "--driver", "-d", help="Override the configured driver name"),
    category: List[str] = typer.Option(list(CATEGORIES), "--category", help="Benchmark categories to run"),
    size: List[int] = typer.Option([], "--size", help="Payload sizes in bytes (file counts for list/delete)"),
    iterations: int = typer.Option(10, "--iterations", "-n", min=1, help="Measured repetitions per case"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for paths and payloads"),
):
    """Benchmark the configured storage driver."""
    try:
        cfg = load_config(config)
        if driver:
            cfg.driver.name = driver
        instance = make_driver(cfg.driver)
    except ConfigError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)

    sizes = {name: list(size) for name in CATEGORIES} if size else DEFAULT_SIZES
    runner = BenchmarkRunner(instance, ContentGenerator(seed), iterations=iterations)
    console.print(f"[dim]Benchmarking {instance.name} (seed {runner.generator.seed})[/dim]")

    try:
        with console.status("Running benchmarks..."):
            results = runner.run(
                categories=category,
                sizes=sizes,
                on_result=lambda r: console.print(f"  [green]✓[/green] {r.name}"),
            )
    except (StorageError, ValueError) as e:
        console.print(f"[red]✗ Benchmark failed:[/red] {e}")
        raise typer.Exit(1)

    console.print(render_results(results, title=f"{instance.name} benchmarks"))


if __name__ == "__main__":
    app()
