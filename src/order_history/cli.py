"""Click CLI entry point for the orders command.

Handles argument parsing, config loading, and error display. All business
logic is delegated to ``pipeline``, ``aggregator``, ``config``, and
``export`` modules.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from order_history import __version__
from order_history.console import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="order-history")
def cli() -> None:
    """Extract, total, and export an account's order history."""


@cli.command()
@click.option("--output", "output_file", default=None, type=click.Path(), help="Workbook path (overrides config).")
@click.option("--headless", is_flag=True, default=False, help="Run the browser without a window.")
@click.option("--strict", is_flag=True, default=False, help="Fail if pagination stops before the last page.")
@click.option("--quiet", is_flag=True, default=False, help="Only show warnings and the summary.")
@click.option("--debug", is_flag=True, default=False, help="Developer-level diagnostics.")
@click.option("--no-color", is_flag=True, default=False, help="Disable coloured log output.")
def extract(
    output_file: str | None,
    headless: bool,
    strict: bool,
    quiet: bool,
    debug: bool,
    no_color: bool,
) -> None:
    """Log in, walk every order page, print totals, and export a workbook."""
    configure_logging(verbose=not quiet, debug=debug, color=not no_color)
    root = Path.cwd()

    # Load configuration
    try:
        from order_history.config import load_config

        config = load_config(root)
    except FileNotFoundError as exc:
        click.echo(
            f"Error: {exc}. Run 'orders init' to create the project structure.",
            err=True,
        )
        sys.exit(1)
    except Exception as exc:
        click.echo(f"Error loading configuration: {exc}", err=True)
        sys.exit(1)

    if headless:
        config.browser.headless = True
    if strict:
        config.pagination.strict = True
    if output_file is not None:
        config.output_file = output_file

    # Run the browser session
    from order_history.pipeline import run

    try:
        result = run(config)
    except click.Abort:
        raise
    except Exception as exc:
        click.echo(f"Error during extraction: {exc}", err=True)
        sys.exit(1)

    # Print summary, then export
    from order_history.export import export, print_summary

    print_summary(result.summary, result.walk, currency_label=config.currency_label)

    output_path = Path(config.output_file)
    if not output_path.is_absolute():
        output_path = root / output_path
    try:
        written = export(result.walk.orders, output_path)
    except Exception as exc:
        click.echo(f"Error writing output: {exc}", err=True)
        sys.exit(1)
    click.echo(f"Wrote {written}")

    if config.pagination.strict and result.walk.terminated_early:
        click.echo(
            f"Error: pagination stopped after page {result.walk.pages_scraped} "
            f"of {result.walk.total_pages}.",
            err=True,
        )
        sys.exit(1)


@cli.command()
@click.option(
    "--dir", "target_dir", default=".", type=click.Path(), help="Directory to initialize."
)
def init(target_dir: str) -> None:
    """Create a default orders.toml and output directory."""
    from order_history.config import initialize

    target = Path(target_dir).resolve()

    try:
        initialize(target)
    except Exception as exc:
        click.echo(f"Error initializing project: {exc}", err=True)
        sys.exit(1)

    click.echo(f"Initialized order history project in {target}")


@cli.command("show-config")
def show_config() -> None:
    """Print the effective configuration, defaults included, as TOML."""
    from order_history.config import dump_config, load_config

    try:
        config = load_config(Path.cwd())
    except FileNotFoundError as exc:
        click.echo(
            f"Error: {exc}. Run 'orders init' to create the project structure.",
            err=True,
        )
        sys.exit(1)
    except Exception as exc:
        click.echo(f"Error loading configuration: {exc}", err=True)
        sys.exit(1)

    click.echo(dump_config(config), nl=False)


@cli.command("install-browser")
def install_browser() -> None:
    """Download the Chromium build used for extraction."""
    from order_history.browser import install_browser as _install

    configure_logging(verbose=True, debug=False)
    status = _install()
    if status != 0:
        click.echo(f"Error: playwright install exited with status {status}", err=True)
        sys.exit(status)
    click.echo("Chromium is ready.")
