"""Typer CLI entrypoint for ENS Hunter."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .config import DEFAULT_INPUT, DEFAULT_OUTPUT, ConfigRepository, ScanConfig, ScanSettings
from .engine import JsonRpcOracle, read_identifiers
from .errors import EnsHunterError, MissingCredentialError, OracleError
from .logging_conf import configure_logging
from .orchestrator import ScanOrchestrator, ScanSummary
from .ui import ConsoleMessages, ProgressReporter

app = typer.Typer(
    help="ENS Hunter: bulk availability checks for .eth names.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
config_app = typer.Typer(
    name="config",
    help="Inspect persisted defaults.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
app.add_typer(config_app, name="config")

console = Console()


def build_repository() -> ConfigRepository:
    return ConfigRepository()


def build_oracle(config: ScanConfig) -> JsonRpcOracle:
    return JsonRpcOracle.for_infura(config.infura_key, suffix=config.suffix)


def _progress_default_enabled() -> bool:
    return bool(getattr(sys.stdout, "isatty", lambda: False)())


def _fail(message: str) -> NoReturn:
    console.print(message, style="bold red", markup=False, highlight=False)
    raise typer.Exit(code=1)


def _mask(secret: str) -> str:
    if not secret:
        return "(not set)"
    if len(secret) <= 6:
        return "*" * len(secret)
    return secret[:3] + "*" * (len(secret) - 6) + secret[-3:]


def _render_summary(summary: ScanSummary) -> Table:
    table = Table(title="Scan completed!", box=box.SIMPLE_HEAD)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Total domains checked", str(summary.checked))
    table.add_row("Available domains", str(summary.available))
    errors_style = "red" if summary.errored else "green"
    table.add_row("Errors", f"[{errors_style}]{summary.errored}[/{errors_style}]")
    if summary.write_errors:
        table.add_row("Write errors", f"[red]{summary.write_errors}[/red]")
    table.add_row("Available domains saved to", str(summary.output_path))
    return table


def _render_settings(settings: ScanSettings, path: Path) -> Table:
    table = Table(title=f"Settings ({path})", box=box.SIMPLE_HEAD)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("infura_key", _mask(settings.infura_key))
    table.add_row("workers", str(settings.workers))
    table.add_row("rate_limit (ms)", str(settings.rate_limit))
    table.add_row("retries", str(settings.retries))
    table.add_row("timeout (s)", str(settings.timeout))
    return table


@app.command("scan", help="Check every name in the input file and save the available ones.")
def scan(
    infura: Optional[str] = typer.Option(None, "--infura", help="Infura project ID."),
    input_path: Path = typer.Option(
        DEFAULT_INPUT, "--input", "-i", help="Input file containing domain names."
    ),
    output_path: Path = typer.Option(
        DEFAULT_OUTPUT, "--output", "-o", help="Output file for available domains."
    ),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Concurrent workers."),
    rate: Optional[int] = typer.Option(
        None, "--rate", help="Rate limit in milliseconds between requests."
    ),
    retries: Optional[int] = typer.Option(None, "--retries", help="Retries for failed requests."),
    timeout: Optional[int] = typer.Option(None, "--timeout", help="Overall timeout in seconds."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide the progress bar."),
    save_config: bool = typer.Option(
        False, "--save-config", help="Save current settings as default configuration."
    ),
) -> None:
    repository = build_repository()
    try:
        settings = repository.resolve_settings()
        config = ScanConfig.from_settings(
            settings,
            infura_key=infura,
            workers=workers,
            rate_limit_ms=rate,
            retries=retries,
            timeout_s=timeout,
            verbose=verbose,
            input_path=input_path,
            output_path=output_path,
        )
    except EnsHunterError as exc:
        _fail(str(exc))

    configure_logging(verbose=verbose, log_dir=repository.locator.logs_dir)

    if save_config:
        try:
            repository.save_settings(config.to_settings())
        except OSError as exc:
            console.print(f"Warning: Failed to save configuration: {exc}", style="bold red", markup=False)
        else:
            console.print("Configuration saved successfully!", style="bold green")

    if not config.infura_key:
        _fail(
            str(
                MissingCredentialError(
                    "Infura Project ID is required. Use --infura or set INFURA_KEY "
                    "in .env or config.json"
                )
            )
        )

    try:
        identifiers = read_identifiers(config.input_path, config.suffix)
    except (EnsHunterError, OSError) as exc:
        _fail(f"Failed to load domains: {exc}")

    messages = ConsoleMessages(console, verbose=verbose)
    messages.info("Connecting to Ethereum network...")
    oracle = build_oracle(config)
    try:
        oracle.connect()
    except OracleError as exc:
        oracle.close()
        _fail(f"Failed to connect to Ethereum: {exc}")
    messages.success("Successfully connected to Ethereum")

    console.print(f"Starting ENSHunter - checking [cyan]{len(identifiers)}[/cyan] domains")
    progress = ProgressReporter(enabled=_progress_default_enabled() and not quiet, console=console)
    orchestrator = ScanOrchestrator(config, oracle, progress=progress, messages=messages)
    try:
        summary = orchestrator.run(identifiers)
    except OSError as exc:
        _fail(f"Failed to create output file: {exc}")
    finally:
        oracle.close()

    console.print(_render_summary(summary))
    if summary.deadline_reached:
        console.print(
            f"Timeout of {config.timeout_s:g}s reached; remaining checks were recorded as errors.",
            style="yellow",
        )
    if summary.interrupted:
        console.print("Scan interrupted; partial results were saved.", style="yellow")


@config_app.command("show", help="Show the effective defaults (file, then environment).")
def config_show() -> None:
    repository = build_repository()
    try:
        settings = repository.resolve_settings()
    except EnsHunterError as exc:
        _fail(str(exc))
    console.print(_render_settings(settings, repository.locator.settings_path()))


def main() -> None:  # pragma: no cover
    app()


__all__ = ["app", "build_oracle", "build_repository", "main"]
