"""sparql-scout CLI - Main entry point."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

from sparql_scout import __version__
from sparql_scout.core.config import Settings
from sparql_scout.core.exceptions import SparqlScoutError
from sparql_scout.core.logging import configure_logging

app = typer.Typer(
    name="sparql-scout",
    help="Find and verify SPARQL endpoints of open data portals",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        console.print(f"sparql-scout v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """sparql-scout - SPARQL endpoint discovery for open data portal lists."""
    pass


def _load_settings(
    config: Optional[Path],
    log_level: Optional[str],
    json_logs: bool,
) -> Settings:
    try:
        settings = Settings.from_file_or_default(config)
    except SparqlScoutError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    
    if log_level:
        settings.logging.level = log_level.upper()
    if json_logs:
        settings.logging.json_format = True
    
    configure_logging(
        level=settings.logging.level,
        json_format=settings.logging.json_format,
        log_file=str(settings.logging.log_file) if settings.logging.log_file else None,
    )
    return settings


@app.command("filter")
def filter_portals(
    input_file: Path = typer.Argument(Path("input.json"), help="JSON document with portal records"),
    output: Optional[Path] = typer.Argument(None, help="Result document (default: sparql_portals.json)"),
    check: bool = typer.Option(False, "--check/--no-check", help="Verify candidates with live SPARQL probes"),
    strict: Optional[bool] = typer.Option(None, "--strict/--no-strict", help="Only keep portals with an explicit endpoint"),
    country: Optional[str] = typer.Option(None, help="Only keep portals in this country (inCountryEn)"),
    timeout: Optional[int] = typer.Option(None, min=1, help="Per-request timeout in milliseconds"),
    concurrency: Optional[int] = typer.Option(None, help="Number of concurrent probe workers"),
    config: Optional[Path] = typer.Option(None, help="Path to configuration file"),
    log_level: Optional[str] = typer.Option(None, help="Log level (DEBUG, INFO, WARNING, ERROR)"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit JSON log lines"),
) -> None:
    """
    Derive SPARQL endpoint candidates for each portal and export the matches.
    
    Without --check every portal with a candidate is exported. With --check
    each candidate is probed (ASK via GET, ASK via POST, service description)
    and only portals with a confirmed endpoint are exported.
    """
    from sparql_scout.core.orchestrator import PortalFilterOrchestrator
    
    settings = _load_settings(config, log_level, json_logs)
    if strict is not None:
        settings.engine.strict = strict
    if country is not None:
        settings.filter.country = country
    if timeout is not None:
        settings.prober.timeout_ms = timeout
    if concurrency is not None:
        settings.engine.concurrency = concurrency
    if output is not None:
        settings.output.output_path = output
    
    if not input_file.exists():
        console.print(f"[red]Error: Input file '{input_file}' does not exist[/red]")
        raise typer.Exit(1)
    
    if settings.output.verbose:
        console.print(Panel.fit(
            f"[bold cyan]Input:[/bold cyan] {input_file}\n"
            f"[bold cyan]Output:[/bold cyan] {settings.output.output_path}\n"
            f"[bold cyan]Check:[/bold cyan] {check}\n"
            f"[bold cyan]Strict:[/bold cyan] {settings.engine.strict}\n"
            f"[bold cyan]Country:[/bold cyan] {settings.filter.country or 'all'}\n"
            f"[bold cyan]Timeout:[/bold cyan] {settings.prober.timeout_ms} ms\n"
            f"[bold cyan]Concurrency:[/bold cyan] {settings.engine.concurrency}",
            title="Filter Configuration",
        ))
    
    orchestrator = PortalFilterOrchestrator(settings)
    
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            TimeRemainingColumn(),
            console=console,
        ) as progress:
            stats = asyncio.run(orchestrator.run(
                input_path=input_file,
                check=check,
                progress=progress,
            ))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(130)
    except SparqlScoutError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    
    console.print_json(data=stats.model_dump())


@app.command()
def probe(
    url: str = typer.Argument(..., help="Candidate SPARQL endpoint URL"),
    timeout: Optional[int] = typer.Option(None, min=1, help="Per-request timeout in milliseconds"),
    config: Optional[Path] = typer.Option(None, help="Path to configuration file"),
    log_level: Optional[str] = typer.Option(None, help="Log level (DEBUG, INFO, WARNING, ERROR)"),
) -> None:
    """Probe a single URL and report which strategy confirmed it."""
    from sparql_scout.prober.scanner import EndpointProber
    
    settings = _load_settings(config, log_level, json_logs=False)
    if timeout is not None:
        settings.prober.timeout_ms = timeout
    
    async def run_probe():
        async with EndpointProber(settings.prober) as prober:
            return await prober.probe(url)
    
    with console.status(f"Probing {url}..."):
        outcome = asyncio.run(run_probe())
    
    if outcome.success:
        console.print(f"[green]✓ {url} answers SPARQL ({outcome.mode.value})[/green]")
    else:
        console.print(f"[red]✗ {url} did not answer SPARQL[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
