"""Command-line interface for abuseio-collectors."""

import logging
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from abuseio_collectors import __version__
from abuseio_collectors.collectors.feeds import FeedConfig
from abuseio_collectors.collectors.registry import Registry, canonical_name
from abuseio_collectors.config import CollectorsConfig, load_config
from abuseio_collectors.errors import ConfigError

app = typer.Typer(
    name="abuseio-collectors",
    help="AbuseIO feed collectors - fetch and normalize abuse reports",
    add_completion=False,
)
console = Console()

state = {"config_path": None}


def version_callback(value: bool):
    if value:
        console.print(f"abuseio-collectors version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Collectors YAML configuration (default: $ABUSEIO_COLLECTORS_CONFIG)"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """AbuseIO collectors."""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    state["config_path"] = config


def _load() -> CollectorsConfig:
    try:
        return load_config(state["config_path"])
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command("list")
def list_collectors():
    """List installed collectors."""
    registry = Registry(_load())
    names = registry.list_collectors()

    if not names:
        console.print("No collectors installed.")
        return

    table = Table(title="Collectors")
    table.add_column("Collector", style="cyan")
    table.add_column("Enabled", justify="center")
    for name in names:
        enabled = registry.is_enabled(name)
        table.add_row(name, "[green]yes[/green]" if enabled else "[red]no[/red]")
    console.print(table)


@app.command()
def feeds(
    collector: str = typer.Argument(..., help="Collector name"),
):
    """Show the feeds configured for a collector."""
    config = _load()
    collector_cls = Registry(config).collector_class(collector)
    name = collector_cls.config_key if collector_cls else canonical_name(collector)
    configured = config.get(f"collectors.{name}.feeds") or {}

    if not isinstance(configured, dict) or not configured:
        console.print(f"[yellow]No feeds configured for collector {name}[/yellow]")
        raise typer.Exit(1)

    table = Table(title=f"Feeds of {name}")
    table.add_column("Feed", style="cyan")
    table.add_column("Enabled", justify="center")
    table.add_column("Required fields")
    table.add_column("Filters")
    for feed_name in sorted(configured):
        settings = configured[feed_name]
        feed = FeedConfig.from_mapping(feed_name, settings if isinstance(settings, dict) else None)
        table.add_row(
            feed_name,
            "[green]yes[/green]" if feed.enabled else "[red]no[/red]",
            ", ".join(feed.required_fields) or "-",
            ", ".join(sorted(feed.filter_fields)) or "-",
        )
    console.print(table)


@app.command()
def run(
    collector: str = typer.Argument(..., help="Collector name"),
    feed: str = typer.Argument(..., help="Feed name within the collector"),
    transport: Optional[str] = typer.Argument(None, help="Transport handle passed to the collector"),
    job_id: Optional[str] = typer.Option(None, "--job-id", "-j", help="Job identifier for log events"),
    output_json: bool = typer.Option(False, "--json", help="Output the run result as JSON"),
):
    """Run a collector for one feed."""
    registry = Registry(_load())
    instance = registry.create(collector, job_id=job_id)
    if instance is None:
        console.print(f"[red]Collector {collector} is not available[/red]")
        raise typer.Exit(1)

    result = instance.run(feed, transport)

    if output_json:
        console.print_json(data=result.to_dict())
    elif result.error_status:
        console.print(f"[red]ERROR: {escape(result.error_message)}[/red]")
    else:
        console.print(
            f"[green]{result.error_message}[/green]: "
            f"{len(result.records)} records, {result.warning_count} warnings"
        )

    if result.error_status:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
