"""statuswatch CLI entry point."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
import yaml
from rich.console import Console
from rich.table import Table

from statuswatch.config.models import StatusWatchConfig
from statuswatch.status.models import NormalizedStatus, ServiceCategory

app = typer.Typer(
    name="statuswatch",
    help="statuswatch: normalized status of third-party services",
    no_args_is_help=True,
)
console = Console()

STATUS_STYLES = {
    NormalizedStatus.OPERATIONAL: "green",
    NormalizedStatus.DEGRADED: "yellow",
    NormalizedStatus.OUTAGE: "red",
    NormalizedStatus.MAINTENANCE: "blue",
    NormalizedStatus.FETCH_FAILED: "dim",
}


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load(path: Path | None) -> StatusWatchConfig:
    from statuswatch.config.loader import load_catalog

    try:
        return load_catalog(path=path)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
    except yaml.YAMLError as exc:
        console.print(f"[red]YAML parsing failed: {exc}[/red]")
        raise typer.Exit(1)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)


@app.command()
def status(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .statuswatch.yaml"),
    search: str = typer.Option("", "--search", "-s", help="Only services whose name contains this text"),
    category: ServiceCategory | None = typer.Option(None, "--category", "-c", help="Only this category"),
) -> None:
    """Fetch every status endpoint once and show the normalized results."""
    from statuswatch.status.registry import ServiceRegistry

    config = _load(path)
    registry = ServiceRegistry(config)
    result = registry.collect_sync()

    table = Table(title="Service Status")
    table.add_column("Service", style="bold")
    table.add_column("Category")
    table.add_column("Status")

    for entry in registry.filter(search=search, category=category):
        value = result.get(entry.key)
        style = STATUS_STYLES[value]
        table.add_row(entry.name, entry.category.value, f"[{style}]{value.value}[/{style}]")

    console.print(table)
    counts = result.summary()
    console.print(
        " ".join(f"{name}: {count}" for name, count in counts.items()),
    )
    console.print(f"[dim]Updated {result.generated_at.isoformat()}[/dim]")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind host"),
    port: int = typer.Option(8000, help="Bind port"),
) -> None:
    """Start the status API server."""
    import uvicorn

    console.print(f"[bold]statuswatch[/bold] starting on http://{host}:{port}")
    uvicorn.run("statuswatch.api.app:get_app", host=host, port=port, factory=True, reload=False)


config_app = typer.Typer(name="config", help="Configuration commands")
app.add_typer(config_app)


@config_app.command("validate")
def config_validate(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .statuswatch.yaml"),
) -> None:
    """Validate the catalog: schema, endpoint resolution, keys and shared endpoints."""
    from urllib.parse import urlparse

    from statuswatch.config.loader import load_catalog
    from statuswatch.status.resolver import validate_catalog

    try:
        config = load_catalog(path=path)
        console.print("[green]✓[/green] YAML parses correctly")
        console.print("[green]✓[/green] Pydantic validation passes")
    except FileNotFoundError as exc:
        console.print(f"[red]✗ {exc}[/red]")
        raise typer.Exit(1)
    except yaml.YAMLError as exc:
        console.print(f"[red]✗ YAML parsing failed: {exc}[/red]")
        raise typer.Exit(1)
    except ValueError as exc:
        console.print("[green]✓[/green] YAML parses correctly")
        console.print(f"[red]✗ Pydantic validation failed: {exc}[/red]")
        raise typer.Exit(1)

    errors: list[str] = []
    for entry in config.services:
        for label, url in (("url", entry.url), ("status_api_url", entry.status_api_url)):
            if url is None:
                continue
            try:
                parsed = urlparse(url)
            except ValueError as exc:
                errors.append(f"Service '{entry.key}': invalid {label} '{url}' ({exc})")
                continue
            if not parsed.scheme or not parsed.netloc:
                errors.append(f"Service '{entry.key}': invalid {label} '{url}'")
    errors.extend(validate_catalog(config.services))

    if not errors:
        console.print(f"[green]✓[/green] {len(config.services)} service(s) resolve to a status endpoint")
        console.print("[green]✓[/green] Service keys are unique")
        console.print("\n[green bold]Configuration is valid.[/green bold]")
    else:
        for err in errors:
            console.print(f"[red]✗ {err}[/red]")
        console.print(f"\n[red bold]{len(errors)} validation error(s) found.[/red bold]")
        raise typer.Exit(1)


@config_app.command("show")
def config_show(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .statuswatch.yaml"),
) -> None:
    """Print the catalog with resolved status endpoints."""
    from statuswatch.status.resolver import ResolutionError, resolve_endpoint

    config = _load(path)

    console.print("[bold]Fetch:[/bold]")
    console.print(f"  Timeout: {config.fetch.timeout}s")
    console.print(f"  Retries: {config.fetch.retries}")
    console.print(f"  Cache TTL: {config.api.cache_ttl}s\n")

    console.print("[bold]Services:[/bold]")
    for entry in config.services:
        try:
            resolution = resolve_endpoint(entry)
        except ResolutionError as exc:
            console.print(f"  {entry.key}: [red]{exc}[/red]")
            continue
        console.print(f"  {entry.key}: {resolution.url} ({resolution.format.value})")


def main() -> None:
    app()
