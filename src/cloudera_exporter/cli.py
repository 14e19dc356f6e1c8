"""Cloudera exporter CLI entry point."""

from __future__ import annotations

import asyncio
import logging
import platform
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from cloudera_exporter import __version__
from cloudera_exporter.config.models import ExporterConfig, RegistryMode

app = typer.Typer(
    name="cloudera-exporter",
    help="Export Cloudera Manager service health as Prometheus metrics",
    no_args_is_help=True,
)
console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _resolve_config(path: Path | None, **overrides: object) -> ExporterConfig:
    """Load config (or defaults) and apply CLI overrides; exit 1 on error."""
    from cloudera_exporter.config.loader import apply_overrides, load_config_or_default

    try:
        config = load_config_or_default(path)
        return apply_overrides(config, **overrides)
    except FileNotFoundError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)


@app.command()
def serve(
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Path to .cloudera_exporter.yaml"),
    listen_address: str | None = typer.Option(
        None, "--listen-address", help="Address to listen on for web interface and telemetry [default: :9107]"
    ),
    telemetry_path: str | None = typer.Option(
        None, "--telemetry-path", help="Path under which to expose metrics [default: /metrics]"
    ),
    cloudera_uri: str | None = typer.Option(None, "--cloudera-uri", help="Base URL of the Cloudera Manager API"),
    cloudera_user: str | None = typer.Option(None, "--cloudera-user", help="Cloudera Manager username"),
    cloudera_password: str | None = typer.Option(
        None, "--cloudera-password", envvar="CLOUDERA_PASSWORD", help="Cloudera Manager password"
    ),
    cloudera_clustername: str | None = typer.Option(None, "--cloudera-clustername", help="Cluster to monitor"),
    mode: RegistryMode | None = typer.Option(None, "--mode", help="Metric registry mode"),
    interval: float | None = typer.Option(None, "--interval", help="Seconds between polls [default: 10]"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level [default: INFO]"),
) -> None:
    """Start polling the Cloudera API and serve metrics."""
    from cloudera_exporter.exporter import run_exporter

    config = _resolve_config(
        config_path,
        listen_address=listen_address,
        telemetry_path=telemetry_path,
        uri=cloudera_uri,
        user=cloudera_user,
        password=cloudera_password,
        cluster_name=cloudera_clustername,
        mode=mode,
        interval=interval,
        log_level=log_level,
    )
    _configure_logging(config.log_level)
    logging.getLogger(__name__).info("Starting cloudera-exporter %s", __version__)

    code = asyncio.run(run_exporter(config))
    raise typer.Exit(code)


@app.command()
def status(
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Path to .cloudera_exporter.yaml"),
) -> None:
    """Fetch service health once and print it."""
    from cloudera_exporter.errors import ExporterError
    from cloudera_exporter.health.client import fetch_services
    from cloudera_exporter.metrics.projector import health_value

    config = _resolve_config(config_path)
    try:
        document = asyncio.run(fetch_services(config.cloudera))
    except ExporterError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Cloudera Services ({config.cloudera.cluster_name})")
    table.add_column("Service", style="bold")
    table.add_column("Type")
    table.add_column("State")
    table.add_column("Health")
    table.add_column("Value", justify="right")
    table.add_column("Stale config")

    for svc in document.items:
        value = health_value(svc.health_summary)
        style = "green" if svc.is_good else "red"
        table.add_row(
            svc.name,
            svc.kind,
            svc.service_state,
            f"[{style}]{svc.health_summary}[/{style}]",
            f"{value:.0f}",
            "yes" if svc.config_stale else "",
        )

    console.print(table)


@app.command()
def version() -> None:
    """Print version and build information."""
    console.print(f"cloudera-exporter {__version__} (python {platform.python_version()})")


config_app = typer.Typer(name="config", help="Configuration commands")
app.add_typer(config_app)


@config_app.command("validate")
def config_validate(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .cloudera_exporter.yaml"),
) -> None:
    """Validate configuration file."""
    from urllib.parse import urlparse

    import yaml

    from cloudera_exporter.config.loader import load_config, parse_listen_address

    errors: list[str] = []
    try:
        config = load_config(path=path)
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

    parsed = urlparse(config.cloudera.uri)
    if not parsed.scheme or not parsed.netloc:
        errors.append(f"Invalid Cloudera URI '{config.cloudera.uri}'")
    else:
        console.print("[green]✓[/green] Cloudera URI is valid")

    try:
        parse_listen_address(config.web.listen_address)
        console.print("[green]✓[/green] Listen address is valid")
    except ValueError as exc:
        errors.append(str(exc))

    if config.metrics.mode == RegistryMode.STATIC:
        if not config.metrics.services:
            errors.append("Static mode requires at least one entry in metrics.services")
        for name in config.metrics.services:
            if not name.isidentifier():
                errors.append(f"Service '{name}' cannot be used in a metric name")

    if not errors:
        console.print("\n[green bold]Configuration is valid.[/green bold]")
    else:
        for err in errors:
            console.print(f"[red]✗ {err}[/red]")
        console.print(f"\n[red bold]{len(errors)} validation error(s) found.[/red bold]")
        raise typer.Exit(1)


@config_app.command("show")
def config_show(
    path: Path | None = typer.Option(None, "--path", "-p", help="Path to .cloudera_exporter.yaml"),
) -> None:
    """Print resolved configuration."""
    config = _resolve_config(path)

    console.print("[bold]Web:[/bold]")
    console.print(f"  Listen address: {config.web.listen_address}")
    console.print(f"  Telemetry path: {config.web.telemetry_path}\n")

    console.print("[bold]Cloudera:[/bold]")
    console.print(f"  URI: {config.cloudera.uri}")
    console.print(f"  User: {config.cloudera.user}")
    console.print(f"  Password: {'********' if config.cloudera.password else '(empty)'}")
    console.print(f"  Cluster: {config.cloudera.cluster_name}")
    console.print(f"  Timeout: {config.cloudera.timeout}s\n")

    console.print(f"[bold]Poll interval:[/bold] {config.poll.interval}s")
    console.print(f"[bold]Metrics mode:[/bold] {config.metrics.mode.value}")
    if config.metrics.mode == RegistryMode.STATIC:
        console.print(f"  Services: {', '.join(config.metrics.services)}")
    console.print(f"  Health checks exported: {'yes' if config.metrics.export_health_checks else 'no'}")


def main() -> None:
    app()
