"""CLI for policy-portal: extract / template / serve commands."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from policy_portal.core.config import AppSettings, ExtractionConfig
from policy_portal.core.logging_config import setup_logging
from policy_portal.core.startup_checks import validate_settings
from policy_portal.defaults import DEFAULT_POLICY
from policy_portal.exceptions import PolicyPortalError
from policy_portal.extraction.factory import create_extractor
from policy_portal.extraction.images import ImagePolicy, load_image
from policy_portal.models import PolicyDocument

app = typer.Typer(name="policy-portal", help="Policy image extraction and acknowledgement portal")
console = Console()


def _build_settings(model: Optional[str], api_key: Optional[str]) -> AppSettings:
    """Build settings, overriding env defaults with CLI flags."""
    overrides: dict = {}
    if model:
        overrides["model"] = model
    if api_key:
        overrides["api_key"] = api_key
    settings = AppSettings()
    if overrides:
        settings = settings.model_copy(
            update={"extraction": ExtractionConfig(**{**settings.extraction.model_dump(), **overrides})}
        )
    return settings


def _print_policy(policy: PolicyDocument, as_json: bool) -> None:
    if as_json:
        typer.echo(policy.model_dump_json(by_alias=True, indent=2))
        return

    console.print(f"[bold]{policy.company_name}[/bold]")
    console.print(f"{policy.document_title}  ({policy.date})\n")

    table = Table(title="Sections")
    table.add_column("#", style="cyan")
    table.add_column("Section", style="green")
    table.add_column("Rules")

    for number, section in enumerate(policy.sections, start=1):
        rules = "\n".join(f"• {rule}" for rule in section.rules)
        table.add_row(str(number), section.title, rules)

    console.print(table)
    console.print(f"\nSections: {len(policy.sections)}, Rules: {policy.rule_count}")


@app.command()
def extract(
    image_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Policy image (PNG, JPG, ...)"),
    as_json: bool = typer.Option(False, "--json", help="Print the policy as JSON"),
    model: Optional[str] = typer.Option(None, "--model", help="LiteLLM model name"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="Extraction service API key"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Extract a structured policy from an image (one attempt, no retries)."""
    settings = _build_settings(model, api_key)
    observability = settings.observability
    if verbose:
        observability = observability.model_copy(update={"log_level": "DEBUG"})
    setup_logging(observability)

    try:
        validate_settings(settings)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from exc

    extractor = create_extractor(settings)

    try:
        image = load_image(image_file.read_bytes(), policy=ImagePolicy.from_config(settings.upload))
        if not as_json:
            console.print(f"[bold]Extracting {image_file.name}[/bold] ({image.mime_type}, {image.size} bytes)")
        policy = asyncio.run(extractor.extract(image))
    except PolicyPortalError as exc:
        console.print(f"[red]Extraction failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    _print_policy(policy, as_json)


@app.command()
def template(
    as_json: bool = typer.Option(False, "--json", help="Print the policy as JSON"),
) -> None:
    """Show the built-in default policy template."""
    _print_policy(DEFAULT_POLICY, as_json)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default POLICY_API_HOST)"),
    port: Optional[int] = typer.Option(None, help="Port (default POLICY_API_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
) -> None:
    """Run the portal web service."""
    import uvicorn

    api = AppSettings().api
    uvicorn.run(
        "policy_portal.api.app:app",
        host=host or api.host,
        port=port or api.port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
