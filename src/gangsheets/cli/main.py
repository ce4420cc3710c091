"""Typer CLI for gangsheet packing."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from gangsheets.application import CreateGangsheetInput, PlacementOutcome
from gangsheets.application.assembler import safe_filename
from gangsheets.application.config import ConfigError, PackJobConfig, load_job
from gangsheets.application.services import (
    DesignItemExtractor,
    LayoutPlanner,
    SettingsResolver,
)
from gangsheets.config import configure_logging, get_app_settings
from gangsheets.domain import GangsheetError, ShelfPlacementEngine
from gangsheets.infrastructure import (
    InMemoryDesignCatalog,
    InMemorySettingsStore,
    PlacementReportFormatter,
    SettingsFormatter,
    SvgRollRenderer,
    build_zip_archive,
)

app = typer.Typer(
    name="gangsheets",
    help="Pack order designs onto gangsheet rolls for DTF printing.",
)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Configure logging for every command."""
    configure_logging("DEBUG" if verbose else get_app_settings().log_level)


async def _preview_job(job: PackJobConfig) -> PlacementOutcome:
    catalog = InMemoryDesignCatalog()
    catalog.add(job.tenant_id, *(design.to_record() for design in job.designs))
    resolver = SettingsResolver(
        InMemorySettingsStore(),
        system_defaults=get_app_settings().system_packing_settings(),
    )
    request = CreateGangsheetInput(
        order_ids=job.resolved_order_ids(),
        name=job.name,
        settings=job.settings.to_domain() if job.settings else None,
        group_by_modification=job.group_by_modification,
        product_filter=(
            frozenset(job.product_filter) if job.product_filter is not None else None
        ),
        quantity_overrides=job.quantity_overrides,
    )
    planner = LayoutPlanner(
        resolver, DesignItemExtractor(catalog), ShelfPlacementEngine()
    )
    return await planner.plan(job.tenant_id, request)


def _write_rolls(outcome: PlacementOutcome, name: str, output_dir: Path) -> list[Path]:
    renderer = SvgRollRenderer()
    output_dir.mkdir(parents=True, exist_ok=True)
    base_name = safe_filename(name)

    written: list[Path] = []
    entries: list[tuple[str, bytes]] = []
    for roll in outcome.result.rolls:
        rendered = renderer.render_roll(
            roll,
            outcome.settings,
            gangsheet_name=name,
            total_rolls=outcome.result.total_rolls,
        )
        filename = f"{base_name}_roll_{roll.roll_number}.{rendered.extension}"
        path = output_dir / filename
        path.write_bytes(rendered.content)
        written.append(path)
        entries.append((filename, rendered.content))

    archive = output_dir / f"{base_name}.zip"
    archive.write_bytes(build_zip_archive(entries))
    written.append(archive)
    return written


@app.command()
def pack(
    job_file: Annotated[Path, typer.Argument(help="Path to JSON job file")],
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Write SVG rolls and a ZIP archive here"),
    ] = None,
    output_format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: text, json")
    ] = "text",
    show_placements: Annotated[
        bool, typer.Option("--placements", help="List every placed design")
    ] = False,
) -> None:
    """Pack the designs of a job file and print the layout.

    Examples:
        gangsheets pack job.json
        gangsheets pack job.json --format json
        gangsheets pack job.json --output-dir ./out
    """
    if output_format not in ("text", "json"):
        typer.echo(f"Error: Unknown format '{output_format}'", err=True)
        raise typer.Exit(code=1)

    try:
        job = load_job(job_file)
        outcome = asyncio.run(_preview_job(job))
    except (ConfigError, GangsheetError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if output_format == "json":
        from gangsheets.web.schemas import PreviewResponse

        typer.echo(PreviewResponse.from_outcome(outcome).model_dump_json(indent=2))
    else:
        formatter = PlacementReportFormatter(show_placements=show_placements)
        typer.echo(formatter.format(outcome))

    if output_dir is not None:
        if outcome.result.total_rolls == 0:
            typer.echo("Error: No design fits on the configured roll", err=True)
            raise typer.Exit(code=1)
        name = job.name or job_file.stem
        for path in _write_rolls(outcome, name, output_dir):
            typer.echo(f"Wrote {path}", err=output_format == "json")


@app.command()
def settings(
    tenant_id: Annotated[
        int | None,
        typer.Option("--tenant-id", "-t", help="Show the stored defaults of a tenant"),
    ] = None,
) -> None:
    """Show the default packing settings.

    Without --tenant-id, shows the system defaults from the environment.
    """
    app_settings = get_app_settings()
    formatter = SettingsFormatter()
    if tenant_id is None:
        typer.echo(
            formatter.format(
                app_settings.system_packing_settings(), title="SYSTEM DEFAULTS"
            )
        )
        return

    from gangsheets.application.factory import ServiceFactory

    async def resolve() -> str:
        factory = ServiceFactory(settings=app_settings)
        try:
            await factory.startup()
            resolved = await factory.get_settings_resolver().resolve(tenant_id)
        finally:
            await factory.shutdown()
        return formatter.format(resolved, title=f"TENANT {tenant_id} DEFAULTS")

    try:
        typer.echo(asyncio.run(resolve()))
    except GangsheetError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: Annotated[str, typer.Option("--host", help="Bind address")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Bind port")] = 8000,
    reload: Annotated[
        bool, typer.Option("--reload", help="Reload on code changes")
    ] = False,
) -> None:
    """Run the REST API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "gangsheets.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=get_app_settings().log_level.lower(),
    )


if __name__ == "__main__":
    app()
