#!/usr/bin/env python
"""
Main CLI entry point for shortagemap.
"""

import json
import math
import sys
from pathlib import Path

import click
from loguru import logger
from rich import print as rprint
from rich.table import Table

from shortagemap import __version__
from shortagemap.config import (
    DEFAULT_ENVIRONMENT,
    ENVIRONMENTS,
    AppConfig,
    ConfigurationError,
    load_config,
)
from shortagemap.core.engine import ChoroplethEngine
from shortagemap.core.exceptions import UnknownLensError
from shortagemap.utils.console import console
from shortagemap.utils.logging import map_logger, setup_logging


def _build_engine(ctx, data_path=None, with_frame: bool = False):
    """Engine for the command's dataset; optionally also returns the GeoDataFrame."""
    app_config: AppConfig = ctx.obj["app_config"]
    data_path = data_path or app_config.map.data_path

    gdf = None
    records = ()
    if data_path is not None:
        # geopandas is only needed once a dataset is involved
        from shortagemap.core.dataset import load_county_layer, records_from_frame

        try:
            gdf = load_county_layer(data_path)
        except FileNotFoundError as e:
            raise click.BadParameter(str(e), param_hint="--data")
        records = records_from_frame(gdf)

    try:
        engine = ChoroplethEngine.from_config(app_config, records)
    except ConfigurationError as e:
        rprint(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)

    if with_frame:
        return engine, gdf
    return engine


def _check_lens(engine, lens_id: str):
    try:
        return engine.registry.get_lens(lens_id)
    except UnknownLensError as e:
        raise click.BadParameter(str(e), param_hint="LENS")


@click.group(context_settings={"show_default": True})
@click.version_option(version=__version__, prog_name="shortagemap")
@click.option(
    "--config", "-c", type=click.Path(exists=True, path_type=Path), help="Configuration file path"
)
@click.option(
    "--env",
    "-e",
    type=click.Choice(list(ENVIRONMENTS)),
    default=DEFAULT_ENVIRONMENT,
    help="Environment (dev/prod/test)",
)
@click.option(
    "--verbose", "-v", is_flag=True, help="Enable verbose output and debug logging"
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    help="Custom log file path",
)
@click.pass_context
def cli(ctx, config, env, verbose, log_file):
    """shortagemap - county housing-shortage lens engine"""
    ctx.ensure_object(dict)
    environment = ENVIRONMENTS[env.lower()]

    try:
        app_config = load_config(config_path=config, environment=environment)
    except ConfigurationError as e:
        rprint(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)

    ctx.obj["app_config"] = app_config
    ctx.obj["config_path"] = config
    ctx.obj["environment"] = environment
    ctx.obj["verbose"] = verbose

    setup_logging(
        verbose=verbose,
        log_file=log_file,
        environment=environment,
        app_config=app_config,
    )
    logger.debug(f"shortagemap CLI started (environment: {environment}, config={config})")


@cli.command()
@click.pass_context
def info(ctx) -> None:
    """Display information about the shortagemap installation."""
    engine = _build_engine(ctx)
    click.echo(f"shortagemap version: {__version__}")
    click.echo(f"Python version: {sys.version.split()[0]}")
    click.echo(f"Environment: {ctx.obj['environment']}")
    click.echo(f"Registered lenses: {len(engine.registry)}")
    click.echo(f"Default lens: {engine.registry.default_lens_id}")


@cli.command("lenses")
@click.pass_context
def list_lenses(ctx):
    """List registered lenses in display order."""
    engine = _build_engine(ctx)

    table = Table(title="Lenses", show_header=True)
    table.add_column("Id", style="cyan")
    table.add_column("Label")
    table.add_column("Metric field", style="dim")
    table.add_column("Classification")
    table.add_column("Palette")

    for lens in engine.registry:
        table.add_row(
            lens.id,
            lens.label,
            lens.metric_field,
            lens.classification.describe(),
            lens.palette_id,
        )
    console.print(table)


@cli.command()
@click.argument("lens_id", metavar="LENS")
@click.option("--data", "-d", type=click.Path(path_type=Path), help="County dataset")
@click.option("--json", "as_json", is_flag=True, help="Print the legend model as JSON")
@click.pass_context
def legend(ctx, lens_id, data, as_json):
    """Show the legend of a lens."""
    engine = _build_engine(ctx, data)
    lens = _check_lens(engine, lens_id)
    model = engine.legend_for(lens.id)

    if as_json:
        click.echo(json.dumps(model.to_dict(), ensure_ascii=False, indent=2))
        return

    table = Table(title="\n".join(model.title_lines), show_header=True)
    table.add_column("Color")
    table.add_column("Range")
    for entry in model.entries:
        swatch = f"[on {entry.color[:7]}]    [/] {entry.color}"
        label = entry.label + (" [dim](empty)[/dim]" if entry.is_empty else "")
        table.add_row(swatch, label)
    console.print(table)


@cli.command()
@click.argument("lens_id", metavar="LENS")
@click.argument("county")
@click.option("--data", "-d", type=click.Path(path_type=Path), help="County dataset")
@click.option("--json", "as_json", is_flag=True, help="Print the popup model as JSON")
@click.pass_context
def details(ctx, lens_id, county, data, as_json):
    """Show popup details of a county under a lens."""
    engine = _build_engine(ctx, data)
    lens = _check_lens(engine, lens_id)

    record = engine.find_record(county)
    if record is None:
        rprint(f"[red]County not found: {county}[/red]")
        sys.exit(1)

    content = engine.details_for(record, lens.id)
    color = engine.color_for(record, lens.id)

    if as_json:
        payload = content.to_dict()
        payload["color"] = color
        click.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    console.print(f"[bold]{content.title}[/bold]  [on {color[:7]}]    [/] {color}")
    for line in content.lines:
        console.print(f"  {line.icon} {line.label}: [bold]{line.formatted_value}[/bold]")


@cli.command()
@click.argument("lens_id", metavar="LENS")
@click.option("--data", "-d", type=click.Path(path_type=Path), help="County dataset")
@click.pass_context
def classify(ctx, lens_id, data):
    """Classify every county of a dataset under a lens."""
    from shortagemap.publish.styler import build_report, style_layer

    engine, gdf = _build_engine(ctx, data, with_frame=True)
    lens = _check_lens(engine, lens_id)
    if gdf is None:
        raise click.UsageError("A county dataset is required (--data or map.data_path)")

    styled = style_layer(gdf, engine, lens.id)
    classification = engine.classification_for(lens.id)

    table = Table(title=f"{lens.label} ({lens.classification.describe()})", show_header=True)
    table.add_column("County", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Class", justify="right")
    table.add_column("Color")

    for record, (_, row) in zip(engine.records, styled.iterrows()):
        value = row["metric"]
        table.add_row(
            record.display_name(engine.unknown_county_label),
            "—" if math.isnan(value) else f"{value:,.2f}",
            str(row["class_index"]),
            row["fill_color"],
        )
    console.print(table)
    console.print(f"Boundaries: {list(classification.boundaries.values) or 'no data'}")
    build_report(styled, lens.id).display(classification.colors)


@cli.command()
@click.option("--data", "-d", type=click.Path(path_type=Path), help="County dataset")
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    required=True,
    help="Output directory",
)
@click.option("--lens", "lens_ids", multiple=True, help="Lens to publish (repeatable, default: all)")
@click.pass_context
def publish(ctx, data, output, lens_ids):
    """Write styled GeoJSON and legend JSON for each lens."""
    from shortagemap.publish.exporter import export_lenses

    engine, gdf = _build_engine(ctx, data, with_frame=True)
    if gdf is None:
        raise click.UsageError("A county dataset is required (--data or map.data_path)")
    for lens_id in lens_ids:
        _check_lens(engine, lens_id)

    written = export_lenses(gdf, engine, output, lens_ids or None)
    for lens_id, paths in written.items():
        rprint(f"[green]✅ {lens_id}[/green]: {paths['features']}, {paths['legend']}")


@cli.group()
def logs():
    """Logging and diagnostics commands."""
    pass


@logs.command("show")
def show_logs():
    """Show current logging configuration."""
    map_logger.show_log_info()


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
