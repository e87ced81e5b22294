"""Main CLI entry point for SheetNest."""

import click

from sheetnest import __version__
from sheetnest.utils import console, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="SheetNest")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """SheetNest - nest flat parts onto stock sheets.

    Reads JSON job files with part outlines, a sheet size and nesting
    options, and reports where every part goes.
    """
    from sheetnest.config import get_settings

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging("DEBUG" if verbose else get_settings().log_level)


# Import and register command groups
from sheetnest.cli.nest_cmd import nest

cli.add_command(nest)


@cli.command()
def status() -> None:
    """Show effective nesting defaults."""
    from sheetnest.config import get_settings

    settings = get_settings()

    console.print("[bold]SheetNest Status[/bold]")
    console.print(f"Version: {__version__}")
    console.print()
    console.print("[bold]Nesting defaults:[/bold]")
    console.print(f"  Kerf width: {settings.default_kerf_width}mm")
    console.print(f"  Clearance: {settings.default_global_clearance}mm")
    console.print(f"  Rotation step: {settings.default_rotation_step}°")
    console.print(f"  Position step: {settings.default_position_step}mm")
    if settings.default_time_limit:
        console.print(f"  Time limit: {settings.default_time_limit}s")
    else:
        console.print("  Time limit: [yellow]None[/yellow]")
    console.print(f"  Log level: {settings.log_level}")


if __name__ == "__main__":
    cli()
