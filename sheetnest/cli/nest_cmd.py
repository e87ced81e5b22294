"""CLI commands for running nesting jobs."""

import json

import click
from rich.panel import Panel
from rich.table import Table

from sheetnest.nesting.errors import NestingError
from sheetnest.utils import console, format_area, format_duration


def _load_and_run(job_file, kerf, clearance, rotation_step, position_step, time_limit):
    from sheetnest.nesting.job import load_job

    try:
        job = load_job(job_file)
        if kerf is not None:
            job.config.kerf_width = kerf
        if clearance is not None:
            job.config.global_clearance = clearance
        if rotation_step is not None:
            job.config.rotation_step = rotation_step
        if position_step is not None:
            job.config.position_step = position_step
        if time_limit is not None:
            job.config.time_limit = time_limit
        return job, job.run()
    except NestingError as e:
        raise click.ClickException(str(e)) from e


def job_options(func):
    """Options shared by every command that runs a job."""
    options = [
        click.argument("job_file", type=click.Path(exists=True, dir_okay=False)),
        click.option("--kerf", "-k", type=float, help="Kerf width in mm (overrides job)"),
        click.option("--clearance", "-c", type=float, help="Clearance between parts in mm"),
        click.option("--rotation-step", "-r", type=float, help="Rotation step in degrees"),
        click.option("--position-step", "-p", type=float, help="Grid step in mm"),
        click.option("--time-limit", "-t", type=float, help="Abort after this many seconds"),
        click.option("--json", "as_json", is_flag=True, help="Output as JSON"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group("nest")
def nest():
    """Sheet nesting commands."""
    pass


@nest.command("run")
@job_options
def run_job(job_file, kerf, clearance, rotation_step, position_step, time_limit, as_json):
    """Nest the parts of a job file and show the layout."""
    _, result = _load_and_run(job_file, kerf, clearance, rotation_step, position_step, time_limit)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    summary = f"""[bold cyan]Sheets:[/bold cyan] {result.sheets_required} ({result.sheet.width:g} x {result.sheet.height:g})
[bold green]Placed:[/bold green] {result.placed_count}/{result.requested_count}
[bold yellow]Usage:[/bold yellow] {result.usage_percent:.1f}%  [dim]waste {result.waste_percent:.1f}% ({format_area(result.waste_area)})[/dim]
[dim]Time: {format_duration(result.processing_time)}[/dim]"""
    console.print(Panel(summary, title="Nesting Result"))

    for bin_ in result.bins:
        table = Table(title=f"Sheet {bin_.index + 1}")
        table.add_column("Part", style="cyan")
        table.add_column("X", justify="right")
        table.add_column("Y", justify="right")
        table.add_column("Rotation", justify="right", style="magenta")
        table.add_column("Size", style="dim")

        for part in bin_.placed:
            table.add_row(
                part.part_id,
                f"{part.x:.1f}",
                f"{part.y:.1f}",
                f"{part.rotation:g}°",
                f"{part.width:.1f} x {part.height:.1f}",
            )
        console.print(table)

    if result.unplaced:
        console.print(f"\n[bold red]Unplaced parts ({len(result.unplaced)}):[/bold red]")
        for part in result.unplaced:
            console.print(f"  [red]•[/red] {part.part_id}: {part.reason}")


@nest.command("cost")
@job_options
@click.option("--sheet-cost", "-s", type=float, required=True, help="Price per stock sheet")
@click.option("--cut-rate", type=float, default=0.0, help="Cutting price per metre")
def cost_job(job_file, kerf, clearance, rotation_step, position_step, time_limit, as_json,
             sheet_cost, cut_rate):
    """Nest a job file and estimate material and cutting cost."""
    from sheetnest.nesting.metrics import cutting_path_length, estimate_cost

    job, result = _load_and_run(job_file, kerf, clearance, rotation_step, position_step, time_limit)
    path_mm = cutting_path_length(result, job.parts)
    estimate = estimate_cost(result, sheet_cost, cut_rate, path_length_mm=path_mm)

    if as_json:
        data = estimate.to_dict()
        data["cutting_path_mm"] = round(path_mm, 1)
        click.echo(json.dumps(data, indent=2))
        return

    table = Table(title=f"Cost Estimate - {result.sheets_required} sheet(s)")
    table.add_column("Category", style="cyan")
    table.add_column("Cost", justify="right", style="green")
    table.add_column("Details", style="dim")

    table.add_row("Material", f"{estimate.material_cost:.2f}", f"{estimate.sheets} x {sheet_cost:g}")
    table.add_row("Cutting", f"{estimate.cutting_cost:.2f}", f"{path_mm / 1000:.2f} m path")
    table.add_row("Waste", f"{estimate.waste_cost:.2f}", f"{result.waste_percent:.1f}% of material")
    table.add_row("", "", "")
    table.add_row("[bold]Total[/bold]", f"[bold]{estimate.total_cost:.2f}[/bold]", "")
    table.add_row("Per part", f"{estimate.cost_per_part:.2f}", f"{estimate.parts} parts")

    console.print(table)
