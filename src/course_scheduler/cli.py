"""CLI entry point for the course scheduler."""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .exceptions import SchedulingError
from .scheduler import (
    DEFAULT_NODE_LIMIT,
    CourseScheduler,
    DirectoryRepository,
    LCVMode,
    ScheduleResult,
    export_schedule_json,
)
from .scheduler.config import DEFAULT_CONFIG_DIR
from .scheduler.excel_generator import generate_schedule_excel

app = typer.Typer(
    name="course-scheduler",
    help="Assign course sections to classrooms and weekly time slots",
    add_completion=False,
)
console = Console()

DEFAULT_OUTPUT = Path("output/schedule.json")


class LCVOption(str, Enum):
    """LCV scoring options."""

    full = "full"
    instructor = "instructor"


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
            force=True,
        )


def _make_scheduler(data_dir: Path, **kwargs) -> CourseScheduler:
    if not data_dir.exists():
        console.print(f"[bold red]Error:[/bold red] Data directory not found: {data_dir}")
        raise typer.Exit(1)
    try:
        repository = DirectoryRepository(data_dir)
    except SchedulingError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)
    return CourseScheduler(repository, **kwargs)


DataOption = Annotated[
    Path,
    typer.Option("--data", "-d", help="Directory with classrooms.csv, sections.csv, enrollments.csv"),
]


@app.command()
def schedule(
    semester: Annotated[str, typer.Argument(help="Semester: Fall, Spring or Summer")],
    year: Annotated[int, typer.Argument(help="Academic year")],
    data_dir: DataOption = DEFAULT_CONFIG_DIR,
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Output JSON file path"),
    ] = None,
    preview: Annotated[
        bool,
        typer.Option("--preview", help="Do not save the schedule"),
    ] = False,
    lcv: Annotated[
        LCVOption,
        typer.Option("--lcv", help="Conflict channels counted by value ordering"),
    ] = LCVOption.full,
    max_nodes: Annotated[
        int,
        typer.Option("--max-nodes", help="Search node budget (0 for unlimited)"),
    ] = DEFAULT_NODE_LIMIT,
    time_limit: Annotated[
        Optional[float],
        typer.Option("--time-limit", help="Search time limit in seconds"),
    ] = None,
    commit_partial: Annotated[
        bool,
        typer.Option("--commit-partial", help="Save the schedule even if some sections failed"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show detailed output"),
    ] = False,
) -> None:
    """Generate a schedule for a term."""
    _configure_logging(verbose)
    scheduler = _make_scheduler(
        data_dir,
        lcv_mode=LCVMode(lcv.value),
        max_nodes=max_nodes or None,
        time_limit=time_limit,
        commit_partial=commit_partial,
    )

    try:
        with console.status("[bold green]Creating schedule..."):
            result = scheduler.generate(semester, year, save=not preview)
    except SchedulingError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    _show_summary(result, verbose)

    output_path = output or DEFAULT_OUTPUT
    if output_path.suffix != ".json":
        output_path = output_path.with_suffix(".json")
    with console.status(f"[bold green]Exporting to {output_path}..."):
        export_schedule_json(result, output_path)
    console.print(f"\n[bold green]✓[/bold green] Schedule exported to: {output_path}")

    if result.saved:
        console.print("[bold green]✓[/bold green] Schedule saved")
    elif not preview:
        console.print("[yellow]Schedule not saved (partial result)[/yellow]")


def _show_summary(result: ScheduleResult, verbose: bool) -> None:
    """Show run statistics and unscheduled sections."""
    stats = result.statistics
    status = (
        "[bold green]Schedule generated successfully[/bold green]"
        if result.success
        else "[bold yellow]Partial schedule generated "
        "(some sections could not be scheduled)[/bold yellow]"
    )
    console.print(f"\n{status}")

    table = Table(title=f"{result.semester} {result.year}", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Total Sections", str(stats.total_sections))
    table.add_row("Scheduled", str(stats.scheduled))
    table.add_row("Unscheduled", str(stats.unscheduled))
    table.add_row("Backtracks", str(stats.backtrack_count))
    table.add_row("Search Nodes", str(stats.node_count))
    table.add_row("Duration", f"{stats.duration_ms}ms")
    if stats.aborted:
        table.add_row("Aborted", "yes")
    console.print(table)

    if result.conflicts:
        console.print(f"\n[bold red]Residual conflicts ({len(result.conflicts)}):[/bold red]")
        for conflict in result.conflicts:
            console.print(
                f"  [red]• {conflict.type.value} {conflict.resource_id} "
                f"{conflict.day.value} slot {conflict.time_slot_id}: "
                f"{', '.join(conflict.section_ids)}[/red]"
            )

    if result.unassigned:
        limit = None if verbose else 10
        console.print(f"\n[bold yellow]Unscheduled sections ({len(result.unassigned)}):[/bold yellow]")
        for item in result.unassigned[:limit]:
            label = item.section.course_code or item.section.id
            console.print(f"  [yellow]- {label}: {item.details}[/yellow]")
        if limit and len(result.unassigned) > limit:
            console.print(f"  [yellow]... and {len(result.unassigned) - limit} more[/yellow]")

    if verbose and stats.by_day:
        console.print("\n[bold]Distribution by day:[/bold]")
        for day, count in stats.by_day.items():
            console.print(f"  {day}: {count}")


@app.command()
def show(
    semester: Annotated[str, typer.Argument(help="Semester: Fall, Spring or Summer")],
    year: Annotated[int, typer.Argument(help="Academic year")],
    data_dir: DataOption = DEFAULT_CONFIG_DIR,
    section: Annotated[Optional[str], typer.Option("--section", help="Section id filter")] = None,
    classroom: Annotated[
        Optional[str], typer.Option("--classroom", help="Classroom id filter")
    ] = None,
    instructor: Annotated[
        Optional[str], typer.Option("--instructor", help="Instructor id filter")
    ] = None,
) -> None:
    """Show the stored schedule of a term."""
    scheduler = _make_scheduler(data_dir)
    try:
        rows = scheduler.get_schedule(
            semester,
            year,
            section_id=section,
            classroom_id=classroom,
            instructor_id=instructor,
        )
    except SchedulingError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not rows:
        console.print("[yellow]No schedule entries found[/yellow]")
        return

    table = Table(title=f"Schedule {semester} {year}")
    table.add_column("Day", style="cyan")
    table.add_column("Time", style="blue")
    table.add_column("Course", style="green")
    table.add_column("Section", style="magenta")
    table.add_column("Instructor")
    table.add_column("Classroom")
    for row in rows:
        classroom_info = row["classroom"]
        table.add_row(
            row["day"],
            f"{row['start_time'][:5]} - {row['end_time'][:5]}",
            row["section"]["course_code"] or row["section"]["id"],
            row["section"]["section_number"],
            row["section"]["instructor"],
            f"{classroom_info['building']} {classroom_info['room_number']}".strip(),
        )
    console.print(table)


@app.command()
def clear(
    semester: Annotated[str, typer.Argument(help="Semester: Fall, Spring or Summer")],
    year: Annotated[int, typer.Argument(help="Academic year")],
    data_dir: DataOption = DEFAULT_CONFIG_DIR,
) -> None:
    """Clear the stored schedule of a term."""
    scheduler = _make_scheduler(data_dir)
    try:
        deleted = scheduler.clear_schedule(semester, year)
    except SchedulingError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)
    console.print(f"[bold green]✓[/bold green] Cleared {deleted} schedule entries")


@app.command()
def info(data_dir: DataOption = DEFAULT_CONFIG_DIR) -> None:
    """Show the scheduling grid and available data."""
    scheduler = _make_scheduler(data_dir)
    try:
        details = scheduler.info()
    except SchedulingError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    overview = Table(title="Overview", show_header=False)
    overview.add_column("Metric", style="cyan")
    overview.add_column("Value", style="green")
    overview.add_row("Available Classrooms", str(details["available_classrooms"]))
    overview.add_row("Enrolled Students", str(details["enrolled_students"]))
    overview.add_row("Days", ", ".join(details["days_of_week"]))
    overview.add_row("Time Slots", str(len(details["time_slots"])))
    overview.add_row("Slots per Week", str(details["total_slots_per_week"]))
    console.print(overview)

    if details["sections_by_semester"]:
        terms = Table(title="Sections by Term")
        terms.add_column("Semester", style="cyan")
        terms.add_column("Year", style="blue")
        terms.add_column("Sections", style="green")
        for term in details["sections_by_semester"]:
            terms.add_row(term["semester"], str(term["year"]), str(term["count"]))
        console.print(terms)


@app.command("generate-excel")
def generate_excel(
    input_file: Annotated[
        Path,
        typer.Argument(help="Schedule JSON file"),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Output .xlsx file"),
    ] = None,
) -> None:
    """Generate an Excel timetable (one sheet per classroom) from schedule JSON."""
    if not input_file.exists():
        console.print(f"[bold red]Error:[/bold red] File not found: {input_file}")
        raise typer.Exit(1)

    output_path = output or input_file.with_suffix(".xlsx")
    try:
        with console.status("[bold green]Generating Excel file..."):
            written = generate_schedule_excel(input_file, output_path)
    except SchedulingError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)
    console.print(f"\n[bold green]✓[/bold green] Excel timetable written to: {written}")


if __name__ == "__main__":
    app()
