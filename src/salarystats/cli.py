"""Command-line interface for the salary statistics pipeline."""

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from salarystats.config.settings import PipelineConfig

app = typer.Typer(
    name="salarystats",
    help="Salary dataset cleaning and reporting pipeline.",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration YAML file.",
        exists=True,
        dir_okay=False,
    ),
]
InputOption = Annotated[
    Path | None,
    typer.Option(
        "--input",
        "-i",
        help="Raw salary CSV (overrides data.input; enough on its own without --config).",
        dir_okay=False,
    ),
]


def _load_pipeline_config(config: Path | None, input_file: Path | None) -> "PipelineConfig":
    """Build the configuration from a YAML file and/or an input path."""
    from salarystats.config.loader import default_config, load_config
    from salarystats.exceptions import ConfigurationError
    from salarystats.utils.logging import configure_logging

    if config is None and input_file is None:
        console.print("[red]Error: pass --config or --input[/red]")
        raise typer.Exit(code=1)

    try:
        if config is None:
            pipeline_config = default_config(input_file)
        else:
            console.print(f"[blue]Loading configuration from {config}[/blue]")
            pipeline_config = load_config(config)
            if input_file is not None:
                data = pipeline_config.data.model_copy(update={"input_path": input_file})
                pipeline_config = pipeline_config.model_copy(update={"data": data})
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(code=1) from e

    configure_logging(
        level=pipeline_config.logging.level,
        json_output=pipeline_config.logging.json_output,
    )
    return pipeline_config


@app.command()
def run(
    config: ConfigOption = None,
    input_file: InputOption = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output directory (default: {output.root}/{project}).",
            file_okay=False,
        ),
    ] = None,
) -> None:
    """Run the full pipeline and export the reports."""
    from salarystats.etl import run_pipeline
    from salarystats.exceptions import SalaryStatsError

    pipeline_config = _load_pipeline_config(config, input_file)
    console.print(f"[blue]Running salary pipeline on {pipeline_config.input_path}[/blue]")

    try:
        result = run_pipeline(pipeline_config, output_dir=output)
    except SalaryStatsError as e:
        console.print(f"[red]Pipeline failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print()
    table = Table(title="Pipeline Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    for stage, rows in result.row_counts.items():
        table.add_row(f"Rows ({stage})", str(rows))
    table.add_row("Rows removed (implausible experience)", str(result.cleaning.rows_removed))
    table.add_row("Salaries suppressed (below floor)", str(result.cleaning.salaries_suppressed))
    table.add_row("Education values rewritten", str(result.cleaning.education_rewritten))
    table.add_row("Job titles rewritten", str(result.cleaning.job_titles_rewritten))
    if result.working_set.row_ids_rederived:
        table.add_row("row_id re-derived", "Yes")
    console.print(table)

    reports = Table(title="Reports")
    reports.add_column("Report", style="cyan")
    reports.add_column("Groups", justify="right")
    for name, report in result.reports.items():
        reports.add_row(name, str(len(report)))
    console.print(reports)

    if result.cleaning.unmapped_education:
        values = ", ".join(result.cleaning.unmapped_education)
        console.print(f"[yellow]Education values left unmapped: {values}[/yellow]")

    console.print(f"\n[green]Saved to: {result.output_dir}[/green]")


@app.command()
def validate(
    config: ConfigOption = None,
    input_file: InputOption = None,
) -> None:
    """Load and normalize the raw file without cleaning or reporting."""
    from salarystats.exceptions import SalaryStatsError
    from salarystats.ingestion import load_salary_dataset
    from salarystats.normalization import normalize_schema

    pipeline_config = _load_pipeline_config(config, input_file)

    try:
        raw = load_salary_dataset(pipeline_config)
        normalized = normalize_schema(raw)
    except SalaryStatsError as e:
        console.print(f"[red]Validation failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"[green]✓ {pipeline_config.input_path} is valid[/green]")
    console.print(f"  Rows: {len(normalized)}")
    console.print(f"  Columns: {', '.join(normalized.columns)}")


@app.command()
def profile(
    config: ConfigOption = None,
    input_file: InputOption = None,
    column: Annotated[
        str | None,
        typer.Option(
            "--column",
            help="Also show value counts of this text column per stage.",
        ),
    ] = None,
) -> None:
    """Show row and null counts of the raw, staging and working tables."""
    from salarystats.etl import SalaryPipeline
    from salarystats.exceptions import SalaryStatsError

    pipeline_config = _load_pipeline_config(config, input_file)

    try:
        result = SalaryPipeline(pipeline_config).build()
    except SalaryStatsError as e:
        console.print(f"[red]Profiling failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    stages = list(result.profiles)
    table = Table(title="Null Counts")
    table.add_column("Column", style="cyan")
    for stage in stages:
        table.add_column(stage, justify="right")

    table.add_row("(rows)", *[str(result.profiles[s].row_count) for s in stages])
    for col in result.profiles[stages[0]].null_counts:
        table.add_row(col, *[str(result.profiles[s].null_counts.get(col, "-")) for s in stages])
    console.print(table)

    if column is not None:
        counts = result.profiles[stages[-1]].value_counts.get(column)
        if counts is None:
            console.print(f"[red]Error: no value counts for column '{column}'[/red]")
            raise typer.Exit(code=1)

        values = Table(title=f"{column} values")
        values.add_column("Value", style="cyan")
        for stage in stages:
            values.add_column(stage, justify="right")
        ordered = list(counts)
        for stage in stages[:-1]:
            ordered += [v for v in result.profiles[stage].value_counts[column] if v not in ordered]
        for value in ordered:
            values.add_row(
                value,
                *[str(result.profiles[s].value_counts[column].get(value, 0)) for s in stages],
            )
        console.print(values)


@app.command()
def assess(
    config: ConfigOption = None,
    input_file: InputOption = None,
) -> None:
    """
    Re-check the cleaning guarantees on the working set.

    Exits with code 1 if any check fails. Warnings (unmapped education
    values, salaries above the inspection ceiling) do not fail.
    """
    from salarystats.assessment import AssessmentReporter, AssessmentRunner, CheckStatus
    from salarystats.etl import SalaryPipeline
    from salarystats.exceptions import SalaryStatsError

    pipeline_config = _load_pipeline_config(config, input_file)
    console.print("[blue]Running working set assessment...[/blue]")

    try:
        built = SalaryPipeline(pipeline_config).build()
    except SalaryStatsError as e:
        console.print(f"[red]Assessment failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    result = AssessmentRunner(pipeline_config).run(built.working_set, built.cleaning)
    AssessmentReporter(console).print_results(result)

    if result.overall_status == CheckStatus.FAIL:
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Show version information."""
    from salarystats import __version__

    console.print(f"salarystats version {__version__}")


if __name__ == "__main__":
    app()
