"""CLI for sadehpy."""

import logging
import pathlib
from enum import Enum

import typer

from sadehpy.core import config, exceptions

logger = config.get_logger()
app = typer.Typer(
    help="Score 60 second epochs as asleep or awake with the Sadeh algorithm.",
)


class OutputFileType(str, Enum):
    """Valid output file types for saving data."""

    csv = ".csv"
    parquet = ".parquet"


def version_check(version: bool) -> None:
    """Print the current version of sadehpy and exit."""
    if version:
        typer.echo(f"Sadehpy version: {config.get_version()}")
        raise typer.Exit()


@app.command()
def main(
    input: pathlib.Path = typer.Argument(
        ..., help="Path to the input epoch data.", exists=True
    ),
    output: pathlib.Path = typer.Option(
        None,
        "-o",
        "--output",
        help="Path where data will be saved. Supports .csv and .parquet formats.",
    ),
    output_filetype: OutputFileType = typer.Option(
        ".csv",
        "-O",
        "--output-filetype",
        help="Format for save files when processing directories. ",
    ),
    epoch_length: float = typer.Option(
        60,
        "-e",
        "--epoch-length",
        help="Declared epoch length of the input data in seconds. "
        "The Sadeh algorithm requires 60 second epochs.",
    ),
    time_column: str = typer.Option(
        "time",
        "--time-column",
        help="Name of the column holding the epoch timestamps.",
    ),
    count_column: str = typer.Option(
        "axis1",
        "--count-column",
        help="Name of the column holding the activity counts.",
    ),
    group_column: str = typer.Option(
        None,
        "-g",
        "--group-column",
        help="Column identifying separate recordings, e.g. a subject id. "
        "Each recording is scored independently.",
    ),
    include_features: bool = typer.Option(
        False,
        "-f",
        "--features",
        help="Save the features of the sleep index next to the sleep state.",
    ),
    verbosity: bool = typer.Option(
        False,
        "-v",
        "--verbosity",
        help="Determines the level of verbosity. Use -v for DEBUG. "
        "Defaults to INFO if not included.",
    ),
    version: bool = typer.Option(
        False,
        "-V",
        "--version",
        help="Print the current version of sadehpy and exit.",
        is_eager=True,
        callback=version_check,
    ),
) -> None:
    """Run sadehpy orchestrator with command line arguments."""
    from sadehpy.core import orchestrator

    log_level = logging.INFO
    if verbosity:
        log_level = logging.DEBUG
    logger.setLevel(log_level)

    logger.debug("Running sadehpy. arguments given: %s", locals())
    try:
        orchestrator.run(
            input=input,
            output=output,
            epoch_length=epoch_length,
            time_column=time_column,
            count_column=count_column,
            group_column=group_column,
            include_features=include_features,
            verbosity=log_level,
            output_filetype=output_filetype.value,
        )
    except (exceptions.EmptyDirectoryError, exceptions.PreconditionError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
