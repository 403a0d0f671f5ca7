"""Python based runner."""

import itertools
import logging
import pathlib
from typing import Dict, Literal, Optional, Union

from rich import progress

from sadehpy.core import config, exceptions
from sadehpy.io.readers import readers
from sadehpy.io.writers import writers
from sadehpy.processing import sadeh

logger = config.get_logger()

VALID_FILE_TYPES = (".csv", ".parquet")


def run(
    input: Union[pathlib.Path, str],
    output: Optional[Union[pathlib.Path, str]] = None,
    epoch_length: float = 60,
    time_column: str = "time",
    count_column: str = "axis1",
    group_column: Optional[str] = None,
    include_features: bool = False,
    verbosity: int = logging.WARNING,
    output_filetype: Literal[".csv", ".parquet"] = ".csv",
) -> Union[writers.ScoringResults, Dict[str, writers.ScoringResults]]:
    """Runs Sadeh sleep scoring on single files, or directories.

    The run() function will execute the _run_file() function on individual files, or
    _run_directory() on entire directories. When the input path points to a file, the
    name of the save file will be taken from the given output path (if any). When the
    input path points to a directory the output path must be a valid directory as well.
    Output file names will be derived from original file names in the case of directory
    processing.

    Args:
        input: Path to the input file or directory of files to be read. Currently,
            this supports .csv and .parquet epoch data.
        output: Path to directory data will be saved to. If processing a single file the
            path should end in the save file name in either .csv or .parquet formats.
        epoch_length: The declared epoch length of the input data in seconds. Only 60
            second epochs can be scored.
        time_column: Name of the column holding the epoch timestamps.
        count_column: Name of the column holding the activity counts.
        group_column: Optional column identifying separate recordings within a file,
            e.g. a subject id. Each recording is scored independently.
        include_features: If true, the features of the sleep index are saved next to
            the sleep state.
        verbosity: The logging level for the logger.
        output_filetype: Specifies the data format for the save files. Only used when
            processing directories.

    Returns:
        The scored data in a save ready format as a ScoringResults object or as a
        dictionary of ScoringResults objects.

    References:
        Sadeh, A., Sharkey, K. M., & Carskadon, M. A. Activity-based sleep-wake
            identification: an empirical test of methodological issues. Sleep,
            17(3), 201-207 (1994).
    """
    logger.setLevel(verbosity)

    input = pathlib.Path(input)
    output = pathlib.Path(output) if output is not None else None

    if input.is_file():
        return _run_file(
            input=input,
            output=output,
            epoch_length=epoch_length,
            time_column=time_column,
            count_column=count_column,
            group_column=group_column,
            include_features=include_features,
            verbosity=verbosity,
        )

    return _run_directory(
        input=input,
        output=output,
        epoch_length=epoch_length,
        time_column=time_column,
        count_column=count_column,
        group_column=group_column,
        include_features=include_features,
        verbosity=verbosity,
        output_filetype=output_filetype,
    )


def _run_directory(
    input: pathlib.Path,
    output: Optional[pathlib.Path] = None,
    epoch_length: float = 60,
    time_column: str = "time",
    count_column: str = "axis1",
    group_column: Optional[str] = None,
    include_features: bool = False,
    verbosity: int = logging.WARNING,
    output_filetype: Literal[".csv", ".parquet"] = ".csv",
) -> Dict[str, writers.ScoringResults]:
    """Runs Sadeh sleep scoring on directories.

    The _run_directory() function will execute the _run_file() function on entire
    directories. The input and output (if any) paths must be directories. Output file
    names will be derived from input file names. Files that cannot be scored are
    logged and skipped.

    Args:
        input: Path to the input directory of files to be read.
        output: Path to directory data will be saved to.
        epoch_length: The declared epoch length of the input data in seconds.
        time_column: Name of the column holding the epoch timestamps.
        count_column: Name of the column holding the activity counts.
        group_column: Optional column identifying separate recordings within a file.
        include_features: If true, the features of the sleep index are saved.
        verbosity: The logging level for the logger.
        output_filetype: Specifies the data format for the save files.

    Returns:
        The scored data as a dictionary of ScoringResults objects, keyed by input
        file name.

    Raises:
        ValueError: If the output given is not a directory.
        ValueError: If the output_filetype is not a valid type.
        EmptyDirectoryError: If the input directory contained no files of a valid
            type.
    """
    if output is not None:
        if output.is_file():
            raise ValueError(
                "Output is a file, but must be a directory when input is a directory."
            )
        if output_filetype not in VALID_FILE_TYPES:
            raise ValueError(
                "Invalid output_filetype: "
                f"{output_filetype}. Valid options are: {VALID_FILE_TYPES}."
            )

    file_names = sorted(
        itertools.chain(input.glob("*.csv"), input.glob("*.parquet"))
    )

    if not file_names:
        raise exceptions.EmptyDirectoryError(
            f"Directory {input} contains no .csv or .parquet files."
        )
    results_dict = {}
    with progress.Progress(
        progress.SpinnerColumn(),
        progress.TextColumn("[progress.description]{task.description}"),
        progress.BarColumn(),
        progress.TaskProgressColumn(),
        console=None,
    ) as progress_bar:
        task = progress_bar.add_task(
            f"[cyan]Processing files in {input.name}...", total=len(file_names)
        )

        for file in file_names:
            output_file_path = (
                output / pathlib.Path(file.stem).with_suffix(output_filetype)
                if output
                else None
            )
            logger.debug(
                "Processing directory: %s, current file: %s, save path: %s",
                input,
                file,
                output_file_path,
            )
            try:
                results_dict[str(file)] = _run_file(
                    input=file,
                    output=output_file_path,
                    epoch_length=epoch_length,
                    time_column=time_column,
                    count_column=count_column,
                    group_column=group_column,
                    include_features=include_features,
                    verbosity=verbosity,
                )
            except Exception as e:
                logger.error("Did not run file: %s, Error: %s", file, e)
            progress_bar.update(task, advance=1)
    logger.info("Processing for directory %s completed successfully.", input)
    return results_dict


def _run_file(
    input: pathlib.Path,
    output: Optional[pathlib.Path] = None,
    epoch_length: float = 60,
    time_column: str = "time",
    count_column: str = "axis1",
    group_column: Optional[str] = None,
    include_features: bool = False,
    verbosity: int = logging.WARNING,
) -> writers.ScoringResults:
    """Runs Sadeh sleep scoring on a single file and returns data for analysis.

    Args:
        input: Path to the input file to be read.
        output: Path to save data to. The path should end in the save file name in
            either .csv or .parquet formats.
        epoch_length: The declared epoch length of the input data in seconds.
        time_column: Name of the column holding the epoch timestamps.
        count_column: Name of the column holding the activity counts.
        group_column: Optional column identifying separate recordings within the file.
        include_features: If true, the features of the sleep index are saved.
        verbosity: The logging level for the logger.

    Returns:
        The scored data in a save ready format as a ScoringResults object.

    Raises:
        InvalidFileTypeError: If the input or output file type is not supported.
        PreconditionError: If the epoch data cannot be scored.
    """
    logger.setLevel(verbosity)
    if output is not None:
        writers.ScoringResults.validate_output(output=output)

    epochs = readers.read_epoch_data(input, time_column=time_column)

    if group_column is None:
        scored = sadeh.apply_sadeh(
            epochs,
            epoch_length,
            time_column=time_column,
            count_column=count_column,
            include_features=include_features,
        )
    else:
        scored = sadeh.apply_sadeh_by_group(
            epochs,
            epoch_length,
            group_column,
            time_column=time_column,
            count_column=count_column,
            include_features=include_features,
        )

    parameters_dictionary = {
        "epoch_length": epoch_length,
        "time_column": time_column,
        "count_column": count_column,
        "group_column": group_column,
        "include_features": include_features,
        "input_file": str(input),
    }

    results = writers.ScoringResults(
        epochs=scored, processing_params=parameters_dictionary
    )
    if output is not None:
        try:
            results.save_results(output=output)
        except (
            exceptions.InvalidFileTypeError,
            PermissionError,
            FileExistsError,
        ) as exc_info:
            # Allowed to pass to recover in Jupyter Notebook scenarios.
            logger.error(
                "Could not save output due to: %s. Call save_results "
                "on the output object with a correct filename to save these "
                "results.",
                exc_info,
            )
    logger.info("Processing for %s completed successfully.", input.stem)
    return results
