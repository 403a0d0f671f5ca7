"""Function to read epoch level activity counts from a file."""

import pathlib
from typing import Union

import polars as pl

from sadehpy.core import config, exceptions

logger = config.get_logger()

VALID_FILE_TYPES = (".csv", ".parquet")


def read_epoch_data(
    file_name: Union[pathlib.Path, str], time_column: str = "time"
) -> pl.DataFrame:
    """Read epoch data from a file.

    The file must already be aggregated into epochs, e.g. 60 second activity counts
    exported from ActiLife. Text timestamps are parsed into datetimes.

    Args:
        file_name: The .csv or .parquet file to read the epoch data from.
        time_column: Name of the column holding the epoch timestamps.

    Returns:
        The epoch data, one row per epoch.

    Raises:
        InvalidFileTypeError: If the file extension is not supported.
    """
    file_name = pathlib.Path(file_name)
    logger.debug("Reading epoch data from %s", file_name)
    if file_name.suffix == ".csv":
        epochs = pl.read_csv(file_name, try_parse_dates=True)
    elif file_name.suffix == ".parquet":
        epochs = pl.read_parquet(file_name)
    else:
        raise exceptions.InvalidFileTypeError(
            f"File type {file_name.suffix} is not supported. "
            f"Supported types are {VALID_FILE_TYPES}."
        )

    if time_column in epochs.columns and epochs[time_column].dtype == pl.String:
        epochs = epochs.with_columns(pl.col(time_column).str.to_datetime())
    return epochs
