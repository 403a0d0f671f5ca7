"""Validate epoch data before sleep scoring."""

import polars as pl

from sadehpy.core import config, exceptions

logger = config.get_logger()

REQUIRED_EPOCH_LENGTH = 60


def validate_epochs(
    epochs: pl.DataFrame,
    epoch_length: float,
    *,
    time_column: str = "time",
    count_column: str = "axis1",
) -> None:
    """Validate that the epoch data can be scored.

    The epoch length is passed explicitly; it is never read from the data. Spacing
    between consecutive timestamps is assumed to equal the epoch length and is not
    checked.

    Args:
        epochs: The epoch data, one row per epoch.
        epoch_length: The declared length of each epoch, in seconds.
        time_column: Name of the column holding the epoch timestamps.
        count_column: Name of the column holding the activity counts.

    Raises:
        PreconditionError: If the epoch length is not 60 seconds, if a required
            column is absent, or if any timestamp or activity count is missing.
    """
    logger.debug(
        "Validating %s epochs, epoch length: %s s", epochs.height, epoch_length
    )
    if epoch_length != REQUIRED_EPOCH_LENGTH:
        raise exceptions.PreconditionError(
            f"Epoch length must be {REQUIRED_EPOCH_LENGTH} seconds, "
            f"got {epoch_length}."
        )

    absent = [
        column for column in (time_column, count_column) if column not in epochs.columns
    ]
    if absent:
        raise exceptions.PreconditionError(
            f"Epoch data is missing the required column(s): {absent}."
        )

    for column in (time_column, count_column):
        n_missing = _count_missing(epochs[column])
        if n_missing:
            raise exceptions.PreconditionError(
                f"Column '{column}' contains {n_missing} missing value(s)."
            )


def _count_missing(series: pl.Series) -> int:
    """Count null values, and NaN values for floating point series."""
    n_missing = series.null_count()
    if series.dtype.is_float():
        n_missing += series.is_nan().sum()
    return int(n_missing)
