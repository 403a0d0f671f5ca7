"""Score sleep and wake epochs with the Sadeh algorithm."""

from typing import Sequence, Union

import numpy as np
import polars as pl

from sadehpy.core import computations, config, exceptions, models
from sadehpy.processing import validation

logger = config.get_logger()

COUNT_CAP = 300
NATS_LOW = 50
NATS_HIGH = 100
INTERCEPT = 7.601
AVG_COEFFICIENT = 0.065
NATS_COEFFICIENT = 1.08
SD_COEFFICIENT = 0.056
LG_COEFFICIENT = 0.703
SLEEP_THRESHOLD = -4

_ROW_INDEX = "__sadehpy_row_index"


def clamp_counts(counts: np.ndarray, upper: float = COUNT_CAP) -> np.ndarray:
    """Cap the activity counts at an upper bound.

    Args:
        counts: The activity counts.
        upper: The maximum count retained.

    Returns:
        A new float array with min(count, upper) for every epoch.
    """
    return np.minimum(np.asarray(counts, dtype=np.float64), upper)


def sleep_index(
    avg: np.ndarray, nats: np.ndarray, sd: np.ndarray, lg: np.ndarray
) -> np.ndarray:
    """Combine the windowed features into the Sadeh sleep index."""
    return (
        INTERCEPT
        - AVG_COEFFICIENT * avg
        - NATS_COEFFICIENT * nats
        - SD_COEFFICIENT * sd
        - LG_COEFFICIENT * lg
    )


def classify_sleep_index(sleep_index: np.ndarray) -> pl.Series:
    """Threshold the sleep index into sleep states.

    An epoch is asleep when its sleep index is strictly greater than -4, otherwise
    it is awake. A NaN sleep index yields a null state.

    Args:
        sleep_index: The Sadeh sleep index of each epoch.

    Returns:
        A string Series named 'state' with SleepState values.
    """
    sleep_index = np.asarray(sleep_index, dtype=np.float64)
    states = np.where(
        sleep_index > SLEEP_THRESHOLD,
        models.SleepState.ASLEEP.value,
        models.SleepState.AWAKE.value,
    ).astype(object)
    states[np.isnan(sleep_index)] = None
    return pl.Series("state", states.tolist(), dtype=pl.String)


def compute_features(counts: np.ndarray) -> models.SadehFeatures:
    """Compute the Sadeh features of a single series of 60 second epochs.

    The counts are clamped at 300 and the clamped series is the only input to the
    windowed features and the log term. No validation is performed here; invalid
    counts propagate as non-finite values.

    Args:
        counts: The activity counts of consecutive epochs.

    Returns:
        The per-epoch features, including the sleep index.
    """
    clamped = clamp_counts(counts)
    avg = computations.centered_rolling_mean(clamped)
    sd = computations.trailing_rolling_std(clamped)
    nats = computations.centered_rolling_count(clamped, NATS_LOW, NATS_HIGH)
    with np.errstate(divide="ignore", invalid="ignore"):
        lg = np.log(clamped + 1)
    index = sleep_index(avg, nats, sd, lg)

    n_non_finite = np.count_nonzero(~np.isfinite(index))
    if n_non_finite:
        logger.warning(
            "Sleep index is not finite for %s of %s epochs.", n_non_finite, len(index)
        )

    return models.SadehFeatures(
        count=clamped, avg=avg, sd=sd, nats=nats, lg=lg, sleep_index=index
    )


def apply_sadeh(
    epochs: pl.DataFrame,
    epoch_length: float,
    *,
    time_column: str = "time",
    count_column: str = "axis1",
    include_features: bool = False,
) -> pl.DataFrame:
    """Score each epoch of a single recording as asleep or awake.

    The sleep index (SI) at epoch t is defined as

        SI = 7.601 - 0.065 * AVG - 1.08 * NATS - 0.056 * SD - 0.703 * LG

    where counts are first capped at 300 and
        - AVG is the mean count in the 11 epoch window centered at t,
        - NATS is the number of epochs in that window with 50 <= count < 100,
        - SD is the standard deviation of the counts of t and the 5 preceding
          epochs,
        - LG is ln(count + 1) at t.

    The counts are padded with zeros at the beginning and the end to compute the
    windowed features. The state is asleep if SI > -4, otherwise awake.

    Args:
        epochs: The epoch data of one recording, one row per epoch, ordered in time.
        epoch_length: The declared epoch length in seconds. Must be 60.
        time_column: Name of the column holding the epoch timestamps.
        count_column: Name of the column holding the activity counts, usually the
            vertical axis ('axis1') counts.
        include_features: If true, the clamped counts and the features of the
            sleep index are appended as well.

    Returns:
        A new DataFrame with the input columns and a 'state' column, with the same
        rows in the same order as the input.

    Raises:
        PreconditionError: If the epoch data fails validation.

    References:
        Sadeh, A., Sharkey, K. M., & Carskadon, M. A. Activity-based sleep-wake
            identification: an empirical test of methodological issues. Sleep,
            17(3), 201-207 (1994).
        ActiLife 6 User's Manual, ActiGraph Software Department (2012).
    """
    validation.validate_epochs(
        epochs, epoch_length, time_column=time_column, count_column=count_column
    )
    scored = _score_series(epochs, count_column, include_features)
    logger.debug("Scored %s epochs with the Sadeh algorithm.", scored.height)
    return scored


def apply_sadeh_by_group(
    epochs: pl.DataFrame,
    epoch_length: float,
    group_by: Union[str, Sequence[str]],
    *,
    time_column: str = "time",
    count_column: str = "axis1",
    include_features: bool = False,
) -> pl.DataFrame:
    """Score several recordings held in one DataFrame.

    The data is validated as a whole before anything is scored. Each group is then
    scored independently, so no window reaches across recordings. The rows of the
    result are in the same order as the input.

    Args:
        epochs: The epoch data of one or more recordings.
        epoch_length: The declared epoch length in seconds. Must be 60.
        group_by: Column(s) identifying a recording, e.g. a subject id.
        time_column: Name of the column holding the epoch timestamps.
        count_column: Name of the column holding the activity counts.
        include_features: If true, the features of the sleep index are appended.

    Returns:
        A new DataFrame with the input columns and a 'state' column.

    Raises:
        PreconditionError: If the epoch data fails validation or a grouping column
            is absent.
    """
    group_columns = [group_by] if isinstance(group_by, str) else list(group_by)
    validation.validate_epochs(
        epochs, epoch_length, time_column=time_column, count_column=count_column
    )
    absent = [column for column in group_columns if column not in epochs.columns]
    if absent:
        raise exceptions.PreconditionError(
            f"Epoch data is missing the grouping column(s): {absent}."
        )

    groups = epochs.with_row_index(_ROW_INDEX).partition_by(
        group_columns, maintain_order=True
    )
    if not groups:
        return _score_series(epochs, count_column, include_features)

    logger.debug("Scoring %s recordings grouped by %s.", len(groups), group_columns)
    scored = [_score_series(group, count_column, include_features) for group in groups]
    return pl.concat(scored).sort(_ROW_INDEX).drop(_ROW_INDEX)


def _score_series(
    epochs: pl.DataFrame, count_column: str, include_features: bool
) -> pl.DataFrame:
    """Append the sleep state, and optionally the features, to one series."""
    features = compute_features(epochs[count_column].to_numpy())
    new_columns = [classify_sleep_index(features.sleep_index)]
    if include_features:
        new_columns = features.data_frame().get_columns() + new_columns
    return epochs.with_columns(new_columns)
