"""Rolling window statistics over zero-padded epoch series."""

from typing import Literal

import numpy as np
import polars as pl

HALF_WINDOW = 5


def _padded_rolling(
    values: np.ndarray,
    window_size: int,
    aggregation: Literal["mean", "std", "sum"],
    *,
    pad_before: int,
    pad_after: int = 0,
) -> np.ndarray:
    """Internal handler of rolling window functions on a zero-padded buffer.

    The values are padded with zeros, the rolling aggregation is applied to the
    padded buffer, and the incomplete windows at the start are dropped. Every
    returned value is therefore computed on a full window.

    Args:
        values: The one dimensional series to apply a rolling function to.
        window_size: Number of samples in each window.
        aggregation: Name of the function to apply, either 'mean', 'std', or 'sum'.
        pad_before: Number of zeros prepended to the values.
        pad_after: Number of zeros appended to the values. Defaults to 0.

    Returns:
        The rolled values, of length len(values) + pad_before + pad_after -
        window_size + 1.

    Raises:
        ValueError: If the window size is less than 1.
    """
    if window_size < 1:
        raise ValueError("Window size must be greater than 0")

    padded = np.concatenate(
        [
            np.zeros(pad_before),
            np.asarray(values, dtype=np.float64),
            np.zeros(pad_after),
        ]
    )
    series = pl.Series("values", padded, dtype=pl.Float64)
    rolled = getattr(series, f"rolling_{aggregation}")(window_size=window_size)
    return rolled.slice(window_size - 1).to_numpy()


def centered_rolling_mean(
    values: np.ndarray, half_window: int = HALF_WINDOW
) -> np.ndarray:
    """Calculate the mean over a centered window of 2 * half_window + 1 samples.

    The series is padded with half_window zeros at both ends, so the windows of the
    first and last half_window samples contain zeros instead of being shortened.

    Args:
        values: The series to take the mean of.
        half_window: Number of samples on either side of the window center.

    Returns:
        The centered moving mean, with the same length as values.
    """
    return _padded_rolling(
        values,
        2 * half_window + 1,
        "mean",
        pad_before=half_window,
        pad_after=half_window,
    )


def trailing_rolling_std(
    values: np.ndarray, half_window: int = HALF_WINDOW
) -> np.ndarray:
    """Calculate the sample standard deviation over a trailing window.

    The window holds the current sample and the half_window samples preceding it.
    Only the start of the series is zero-padded.

    Args:
        values: The series to take the standard deviation of.
        half_window: Number of preceding samples in each window.

    Returns:
        The trailing moving standard deviation (ddof=1), with the same length as
        values.
    """
    return _padded_rolling(values, half_window + 1, "std", pad_before=half_window)


def centered_rolling_count(
    values: np.ndarray,
    low: float,
    high: float,
    half_window: int = HALF_WINDOW,
) -> np.ndarray:
    """Count the samples within [low, high) over a centered, zero-padded window.

    Args:
        values: The series to count in.
        low: Inclusive lower bound of the counted range.
        high: Exclusive upper bound of the counted range.
        half_window: Number of samples on either side of the window center.

    Returns:
        The number of samples in range for each window, as floats, with the same
        length as values.
    """
    values = np.asarray(values, dtype=np.float64)
    in_range = ((values >= low) & (values < high)).astype(np.float64)
    return _padded_rolling(
        in_range,
        2 * half_window + 1,
        "sum",
        pad_before=half_window,
        pad_after=half_window,
    )
