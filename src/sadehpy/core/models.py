"""Internal data model."""

from enum import Enum

import numpy as np
import polars as pl
from pydantic import BaseModel, model_validator


class SleepState(str, Enum):
    """Sleep/wake state assigned to a single epoch."""

    ASLEEP = "ASLEEP"
    AWAKE = "AWAKE"


class SadehFeatures(BaseModel):
    """Per-epoch features of the Sadeh sleep index.

    Every array has one entry per epoch of the scored series.

    Attributes:
        count: The activity counts after clamping.
        avg: Mean of the clamped counts over the centered 11 epoch window.
        sd: Sample standard deviation of the clamped counts over the trailing 6
            epoch window.
        nats: Number of epochs in the centered 11 epoch window with a clamped
            count in [50, 100).
        lg: Natural logarithm of the clamped count plus one.
        sleep_index: The Sadeh sleep index.
    """

    count: np.ndarray
    avg: np.ndarray
    sd: np.ndarray
    nats: np.ndarray
    lg: np.ndarray
    sleep_index: np.ndarray

    class Config:
        """Config to allow for ndarray as input."""

        arbitrary_types_allowed = True

    @model_validator(mode="after")
    def validate_lengths(self) -> "SadehFeatures":
        """Validate that all features describe the same number of epochs.

        Returns:
            The validated features.

        Raises:
            ValueError: If the feature arrays differ in length.
        """
        lengths = {name: len(value) for name, value in self}
        if len(set(lengths.values())) > 1:
            raise ValueError(f"All features must have the same length, got {lengths}")
        return self

    def __len__(self) -> int:
        """Number of epochs described by the features."""
        return len(self.count)

    def data_frame(self) -> pl.DataFrame:
        """Converts the features to a DataFrame.

        Returns:
            A DataFrame with one column per feature. The clamped counts are stored
            in the 'clamped_count' column to keep them apart from raw counts.
        """
        columns = {name: value for name, value in self}
        columns["clamped_count"] = columns.pop("count")
        return pl.DataFrame(columns).select(
            "clamped_count", "avg", "sd", "nats", "lg", "sleep_index"
        )
