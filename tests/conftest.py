"""Fixtures used by pytest."""

import pathlib
from datetime import datetime, timedelta
from typing import Callable, Sequence

import numpy as np
import polars as pl
import pytest


def _make_epochs(counts: Sequence[float]) -> pl.DataFrame:
    """Build a 60 second epoch DataFrame from activity counts."""
    dummy_date = datetime(2024, 5, 2, 22)
    dummy_datetime_list = [
        dummy_date + timedelta(seconds=60 * i) for i in range(len(counts))
    ]
    return pl.DataFrame(
        {
            "time": pl.Series("time", dummy_datetime_list, dtype=pl.Datetime("us")),
            "axis1": pl.Series("axis1", counts, dtype=pl.Float64),
        }
    )


@pytest.fixture
def create_epochs() -> Callable[[Sequence[float]], pl.DataFrame]:
    """Fixture returning a factory of 60 second epoch DataFrames."""
    return _make_epochs


@pytest.fixture
def night_epochs() -> pl.DataFrame:
    """A short night: quiet sleep with an episode of movement in the middle."""
    rng = np.random.default_rng(42)
    counts = np.concatenate(
        [
            rng.integers(0, 10, size=30),
            rng.integers(150, 600, size=15),
            rng.integers(0, 10, size=30),
        ]
    )
    return _make_epochs(counts.astype(float).tolist())


@pytest.fixture
def sample_data_csv(tmp_path: pathlib.Path, night_epochs: pl.DataFrame) -> pathlib.Path:
    """Epoch data written to a .csv file."""
    file_path = tmp_path / "input" / "example_epochs.csv"
    file_path.parent.mkdir(parents=True, exist_ok=True)
    night_epochs.write_csv(file_path)
    return file_path


@pytest.fixture
def sample_data_parquet(
    tmp_path: pathlib.Path, night_epochs: pl.DataFrame
) -> pathlib.Path:
    """Epoch data written to a .parquet file."""
    file_path = tmp_path / "input" / "example_epochs.parquet"
    file_path.parent.mkdir(parents=True, exist_ok=True)
    night_epochs.write_parquet(file_path)
    return file_path


@pytest.fixture
def sample_data_txt(tmp_path: pathlib.Path) -> pathlib.Path:
    """Text data to test invalid file types."""
    file_path = tmp_path / "example_text.txt"
    file_path.write_text("not epoch data")
    return file_path
