"""Test the Sadeh sleep scoring."""

import logging
from typing import Callable, Sequence

import numpy as np
import polars as pl
import pytest
import pytest_mock

from sadehpy.core import exceptions, models
from sadehpy.processing import sadeh

ASLEEP = models.SleepState.ASLEEP.value
AWAKE = models.SleepState.AWAKE.value


def test_clamp_counts() -> None:
    """Test that counts above 300 are capped and others are kept."""
    counts = np.array([0, 299, 300, 301, 5000])

    result = sadeh.clamp_counts(counts)

    assert np.array_equal(result, np.array([0.0, 299.0, 300.0, 300.0, 300.0]))
    assert result is not counts


def test_sleep_index_all_zero() -> None:
    """Test that zero features give the intercept."""
    zeros = np.zeros(3)

    result = sadeh.sleep_index(zeros, zeros, zeros, zeros)

    assert np.allclose(result, 7.601)


def test_classify_sleep_index_threshold() -> None:
    """Test that the threshold itself is awake and anything above it asleep."""
    sleep_index = np.array([-4.0, np.nextafter(-4.0, 0.0), -4.5, 7.601, -100.0])
    expected = [AWAKE, ASLEEP, AWAKE, ASLEEP, AWAKE]

    result = sadeh.classify_sleep_index(sleep_index)

    assert result.name == "state"
    assert result.to_list() == expected


def test_classify_sleep_index_nan_is_null() -> None:
    """Test that a NaN sleep index propagates as a null state."""
    result = sadeh.classify_sleep_index(np.array([np.nan, 0.0, np.inf, -np.inf]))

    assert result.to_list() == [None, ASLEEP, ASLEEP, AWAKE]


def test_compute_features_isolated_spike() -> None:
    """Test the features around a single clamped spike."""
    counts = np.zeros(21)
    counts[10] = 500
    expected_avg = np.zeros(21)
    expected_avg[5:16] = 300 / 11
    expected_sd = np.zeros(21)
    expected_sd[10:16] = np.std([0, 0, 0, 0, 0, 300], ddof=1)

    features = sadeh.compute_features(counts)

    assert len(features) == 21
    assert features.count.max() == 300
    assert np.allclose(features.avg, expected_avg)
    assert np.allclose(features.sd, expected_sd)
    assert np.array_equal(features.nats, np.zeros(21))
    assert np.isclose(features.lg[10], np.log(301))


def test_apply_sadeh_flat_zero_series(
    create_epochs: Callable[[Sequence[float]], pl.DataFrame],
) -> None:
    """Test that twenty motionless epochs are all asleep."""
    epochs = create_epochs([0.0] * 20)

    result = sadeh.apply_sadeh(epochs, 60)

    assert result.height == 20
    assert result.columns == ["time", "axis1", "state"]
    assert result["state"].to_list() == [ASLEEP] * 20


def test_apply_sadeh_isolated_spike(
    create_epochs: Callable[[Sequence[float]], pl.DataFrame],
) -> None:
    """Test a spike of 500 surrounded by zeros behaves like a spike of 300."""
    counts = [0.0] * 21
    counts[10] = 500.0
    capped_counts = [0.0] * 21
    capped_counts[10] = 300.0
    expected_state = [ASLEEP] * 10 + [AWAKE] + [ASLEEP] * 10

    result = sadeh.apply_sadeh(create_epochs(counts), 60, include_features=True)
    capped_result = sadeh.apply_sadeh(
        create_epochs(capped_counts), 60, include_features=True
    )

    assert result["state"].to_list() == expected_state
    assert result["clamped_count"].max() == 300
    assert result["axis1"].to_list() == counts
    assert result.drop("axis1").equals(capped_result.drop("axis1"))


def test_apply_sadeh_threshold_boundary_is_awake(
    create_epochs: Callable[[Sequence[float]], pl.DataFrame],
    mocker: pytest_mock.MockerFixture,
) -> None:
    """Test that a sleep index of exactly -4 is scored awake."""
    mocker.patch.object(sadeh, "sleep_index", return_value=np.full(5, -4.0))

    result = sadeh.apply_sadeh(create_epochs([0.0] * 5), 60)

    assert result["state"].to_list() == [AWAKE] * 5


def test_apply_sadeh_include_features(
    create_epochs: Callable[[Sequence[float]], pl.DataFrame],
) -> None:
    """Test that the features are appended before the state."""
    result = sadeh.apply_sadeh(create_epochs([0.0] * 12), 60, include_features=True)

    assert result.columns == [
        "time",
        "axis1",
        "clamped_count",
        "avg",
        "sd",
        "nats",
        "lg",
        "sleep_index",
        "state",
    ]
    assert np.allclose(result["sleep_index"].to_numpy(), 7.601)


def test_apply_sadeh_does_not_mutate_input(
    create_epochs: Callable[[Sequence[float]], pl.DataFrame],
) -> None:
    """Test that scoring twice gives identical output and leaves the input intact."""
    epochs = create_epochs([0.0, 600.0, 75.0, 20.0, 0.0, 90.0, 310.0, 0.0])
    original = epochs.clone()

    first = sadeh.apply_sadeh(epochs, 60, include_features=True)
    second = sadeh.apply_sadeh(epochs, 60, include_features=True)

    assert first.equals(second)
    assert epochs.equals(original)
    assert epochs.columns == ["time", "axis1"]


def test_apply_sadeh_integer_counts(
    create_epochs: Callable[[Sequence[float]], pl.DataFrame],
) -> None:
    """Test that integer counts are scored like their float equivalents."""
    counts = [0, 60, 80, 400, 10, 0, 0, 55]
    float_epochs = create_epochs([float(count) for count in counts])
    int_epochs = float_epochs.with_columns(pl.Series("axis1", counts, dtype=pl.Int64))

    float_result = sadeh.apply_sadeh(float_epochs, 60)
    int_result = sadeh.apply_sadeh(int_epochs, 60)

    assert float_result["state"].equals(int_result["state"])


def test_apply_sadeh_empty(
    create_epochs: Callable[[Sequence[float]], pl.DataFrame],
) -> None:
    """Test that an empty series gives an empty result."""
    result = sadeh.apply_sadeh(create_epochs([]), 60)

    assert result.height == 0
    assert "state" in result.columns


def test_apply_sadeh_bad_epoch_length(
    create_epochs: Callable[[Sequence[float]], pl.DataFrame],
) -> None:
    """Test that 30 second epochs are rejected."""
    with pytest.raises(exceptions.PreconditionError):
        sadeh.apply_sadeh(create_epochs([0.0] * 20), 30)


def test_apply_sadeh_missing_count(
    create_epochs: Callable[[Sequence[float]], pl.DataFrame],
) -> None:
    """Test that a missing activity count is rejected."""
    epochs = create_epochs([0.0] * 5).with_columns(
        pl.Series("axis1", [0.0, 0.0, None, 0.0, 0.0], dtype=pl.Float64)
    )

    with pytest.raises(exceptions.PreconditionError):
        sadeh.apply_sadeh(epochs, 60)


def test_apply_sadeh_negative_count_propagates(
    create_epochs: Callable[[Sequence[float]], pl.DataFrame],
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Test that an invalid count is not repaired but surfaces as a null state."""
    caplog.set_level(logging.WARNING)
    epochs = create_epochs([0.0, 0.0, -5.0, 0.0, 0.0])

    result = sadeh.apply_sadeh(epochs, 60, include_features=True)

    assert np.isnan(result["sleep_index"][2])
    assert result["state"][2] is None
    assert result["state"].null_count() == 1
    assert "Sleep index is not finite for 1 of 5 epochs." in caplog.text


@pytest.fixture
def two_subjects(
    create_epochs: Callable[[Sequence[float]], pl.DataFrame],
) -> pl.DataFrame:
    """Two recordings over the same time span, with interleaved rows."""
    quiet = create_epochs([0.0] * 15).with_columns(subject=pl.lit("a"))
    active = create_epochs([500.0] * 15).with_columns(subject=pl.lit("b"))
    return pl.concat([quiet, active]).sort("time", maintain_order=True)


def test_apply_sadeh_by_group_independent(two_subjects: pl.DataFrame) -> None:
    """Test that every recording is scored on its own."""
    expected_quiet = sadeh.apply_sadeh(
        two_subjects.filter(pl.col("subject") == "a"), 60
    )
    expected_active = sadeh.apply_sadeh(
        two_subjects.filter(pl.col("subject") == "b"), 60
    )

    result = sadeh.apply_sadeh_by_group(two_subjects, 60, "subject")

    assert result.filter(pl.col("subject") == "a").equals(expected_quiet)
    assert result.filter(pl.col("subject") == "b").equals(expected_active)
    assert expected_quiet["state"].to_list() == [ASLEEP] * 15
    assert expected_active["state"].to_list() == [AWAKE] * 15


def test_apply_sadeh_by_group_keeps_row_order(two_subjects: pl.DataFrame) -> None:
    """Test that the rows come back in the order they were given."""
    result = sadeh.apply_sadeh_by_group(two_subjects, 60, ["subject"])

    assert result.height == two_subjects.height
    assert result.drop("state").equals(two_subjects)


def test_apply_sadeh_by_group_missing_group_column(
    two_subjects: pl.DataFrame,
) -> None:
    """Test that an absent grouping column is rejected."""
    with pytest.raises(exceptions.PreconditionError, match="grouping column"):
        sadeh.apply_sadeh_by_group(two_subjects, 60, "participant")


def test_apply_sadeh_by_group_validates_whole_frame(
    two_subjects: pl.DataFrame,
) -> None:
    """Test that one bad recording aborts scoring of all recordings."""
    epochs = two_subjects.with_columns(
        pl.when(pl.int_range(pl.len()) == 3)
        .then(None)
        .otherwise(pl.col("axis1"))
        .alias("axis1")
    )

    with pytest.raises(exceptions.PreconditionError):
        sadeh.apply_sadeh_by_group(epochs, 60, "subject")
