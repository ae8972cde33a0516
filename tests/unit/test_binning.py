"""Test the half-hour binning and partitioning."""

from datetime import date, datetime
from typing import Callable

import numpy as np
import polars as pl
import pytest

from thermorhythm.core import models
from thermorhythm.processing import binning, preprocessing


@pytest.mark.parametrize(
    "minute, expected_slot_minute",
    [
        (0, 30),
        (1, 0),
        (20, 0),
        (34, 0),
        (35, 30),
        (59, 30),
    ],
)
def test_half_hour_slot_boundary(minute: int, expected_slot_minute: int) -> None:
    """Minutes strictly between 0 and 35 map to ':00', all others to ':30'."""
    frame = pl.DataFrame(
        {"time": [datetime(2024, 1, 1, 10, minute)], "temperature": [37.0]}
    )

    bins = binning.bin_half_hours(frame)

    assert bins["slot"].to_list() == [datetime(2024, 1, 1, 10, expected_slot_minute)]
    assert bins["slot_index"].to_list() == [20 + expected_slot_minute // 30]


def test_bin_half_hours_constant_day(
    make_frame: Callable[..., pl.DataFrame],
) -> None:
    """Test that a constant day yields 48 equal bins and zero deltas."""
    frame = make_frame(datetime(2024, 1, 1), 1, np.full(288, 36.6))

    bins = binning.bin_half_hours(frame)
    deltas = binning.daily_deltas(bins)

    assert len(bins) == binning.SLOTS_PER_DAY
    assert bins["slot_index"].to_list() == list(range(48))
    assert np.allclose(bins["mean_temperature"].to_numpy(), 36.6)
    assert np.allclose(deltas["delta"].to_numpy(), 0.0)


def test_bin_half_hours_slots_stay_on_reading_day() -> None:
    """Test that late readings stay in the last slot of their own day."""
    frame = pl.DataFrame(
        {
            "time": [
                datetime(2024, 1, 1, 23, 0),
                datetime(2024, 1, 1, 23, 55),
                datetime(2024, 1, 2, 0, 0),
            ],
            "temperature": [36.0, 37.0, 38.0],
        }
    )

    bins = binning.bin_half_hours(frame)

    assert bins.select("date", "slot_index", "mean_temperature").rows() == [
        (date(2024, 1, 1), 47, 36.5),
        (date(2024, 1, 2), 1, 38.0),
    ]


def test_daily_deltas_direction() -> None:
    """Test deviations from the daily mean and their direction."""
    bins = pl.DataFrame(
        {
            "date": [date(2024, 1, 1)] * 2 + [date(2024, 1, 2)] * 2,
            "mean_temperature": [36.0, 38.0, 37.0, 37.0],
        }
    )

    result = binning.daily_deltas(bins)

    assert result["delta"].to_list() == [-1.0, 1.0, 0.0, 0.0]
    assert result["direction"].to_list() == [
        "Negative",
        "Positive",
        "Positive",
        "Positive",
    ]


def test_partition_by_month(make_frame: Callable[..., pl.DataFrame]) -> None:
    """Test that the months exactly partition the readings, in order."""
    frame = make_frame(datetime(2023, 12, 20), 45)

    partitions = binning.partition_by_month(frame)

    assert list(partitions) == [
        models.PartitionKey(year="2023", month="December"),
        models.PartitionKey(year="2024", month="January"),
        models.PartitionKey(year="2024", month="February"),
    ]
    assert sum(len(part) for part in partitions.values()) == len(frame)
    assert pl.concat([part["time"] for part in partitions.values()]).equals(
        frame["time"]
    )
    january = partitions[models.PartitionKey(year="2024", month="January")]
    assert len(january) == 31 * 288


def test_partition_by_year(make_frame: Callable[..., pl.DataFrame]) -> None:
    """Test the split by calendar year."""
    frame = make_frame(datetime(2023, 12, 30), 4)

    partitions = binning.partition_by_year(frame)

    assert list(partitions) == ["2023", "2024"]
    assert len(partitions["2023"]) == 2 * 288
    assert partitions["2024"].columns == frame.columns


def test_chronogram_frame(make_readings: Callable[..., models.Readings]) -> None:
    """Test the time of day alignment of the chronogram table."""
    decorated = preprocessing.decorate(make_readings(days=1))

    chronogram = binning.chronogram_frame(decorated)

    assert chronogram.columns == [
        "year",
        "month",
        "date",
        "time_of_day",
        "smoothed_temperature",
    ]
    assert chronogram["time_of_day"][0] == 0.0
    assert chronogram["time_of_day"][-1] == pytest.approx(23 + 55 / 60)


def test_actogram_frame(make_frame: Callable[..., pl.DataFrame]) -> None:
    """Test that the actogram deltas average to zero within each day."""
    frame = make_frame(datetime(2024, 1, 1), 3)

    actogram = binning.actogram_frame(frame)

    daily_means = actogram.group_by("date").agg(pl.col("delta").mean())
    assert len(actogram) == 3 * 48
    assert np.allclose(daily_means["delta"].to_numpy(), 0.0)
    assert set(actogram["direction"].unique().to_list()) == {"Positive", "Negative"}
