"""Fixtures used by pytest."""

import pathlib
from datetime import datetime, timedelta
from typing import Callable, Optional

import numpy as np
import polars as pl
import pytest

from thermorhythm.core import models

SAMPLES_PER_DAY = 288


def _readings_frame(
    start: datetime, days: float, temperature: Optional[np.ndarray] = None
) -> pl.DataFrame:
    n_samples = int(round(days * SAMPLES_PER_DAY))
    time = pl.datetime_range(
        start,
        start + timedelta(minutes=5 * (n_samples - 1)),
        "5m",
        eager=True,
    ).alias("time")
    if temperature is None:
        phase = 2 * np.pi * np.arange(n_samples) / SAMPLES_PER_DAY
        temperature = 37.0 + 0.5 * np.sin(phase)
    return pl.DataFrame({"time": time, "temperature": temperature})


@pytest.fixture
def make_frame() -> Callable[..., pl.DataFrame]:
    """Factory for 5-minute readings frames with a daily sinusoidal rhythm."""
    return _readings_frame


@pytest.fixture
def make_readings() -> Callable[..., models.Readings]:
    """Factory for Readings models at a 5-minute cadence."""

    def factory(
        start: datetime = datetime(2024, 1, 1),
        days: float = 2,
        temperature: Optional[np.ndarray] = None,
        subject_id: str = "monkey_01",
    ) -> models.Readings:
        frame = _readings_frame(start, days, temperature)
        return models.Readings(
            subject_id=subject_id,
            time=frame["time"],
            temperature=frame["temperature"].to_numpy(),
        )

    return factory


@pytest.fixture
def readings_csv(tmp_path: pathlib.Path) -> pathlib.Path:
    """A csv file with 35 days of readings for one subject, starting on January 1."""
    rng = np.random.default_rng(42)
    frame = _readings_frame(datetime(2024, 1, 1), 35)
    frame = frame.with_columns(
        (pl.col("temperature") + rng.normal(0, 0.05, len(frame))),
        pl.lit("monkey_01").alias("subject_id"),
    ).rename({"time": "timestamp"})
    path = tmp_path / "readings.csv"
    frame.write_csv(path)
    return path
