"""Internal data model."""

import pathlib
from typing import Dict, List, Optional, Union

import numpy as np
import polars as pl
import pydantic
from pydantic import BaseModel, field_validator, model_validator

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


class Readings(BaseModel):
    """The cleaned body temperature readings of a single subject.

    This class provides read-only access to the raw input series. It must not be
    mutated during processing; derived values are added as new columns on copies.
    """

    model_config = pydantic.ConfigDict(arbitrary_types_allowed=True)

    subject_id: str
    time: pl.Series
    temperature: np.ndarray

    def lazy_frame(self) -> pl.LazyFrame:
        """Converts the readings to a LazyFrame.

        Returns:
            The readings as a LazyFrame with columns 'time' and 'temperature'.
        """
        return pl.LazyFrame(
            {"time": self.time.alias("time"), "temperature": self.temperature}
        ).set_sorted("time")

    def data_frame(self) -> pl.DataFrame:
        """Converts the readings to an eager DataFrame."""
        return self.lazy_frame().collect()

    @field_validator("temperature")
    def validate_temperature(cls, v: np.ndarray) -> np.ndarray:
        """Validate that the temperature array is one dimensional and not empty.

        Args:
            cls: The class.
            v: The temperature array to validate.

        Returns:
            v: The temperature array as floats.

        Raises:
            ValueError: If the temperature array is empty or not one dimensional.
        """
        if v.size == 0:
            raise ValueError("temperature array must not be empty")
        if v.ndim != 1:
            raise ValueError("temperature array must be one dimensional")
        return v.astype(float)

    @field_validator("time")
    def validate_time(cls, v: pl.Series) -> pl.Series:
        """Validate the time series.

        Check that the time series is a datetime series, contains only unique entries,
        and is sorted.

        Args:
            cls: The class.
            v: The time series to validate.

        Returns:
            v: The time series if it is valid.

        Raises:
            ValueError: If the time series is not a datetime series, is not sorted,
                is not unique, is empty, or has missing timestamps.
        """
        if not isinstance(v.dtype, pl.datatypes.Datetime):
            raise ValueError("Time must be a datetime series")
        if v.is_empty():
            raise ValueError("Time series cannot be empty")
        if v.null_count():
            raise ValueError("Time series must not contain missing timestamps")
        if not v.is_unique().all():
            raise ValueError("Time series must contain unique entries")
        if not v.is_sorted():
            raise ValueError("Time series must be sorted")
        return v

    @model_validator(mode="after")
    def validate_lengths(self) -> "Readings":
        """Time and temperature must describe the same readings."""
        if len(self.time) != self.temperature.shape[0]:
            raise ValueError("time and temperature must have the same length")
        return self


class PartitionKey(BaseModel):
    """A calendar month of a given year, used to key per-partition results."""

    model_config = pydantic.ConfigDict(frozen=True)

    year: str
    month: str

    @field_validator("month")
    def validate_month(cls, v: str) -> str:
        """Month must be a full English month name."""
        if v not in MONTH_NAMES:
            raise ValueError(f"Unknown month name: {v}")
        return v

    @property
    def label(self) -> str:
        """Label used in artifact names and console output."""
        return f"{self.year}_{self.month}"

    @property
    def sort_key(self) -> tuple[int, int]:
        """Chronological ordering key."""
        return int(self.year), MONTH_NAMES.index(self.month)


class InsufficientData(BaseModel):
    """Placeholder returned when a partition is too short for a method."""

    reason: str


class SpectralEstimate(BaseModel):
    """A multitaper power spectrum with jackknife confidence intervals.

    Frequencies are in cycles per day.
    """

    model_config = pydantic.ConfigDict(arbitrary_types_allowed=True)

    frequency: np.ndarray
    power: np.ndarray
    lower_ci: np.ndarray
    upper_ci: np.ndarray
    time_bandwidth: float
    tapers: int
    sampling_interval: float
    confidence: float

    @model_validator(mode="after")
    def validate_lengths(self) -> "SpectralEstimate":
        """All spectral arrays must share the frequency axis."""
        n_frequencies = self.frequency.shape[0]
        for name in ("power", "lower_ci", "upper_ci"):
            if getattr(self, name).shape[0] != n_frequencies:
                raise ValueError(f"{name} must have the same length as frequency")
        return self

    @property
    def period(self) -> np.ndarray:
        """Period in days for each frequency; infinite at zero frequency."""
        with np.errstate(divide="ignore"):
            return 1.0 / self.frequency


class AutocorrelationEstimate(BaseModel):
    """Sample autocorrelation of a binned series with its white-noise envelope."""

    model_config = pydantic.ConfigDict(arbitrary_types_allowed=True)

    lags: np.ndarray
    coefficients: np.ndarray
    confidence_bound: float
    n_samples: int


SpectralResult = Union[SpectralEstimate, InsufficientData]
AutocorrelationResult = Union[AutocorrelationEstimate, InsufficientData]


class ExtremaReport(BaseModel):
    """Hourly trimean extrema and the analyses derived from them.

    Attributes:
        hourly: One row per calendar hour with columns 'hour' and 'trimean'.
        extrema: Every daily extremum with columns 'date', 'time', 'time_of_day',
            'value' and 'kind', ties included.
        multi_extremum_days: Days with more than one minimum or maximum.
        unique_pairs: Days with exactly one minimum and one maximum, with the
            signed time between them in minutes.
        timing_density: Kernel density of extremum time-of-day per kind.
        pair_counts: Counts of (hour of minimum, hour of maximum) over the unique
            pair days.
    """

    model_config = pydantic.ConfigDict(arbitrary_types_allowed=True)

    hourly: pl.DataFrame
    extrema: pl.DataFrame
    multi_extremum_days: pl.DataFrame
    unique_pairs: pl.DataFrame
    timing_density: pl.DataFrame
    pair_counts: pl.DataFrame


class AnalysisResults(BaseModel):
    """Results of orchestrator.run()."""

    model_config = pydantic.ConfigDict(arbitrary_types_allowed=True)

    subject_id: str
    decorated: pl.DataFrame
    chronograms: Dict[str, pl.DataFrame] = {}
    extrema: Optional[ExtremaReport] = None
    actograms: Dict[PartitionKey, pl.DataFrame] = {}
    spectra: Dict[PartitionKey, SpectralResult] = {}
    autocorrelations: Dict[PartitionKey, AutocorrelationResult] = {}
    failures: Dict[str, str] = {}
    figures: List[pathlib.Path] = []
