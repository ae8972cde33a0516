"""Half-hourly binning, calendar partitioning and the chronogram/actogram tables."""

from typing import Dict

import polars as pl

from thermorhythm.core import config, models
from thermorhythm.processing import preprocessing

logger = config.get_logger()

SLOTS_PER_DAY = 48


def half_hour_offset(minute: pl.Expr) -> pl.Expr:
    """Minutes past the hour of the half-hour slot a reading belongs to.

    Minutes strictly between 0 and 35 fall in the ':00' slot. Every other minute,
    including minute 0 itself and minutes 35 to 59, falls in the ':30' slot of the
    same hour.

    Args:
        minute: Expression evaluating to the minute of the hour.

    Returns:
        An expression evaluating to 0 or 30.
    """
    return pl.when((minute > 0) & (minute < 35)).then(0).otherwise(30)


def bin_half_hours(
    frame: pl.DataFrame, value_column: str = "temperature"
) -> pl.DataFrame:
    """Average readings into 48 half-hour slots per day.

    Args:
        frame: A frame with a 'time' column and the value column.
        value_column: The column to average. NaN values are ignored.

    Returns:
        A DataFrame with columns 'date', 'slot' (datetime of the slot start),
        'slot_index' (0 to 47) and 'mean_temperature', sorted by slot. Slots without
        readings are absent.
    """
    time = pl.col("time")
    offset = half_hour_offset(time.dt.minute())
    bins = (
        frame.lazy()
        .with_columns(
            (time.dt.truncate("1h") + pl.duration(minutes=offset)).alias("slot"),
        )
        .group_by("slot")
        .agg(pl.col(value_column).fill_nan(None).mean().alias("mean_temperature"))
        .with_columns(
            pl.col("slot").dt.date().alias("date"),
            (
                pl.col("slot").dt.hour().cast(pl.Int64) * 2
                + pl.col("slot").dt.minute().cast(pl.Int64) // 30
            ).alias("slot_index"),
        )
        .select("date", "slot", "slot_index", "mean_temperature")
        .sort("slot")
        .collect()
    )
    logger.debug("Binned %s readings into %s half-hour slots.", len(frame), len(bins))
    return bins


def daily_deltas(bins: pl.DataFrame) -> pl.DataFrame:
    """Express each half-hour bin as a deviation from its day's mean bin value.

    Args:
        bins: Output of `bin_half_hours`.

    Returns:
        The bins with a 'delta' column and a 'direction' column that is 'Positive'
        for deltas at or above zero and 'Negative' otherwise.
    """
    return bins.with_columns(
        (pl.col("mean_temperature") - pl.col("mean_temperature").mean().over("date"))
        .alias("delta")
    ).with_columns(
        pl.when(pl.col("delta") >= 0)
        .then(pl.lit("Positive"))
        .otherwise(pl.lit("Negative"))
        .alias("direction")
    )


def partition_by_month(
    frame: pl.DataFrame, time_column: str = "time"
) -> Dict[models.PartitionKey, pl.DataFrame]:
    """Split a frame into calendar months.

    Every row lands in exactly one partition. Partitions are returned in
    chronological order and keep the row order of the input.

    Args:
        frame: Any frame with a datetime column.
        time_column: Name of the datetime column.

    Returns:
        A mapping of (year, month) keys to the rows of that month.
    """
    calendar = preprocessing.add_calendar_fields(
        frame.drop(["day", "month", "year"], strict=False), time_column=time_column
    )
    groups = calendar.partition_by(["year", "month"], as_dict=True, maintain_order=True)
    partitions = {
        models.PartitionKey(year=str(year), month=str(month)): group
        for (year, month), group in groups.items()
    }
    return dict(sorted(partitions.items(), key=lambda item: item[0].sort_key))


def partition_by_year(
    frame: pl.DataFrame, time_column: str = "time"
) -> Dict[str, pl.DataFrame]:
    """Split a frame into calendar years, in chronological order."""
    years = frame[time_column].dt.year().cast(pl.String)
    groups = frame.with_columns(years.alias("_year")).partition_by(
        "_year", as_dict=True, maintain_order=True, include_key=False
    )
    return {str(key[0]): groups[key] for key in sorted(groups)}


def chronogram_frame(decorated: pl.DataFrame) -> pl.DataFrame:
    """Align the smoothed daily traces on the time of day.

    Args:
        decorated: Output of `preprocessing.decorate`.

    Returns:
        A DataFrame with columns 'year', 'month', 'date', 'time_of_day' (hours since
        midnight) and 'smoothed_temperature'.
    """
    time = pl.col("time")
    return decorated.select(
        "year",
        "month",
        time.dt.date().alias("date"),
        (time.dt.hour() + time.dt.minute() / 60 + time.dt.second() / 3600).alias(
            "time_of_day"
        ),
        "smoothed_temperature",
    )


def actogram_frame(frame: pl.DataFrame) -> pl.DataFrame:
    """Half-hour bins with their deviation from the daily mean.

    Args:
        frame: The readings of one partition, with 'time' and 'temperature'.

    Returns:
        The output of `daily_deltas` applied to the binned readings.
    """
    return daily_deltas(bin_half_hours(frame))
