"""Locate the daily minimum and maximum of the hourly trimean temperature."""

import numpy as np
import polars as pl
from scipy import stats

from thermorhythm.core import computations, config, models

logger = config.get_logger()

EXTREMUM_KINDS = ("minimum", "maximum")

_DAILY_AGGREGATIONS = {
    "minimum": pl.col("trimean").min(),
    "maximum": pl.col("trimean").max(),
}


def hourly_trimean(
    frame: pl.DataFrame, value_column: str = "temperature"
) -> pl.DataFrame:
    """Compute the trimean of every calendar hour.

    Readings are grouped by their timestamp floored to the hour, so each reading
    belongs to exactly one hour. Hours without a single non-missing value are
    dropped.

    Args:
        frame: A frame with a 'time' column and the value column.
        value_column: The column to summarize.

    Returns:
        A DataFrame with columns 'hour' and 'trimean', sorted by hour.
    """
    hourly = (
        frame.lazy()
        .group_by(pl.col("time").dt.truncate("1h").alias("hour"))
        .agg(computations.trimean_expression(value_column).alias("trimean"))
        .drop_nulls("trimean")
        .sort("hour")
        .collect()
    )
    logger.debug("Computed trimean for %s hours.", len(hourly))
    return hourly


def daily_extrema(hourly: pl.DataFrame) -> pl.DataFrame:
    """Find every hour that attains its day's minimum or maximum trimean.

    Ties are kept: when several hours share the extreme value, all of them are
    returned.

    Args:
        hourly: Output of `hourly_trimean`.

    Returns:
        A DataFrame with columns 'date', 'time' (the start of the hour),
        'time_of_day' (hours since midnight), 'value' and 'kind' ('minimum' or
        'maximum'), sorted by date, kind and time.
    """
    with_date = hourly.with_columns(pl.col("hour").dt.date().alias("date"))
    selections = []
    for kind in EXTREMUM_KINDS:
        daily_value = _DAILY_AGGREGATIONS[kind].over("date")
        selections.append(
            with_date.filter(pl.col("trimean") == daily_value).select(
                pl.col("date"),
                pl.col("hour").alias("time"),
                _time_of_day(pl.col("hour")).alias("time_of_day"),
                pl.col("trimean").alias("value"),
                pl.lit(kind).alias("kind"),
            )
        )
    return pl.concat(selections).sort("date", "kind", "time")


def multi_extremum_days(extrema: pl.DataFrame) -> pl.DataFrame:
    """List the days with more than one minimum or more than one maximum.

    Args:
        extrema: Output of `daily_extrema`.

    Returns:
        A DataFrame with columns 'date', 'n_minima' and 'n_maxima'.
    """
    return (
        _count_extrema_per_day(extrema)
        .filter((pl.col("n_minima") > 1) | (pl.col("n_maxima") > 1))
        .sort("date")
    )


def unique_extremum_pairs(extrema: pl.DataFrame) -> pl.DataFrame:
    """Pair the minimum and maximum of days that have exactly one of each.

    The time between extrema is the signed difference time(minimum) - time(maximum)
    of the full timestamps, so it is independent of where midnight falls.

    Args:
        extrema: Output of `daily_extrema`.

    Returns:
        A DataFrame with columns 'date', 'minimum_time', 'minimum_value',
        'maximum_time', 'maximum_value' and 'minutes_between'.
    """
    unique_days = _count_extrema_per_day(extrema).filter(
        (pl.col("n_minima") == 1) & (pl.col("n_maxima") == 1)
    )
    single = extrema.join(unique_days.select("date"), on="date", how="semi")
    minima = single.filter(pl.col("kind") == "minimum").select(
        "date",
        pl.col("time").alias("minimum_time"),
        pl.col("value").alias("minimum_value"),
    )
    maxima = single.filter(pl.col("kind") == "maximum").select(
        "date",
        pl.col("time").alias("maximum_time"),
        pl.col("value").alias("maximum_value"),
    )
    return (
        minima.join(maxima, on="date", how="inner")
        .with_columns(
            (pl.col("minimum_time") - pl.col("maximum_time"))
            .dt.total_minutes()
            .alias("minutes_between")
        )
        .sort("date")
    )


def extremum_timing_density(
    extrema: pl.DataFrame, grid_points: int = 289
) -> pl.DataFrame:
    """Estimate the density of the time of day at which extrema occur.

    All extrema contribute, including those of days with several minima or maxima.
    A Gaussian kernel density is evaluated on an even grid over [0, 24] hours.

    Args:
        extrema: Output of `daily_extrema`.
        grid_points: Number of grid points on the time of day axis.

    Returns:
        A DataFrame with columns 'kind', 'time_of_day' and 'density'. Kinds with
        fewer than two distinct times are left out.
    """
    grid = np.linspace(0, 24, grid_points)
    densities = []
    for kind in EXTREMUM_KINDS:
        times = extrema.filter(pl.col("kind") == kind)["time_of_day"].to_numpy()
        if np.unique(times).size < 2:
            logger.warning(
                "Not enough distinct %s times for a density estimate.", kind
            )
            continue
        density = stats.gaussian_kde(times)(grid)
        densities.append(
            pl.DataFrame({"time_of_day": grid, "density": density}).select(
                pl.lit(kind).alias("kind"), "time_of_day", "density"
            )
        )
    if not densities:
        return pl.DataFrame(
            schema={"kind": pl.String, "time_of_day": pl.Float64, "density": pl.Float64}
        )
    return pl.concat(densities)


def extrema_pair_counts(unique_pairs: pl.DataFrame) -> pl.DataFrame:
    """Count the unique pair days by hour of minimum and hour of maximum.

    Args:
        unique_pairs: Output of `unique_extremum_pairs`.

    Returns:
        A 24 x 24 long-format DataFrame with columns 'minimum_hour', 'maximum_hour'
        and 'count'; combinations that never occur have a count of zero.
    """
    hours = pl.DataFrame({"minimum_hour": pl.int_range(0, 24, eager=True)}).join(
        pl.DataFrame({"maximum_hour": pl.int_range(0, 24, eager=True)}), how="cross"
    )
    counts = unique_pairs.group_by(
        pl.col("minimum_time").dt.hour().cast(pl.Int64).alias("minimum_hour"),
        pl.col("maximum_time").dt.hour().cast(pl.Int64).alias("maximum_hour"),
    ).agg(pl.len().cast(pl.Int64).alias("count"))
    return (
        hours.join(counts, on=["minimum_hour", "maximum_hour"], how="left")
        .with_columns(pl.col("count").fill_null(0))
        .sort("minimum_hour", "maximum_hour")
    )


def find_extrema(frame: pl.DataFrame) -> models.ExtremaReport:
    """Run the full hourly trimean extremum analysis.

    Args:
        frame: The decorated readings, or any frame with 'time' and 'temperature'.

    Returns:
        The ExtremaReport bundling every derived table.
    """
    hourly = hourly_trimean(frame)
    extrema = daily_extrema(hourly)
    multi_days = multi_extremum_days(extrema)
    unique_pairs = unique_extremum_pairs(extrema)
    logger.info(
        "Found %s days with a unique minimum and maximum, %s with multiple extrema.",
        len(unique_pairs),
        len(multi_days),
    )
    return models.ExtremaReport(
        hourly=hourly,
        extrema=extrema,
        multi_extremum_days=multi_days,
        unique_pairs=unique_pairs,
        timing_density=extremum_timing_density(extrema),
        pair_counts=extrema_pair_counts(unique_pairs),
    )


def _count_extrema_per_day(extrema: pl.DataFrame) -> pl.DataFrame:
    return extrema.group_by("date").agg(
        (pl.col("kind") == "minimum").sum().cast(pl.Int64).alias("n_minima"),
        (pl.col("kind") == "maximum").sum().cast(pl.Int64).alias("n_maxima"),
    )


def _time_of_day(time: pl.Expr) -> pl.Expr:
    return time.dt.hour() + time.dt.minute() / 60
