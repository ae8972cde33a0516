"""Calendar decoration and smoothing of the raw temperature readings."""

import polars as pl

from thermorhythm.core import computations, config, models

logger = config.get_logger()

SMOOTHING_WINDOW = 12


def decorate(
    readings: models.Readings, smoothing_window: int = SMOOTHING_WINDOW
) -> pl.DataFrame:
    """Add calendar fields and a smoothed temperature to the readings.

    The raw values are never modified; the returned frame holds the original 'time'
    and 'temperature' columns alongside the derived ones.

    Args:
        readings: The cleaned readings of one subject.
        smoothing_window: Width, in samples, of the centered moving average. At the
            default 5-minute cadence 12 samples cover one hour.

    Returns:
        A DataFrame with columns 'time', 'temperature', 'subject_id', 'day' (day of
        month), 'month' (month name), 'year' (as string) and 'smoothed_temperature'
        (rounded to two decimals).
    """
    logger.debug(
        "Decorating %s readings with a %s sample smoothing window.",
        len(readings.time),
        smoothing_window,
    )
    smoothed = computations.centered_moving_mean(
        readings.temperature, window=smoothing_window
    )
    return add_calendar_fields(readings.data_frame()).with_columns(
        pl.lit(readings.subject_id).alias("subject_id"),
        pl.Series("smoothed_temperature", smoothed),
    )


def add_calendar_fields(frame: pl.DataFrame, time_column: str = "time") -> pl.DataFrame:
    """Extract day of month, month name and year from a datetime column.

    Args:
        frame: Any frame with a datetime column.
        time_column: Name of the datetime column.

    Returns:
        A copy of the frame with 'day', 'month' and 'year' columns added.
    """
    time = pl.col(time_column)
    return frame.with_columns(
        time.dt.day().alias("day"),
        time.dt.strftime("%B").alias("month"),
        time.dt.year().cast(pl.String).alias("year"),
    )
