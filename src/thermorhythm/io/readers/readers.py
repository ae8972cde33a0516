"""Function to read cleaned temperature readings from a file."""

import pathlib
from typing import Optional, Union

import numpy as np
import polars as pl
import pydantic

from thermorhythm.core import config, exceptions, models

logger = config.get_logger()

VALID_FILE_TYPES = (".csv", ".parquet")


def read_readings(
    file_name: Union[pathlib.Path, str],
    subject: Optional[str] = None,
    time_column: str = "timestamp",
    temperature_column: str = "temperature",
    subject_column: str = "subject_id",
) -> models.Readings:
    """Read the cleaned temperature readings of one subject.

    The table is expected to hold one row per reading. When the subject column is
    absent, the subject is taken from the subject argument or the file name.

    Args:
        file_name: The .csv or .parquet file to read.
        subject: The subject to keep. Required when the table holds several subjects.
        time_column: Name of the timestamp column.
        temperature_column: Name of the temperature column.
        subject_column: Name of the subject identifier column.

    Returns:
        The validated Readings, sorted by time.

    Raises:
        InvalidFileTypeError: If the file extension is not supported.
        MalformedSeriesError: If required columns are missing, cannot be parsed, the
            subject is ambiguous, or the readings fail validation.
        EmptySeriesError: If no readings remain for the subject.
    """
    file_name = pathlib.Path(file_name)
    frame = _read_table(file_name)

    missing = [
        column for column in (time_column, temperature_column) if column not in frame
    ]
    if missing:
        raise exceptions.MalformedSeriesError(
            f"Missing required columns {missing} in {file_name}."
        )

    if subject_column in frame.columns:
        frame = frame.with_columns(pl.col(subject_column).cast(pl.String))
        subjects = frame[subject_column].unique().drop_nulls().to_list()
        if subject is None:
            if len(subjects) > 1:
                raise exceptions.MalformedSeriesError(
                    f"Found {len(subjects)} subjects in {file_name}, select one."
                )
            subject = subjects[0] if subjects else file_name.stem
        frame = frame.filter(pl.col(subject_column) == subject)
    elif subject is None:
        subject = file_name.stem

    if frame.is_empty():
        raise exceptions.EmptySeriesError(
            f"No readings for subject {subject} in {file_name}."
        )

    frame = frame.select(
        _parse_time(frame[time_column]).alias("time"),
        pl.col(temperature_column).cast(pl.Float64, strict=False).alias("temperature"),
    ).sort("time")

    logger.debug("Read %s readings for subject %s.", len(frame), subject)
    try:
        return models.Readings(
            subject_id=subject,
            time=frame["time"],
            temperature=frame["temperature"].fill_null(np.nan).to_numpy(),
        )
    except pydantic.ValidationError as e:
        raise exceptions.MalformedSeriesError(
            f"Invalid readings in {file_name}: {e}"
        ) from e


def _read_table(file_name: pathlib.Path) -> pl.DataFrame:
    """Read a csv or parquet table with polars."""
    if file_name.suffix == ".csv":
        return pl.read_csv(file_name, try_parse_dates=True)
    elif file_name.suffix == ".parquet":
        return pl.read_parquet(file_name)
    raise exceptions.InvalidFileTypeError(
        f"The extension: {file_name.suffix} is not supported. "
        f"Please provide one of {VALID_FILE_TYPES}."
    )


def _parse_time(time: pl.Series) -> pl.Series:
    """Convert a timestamp column to a datetime series.

    Raises:
        MalformedSeriesError: If the column cannot be parsed as datetimes.
    """
    if isinstance(time.dtype, pl.Datetime):
        return time
    if time.dtype == pl.Date:
        return time.cast(pl.Datetime)
    try:
        return time.cast(pl.String).str.to_datetime()
    except pl.exceptions.PolarsError as e:
        raise exceptions.MalformedSeriesError(
            f"Could not parse timestamps in column {time.name}: {e}"
        ) from e
