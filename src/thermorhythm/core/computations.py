"""This module contains the statistics computed on the temperature data."""

import numpy as np
import polars as pl


def centered_moving_mean(
    values: np.ndarray, window: int, decimals: int = 2
) -> np.ndarray:
    """Calculate the centered moving mean of a series, shrinking at the edges.

    For an even window the average covers the window // 2 preceding samples, the
    sample itself and the remaining following samples. Near the ends of the series
    the window only uses the samples that exist, so no padding is introduced. Missing
    values (NaN) are excluded from each average.

    Args:
        values: The one dimensional series to smooth.
        window: Number of samples in the window.
        decimals: Number of decimals to round the result to.

    Returns:
        The smoothed series, with the same length as the input. Positions whose window
        holds only missing values are NaN.

    Raises:
        ValueError: If the window is not a positive integer.
    """
    if window <= 0:
        raise ValueError("Window must be greater than 0")

    values = np.asarray(values, dtype=float)
    n_samples = values.shape[0]
    present = ~np.isnan(values)

    value_sums = np.concatenate([[0.0], np.cumsum(np.where(present, values, 0.0))])
    value_counts = np.concatenate([[0], np.cumsum(present)])

    index = np.arange(n_samples)
    before = window // 2
    after = window - 1 - before
    starts = np.clip(index - before, 0, n_samples)
    ends = np.clip(index + after + 1, 0, n_samples)

    counts = value_counts[ends] - value_counts[starts]
    sums = value_sums[ends] - value_sums[starts]
    with np.errstate(invalid="ignore", divide="ignore"):
        means = np.where(counts > 0, sums / counts, np.nan)
    return np.round(means, decimals)


def trimean(values: np.ndarray) -> float:
    """Tukey's trimean, (Q1 + 2 * median + Q3) / 4.

    Quantiles are linearly interpolated and missing values are ignored.

    Args:
        values: The sample.

    Returns:
        The trimean of the non-missing values, NaN if there are none.
    """
    values = np.asarray(values, dtype=float)
    values = values[~np.isnan(values)]
    if values.size == 0:
        return float("nan")
    q1, median, q3 = np.quantile(values, [0.25, 0.5, 0.75])
    return float((q1 + 2 * median + q3) / 4)


def trimean_expression(column: str) -> pl.Expr:
    """Polars aggregation computing the trimean of a column.

    NaN values are treated as missing, matching `trimean`.

    Args:
        column: Name of the column to aggregate.

    Returns:
        An expression usable inside a group by aggregation.
    """
    values = pl.col(column).fill_nan(None)
    return (
        values.quantile(0.25, interpolation="linear")
        + 2 * values.quantile(0.5, interpolation="linear")
        + values.quantile(0.75, interpolation="linear")
    ) / 4
