"""Autocorrelation of the half-hourly binned temperature series."""

import numpy as np
import polars as pl
from statsmodels.tsa import stattools

from thermorhythm.core import config, models
from thermorhythm.processing import binning

logger = config.get_logger()

MAX_LAG = 10 * binning.SLOTS_PER_DAY
WHITE_NOISE_QUANTILE = 1.96


def autocorrelation(
    values: np.ndarray, max_lag: int = MAX_LAG
) -> models.AutocorrelationEstimate:
    """Sample autocorrelation with the biased (divide by N) estimator.

    Missing values are excluded from the sums while keeping the lag structure
    intact.

    Args:
        values: The evenly spaced series.
        max_lag: Largest lag to compute. Lags beyond the series length are not
            returned.

    Returns:
        The autocorrelation at lags 0 to min(max_lag, N - 1), with the white-noise
        bound 1.96 / sqrt(N).

    Raises:
        ValueError: If max_lag is negative.
    """
    if max_lag < 0:
        raise ValueError("max_lag must be non-negative.")
    values = np.asarray(values, dtype=float)
    n_samples = values.shape[0]
    n_lags = min(max_lag, n_samples - 1)
    coefficients = stattools.acf(
        values, nlags=n_lags, adjusted=False, fft=False, missing="conservative"
    )
    return models.AutocorrelationEstimate(
        lags=np.arange(coefficients.shape[0]),
        coefficients=coefficients,
        confidence_bound=WHITE_NOISE_QUANTILE / np.sqrt(n_samples),
        n_samples=n_samples,
    )


def estimate_partition_autocorrelation(
    bins: pl.DataFrame, max_lag: int = MAX_LAG
) -> models.AutocorrelationResult:
    """Autocorrelation of one partition's half-hour bins, if the series is long enough.

    Args:
        bins: Output of `binning.bin_half_hours` for one partition.
        max_lag: Largest lag, in bins. Partitions with fewer bins than this are not
            analysed rather than analysed with a shorter lag window.

    Returns:
        An AutocorrelationEstimate, or InsufficientData for short partitions.
    """
    n_bins = len(bins)
    if n_bins < max_lag:
        logger.info(
            "Skipping autocorrelation: %s bins, maximum lag is %s.", n_bins, max_lag
        )
        return models.InsufficientData(
            reason=(
                f"series shorter than maximum lag: {n_bins} bins, "
                f"maximum lag is {max_lag}"
            )
        )
    values = (
        bins.sort("slot")["mean_temperature"].cast(pl.Float64).fill_null(np.nan)
    ).to_numpy()
    return autocorrelation(values, max_lag=max_lag)
