"""Multitaper power spectra of the monthly temperature series."""

import numpy as np
import polars as pl
from scipy import signal, stats

from thermorhythm.core import config, models

logger = config.get_logger()

TIME_BANDWIDTH = 4.0
N_TAPERS = 7
SAMPLING_INTERVAL_DAYS = 1 / 288
CONFIDENCE = 0.95
MIN_SPECTRAL_DAYS = 16


def multitaper_spectrum(
    values: np.ndarray,
    time_bandwidth: float = TIME_BANDWIDTH,
    n_tapers: int = N_TAPERS,
    sampling_interval: float = SAMPLING_INTERVAL_DAYS,
    confidence: float = CONFIDENCE,
    pad_factor: int = 2,
) -> models.SpectralEstimate:
    """Estimate the power spectrum with discrete prolate spheroidal tapers.

    The demeaned series is multiplied by each Slepian taper, zero padded to a power
    of two of at least pad_factor times its length and Fourier transformed. The
    spectrum is the average of the tapered eigenspectra. Confidence intervals are
    obtained by jackknifing over the tapers on the log scale [1].

    Args:
        values: Evenly sampled series without missing values.
        time_bandwidth: The time-bandwidth product NW of the tapers.
        n_tapers: Number of tapers K. Must be at least 2 for the jackknife.
        sampling_interval: Time between samples, in days. Frequencies are returned
            in cycles per day.
        confidence: Coverage of the confidence interval.
        pad_factor: Minimum ratio of FFT length to series length.

    Returns:
        A SpectralEstimate whose arrays share the non-negative frequency axis.

    Raises:
        ValueError: If there are fewer than 2 tapers, the series is too short for
            the requested tapers, or it contains missing values.

    References:
        [1] Thomson, D. J., & Chave, A. D. (1991). Jackknifed error estimates for
        spectra, coherences, and transfer functions. Advances in Spectrum Analysis
        and Array Processing, 1, 58-113.
    """
    values = np.asarray(values, dtype=float)
    n_samples = values.shape[0]
    if n_tapers < 2:
        raise ValueError("At least two tapers are required for jackknife intervals.")
    if n_samples <= 2 * time_bandwidth:
        raise ValueError("Series is too short for the requested time-bandwidth.")
    if np.isnan(values).any():
        raise ValueError("Series must not contain missing values.")

    tapers = signal.windows.dpss(n_samples, NW=time_bandwidth, Kmax=n_tapers)
    n_fft = 2 ** int(np.ceil(np.log2(pad_factor * n_samples)))
    eigencoefficients = np.fft.rfft(tapers * (values - values.mean()), n=n_fft, axis=-1)
    eigenspectra = sampling_interval * np.abs(eigencoefficients) ** 2

    power = eigenspectra.mean(axis=0)
    lower_ci, upper_ci = _jackknife_interval(eigenspectra, power, confidence)
    logger.debug(
        "Multitaper spectrum of %s samples over %s frequencies.", n_samples, power.size
    )
    return models.SpectralEstimate(
        frequency=np.fft.rfftfreq(n_fft, d=sampling_interval),
        power=power,
        lower_ci=lower_ci,
        upper_ci=upper_ci,
        time_bandwidth=time_bandwidth,
        tapers=n_tapers,
        sampling_interval=sampling_interval,
        confidence=confidence,
    )


def _jackknife_interval(
    eigenspectra: np.ndarray, power: np.ndarray, confidence: float
) -> tuple[np.ndarray, np.ndarray]:
    """Jackknife confidence interval of the averaged eigenspectra."""
    n_tapers = eigenspectra.shape[0]
    with np.errstate(divide="ignore"):
        leave_one_out = np.log(
            (eigenspectra.sum(axis=0) - eigenspectra) / (n_tapers - 1)
        )
    centered = leave_one_out - leave_one_out.mean(axis=0)
    variance = (n_tapers - 1) / n_tapers * (centered**2).sum(axis=0)
    spread = stats.t.ppf(0.5 + confidence / 2, df=n_tapers - 1) * np.sqrt(variance)
    return power * np.exp(-spread), power * np.exp(spread)


def series_days(frame: pl.DataFrame, time_column: str = "time") -> int:
    """Number of distinct calendar days holding at least one reading."""
    return frame[time_column].dt.date().n_unique()


def estimate_partition_spectrum(
    frame: pl.DataFrame,
    value_column: str = "temperature",
    min_days: int = MIN_SPECTRAL_DAYS,
) -> models.SpectralResult:
    """Compute the multitaper spectrum of one partition, if it is long enough.

    Partitions covering fewer than min_days calendar days are not analysed. Missing
    values inside the series are linearly interpolated and missing values at its
    ends are dropped; gaps in the timestamps are not filled.

    Args:
        frame: The readings of one partition, ordered by time.
        value_column: The column holding the series.
        min_days: Minimum number of days required for an estimate.

    Returns:
        A SpectralEstimate, or InsufficientData when the partition is too short.
    """
    n_days = series_days(frame)
    if n_days < min_days:
        logger.info(
            "Skipping spectrum: %s days of data, %s required.", n_days, min_days
        )
        return models.InsufficientData(
            reason=(
                f"insufficient series length: {n_days} days of data, "
                f"at least {min_days} required"
            )
        )

    values = (
        frame[value_column]
        .cast(pl.Float64)
        .fill_nan(None)
        .interpolate()
        .drop_nulls()
        .to_numpy()
    )
    return multitaper_spectrum(values)
