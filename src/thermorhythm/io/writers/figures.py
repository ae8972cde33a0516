"""Render the analyses as image files."""

import pathlib
from typing import List

import matplotlib
import numpy as np
import polars as pl

matplotlib.use("Agg")
from matplotlib import pyplot as plt  # noqa: E402

from thermorhythm.core import config, models  # noqa: E402
from thermorhythm.processing import binning  # noqa: E402

logger = config.get_logger()

DIRECTION_COLORS = {"Positive": "tab:red", "Negative": "tab:blue"}
MAX_PLOTTED_PERIOD_DAYS = 3.0


def figure_path(
    output_dir: pathlib.Path, subject_id: str, label: str, report: str
) -> pathlib.Path:
    """Name of the image for one report of one subject and partition."""
    return output_dir / f"{subject_id}_{label}_{report}.png"


def _save(fig: plt.Figure, path: pathlib.Path) -> pathlib.Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=100, bbox_inches="tight")
    plt.close(fig)
    logger.debug("Figure saved in: %s", path)
    return path


def _placeholder(title: str, reason: str, path: pathlib.Path) -> pathlib.Path:
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.text(0.5, 0.5, reason, ha="center", va="center", wrap=True)
    ax.set_axis_off()
    ax.set_title(title)
    return _save(fig, path)


def plot_chronogram(
    chronogram: pl.DataFrame, title: str, path: pathlib.Path
) -> pathlib.Path:
    """Overlay the smoothed daily traces of each month of a year.

    Args:
        chronogram: Rows of `binning.chronogram_frame` for one year.
        title: Figure title.
        path: Where to save the image.

    Returns:
        The path of the saved image.
    """
    months = chronogram["month"].unique(maintain_order=True).to_list()
    fig, axes = plt.subplots(
        len(months), 1, figsize=(10, 2.5 * len(months)), sharex=True, squeeze=False
    )
    for ax, month in zip(axes[:, 0], months):
        month_rows = chronogram.filter(pl.col("month") == month)
        for (_,), day in month_rows.group_by("date", maintain_order=True):
            ax.plot(
                day["time_of_day"],
                day["smoothed_temperature"],
                color="black",
                alpha=0.3,
                linewidth=0.8,
            )
        ax.set_ylabel(f"{month}\nTemperature")
    axes[-1, 0].set_xlim(0, 24)
    axes[-1, 0].set_xticks(range(0, 25, 3))
    axes[-1, 0].set_xlabel("Time of day (h)")
    fig.suptitle(title)
    return _save(fig, path)


def plot_actogram(
    actogram: pl.DataFrame, title: str, path: pathlib.Path
) -> pathlib.Path:
    """Stack the daily deviations from the daily mean, one row per day.

    Args:
        actogram: Output of `binning.actogram_frame` for one partition.
        title: Figure title.
        path: Where to save the image.

    Returns:
        The path of the saved image.
    """
    dates = actogram["date"].unique().sort().to_list()
    fig, axes = plt.subplots(
        len(dates),
        1,
        figsize=(10, max(2.0, 0.4 * len(dates))),
        sharex=True,
        squeeze=False,
    )
    limit = float(np.nanmax(np.abs(actogram["delta"].to_numpy()))) or 1.0
    for ax, date in zip(axes[:, 0], dates):
        day = actogram.filter(pl.col("date") == date)
        ax.bar(
            day["slot_index"].to_numpy() / 2,
            day["delta"].to_numpy(),
            width=0.5,
            align="edge",
            color=[DIRECTION_COLORS[d] for d in day["direction"]],
        )
        ax.set_ylim(-limit, limit)
        ax.set_yticks([])
        ax.set_ylabel(str(date), rotation=0, ha="right", va="center", fontsize=7)
        ax.spines[["top", "right", "left"]].set_visible(False)
    axes[-1, 0].set_xlim(0, 24)
    axes[-1, 0].set_xticks(range(0, 25, 3))
    axes[-1, 0].set_xlabel("Time of day (h)")
    fig.suptitle(title)
    return _save(fig, path)


def plot_periodogram(
    result: models.SpectralResult, title: str, path: pathlib.Path
) -> pathlib.Path:
    """Plot a multitaper spectrum against period, or its placeholder.

    Args:
        result: The spectral estimate of one partition, or the InsufficientData
            placeholder that replaces it.
        title: Figure title.
        path: Where to save the image.

    Returns:
        The path of the saved image.
    """
    if isinstance(result, models.InsufficientData):
        return _placeholder(title, result.reason, path)

    period = result.period
    shown = np.isfinite(period) & (period <= MAX_PLOTTED_PERIOD_DAYS)
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.fill_between(
        period[shown],
        result.lower_ci[shown],
        result.upper_ci[shown],
        color="tab:gray",
        alpha=0.4,
        label=f"Jackknife {result.confidence:.0%} CI",
    )
    ax.plot(period[shown], result.power[shown], color="black", linewidth=0.8)
    ax.axvline(1.0, color="tab:red", linestyle="--", linewidth=0.8)
    ax.set_yscale("log")
    ax.set_xlabel("Period (days)")
    ax.set_ylabel("Power")
    ax.set_title(f"{title} (NW={result.time_bandwidth:g}, K={result.tapers})")
    ax.legend(loc="upper left")
    return _save(fig, path)


def plot_autocorrelation(
    result: models.AutocorrelationResult, title: str, path: pathlib.Path
) -> pathlib.Path:
    """Plot the autocorrelation function with its white-noise envelope.

    Args:
        result: The autocorrelation of one partition, or its placeholder.
        title: Figure title.
        path: Where to save the image.

    Returns:
        The path of the saved image.
    """
    if isinstance(result, models.InsufficientData):
        return _placeholder(title, result.reason, path)

    lag_days = result.lags / binning.SLOTS_PER_DAY
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.vlines(lag_days, 0, result.coefficients, color="black", linewidth=0.6)
    ax.axhline(0, color="black", linewidth=0.5)
    for bound in (result.confidence_bound, -result.confidence_bound):
        ax.axhline(bound, color="tab:blue", linestyle="--", linewidth=0.8)
    ax.set_xlabel("Lag (days)")
    ax.set_ylabel("Autocorrelation")
    ax.set_title(title)
    return _save(fig, path)


def plot_extrema_heatmap(
    pair_counts: pl.DataFrame, title: str, path: pathlib.Path
) -> pathlib.Path:
    """Heatmap of the hour of the daily minimum against the hour of the maximum."""
    counts = (
        pair_counts.sort("minimum_hour", "maximum_hour")["count"]
        .to_numpy()
        .reshape(24, 24)
    )
    fig, ax = plt.subplots(figsize=(6, 5))
    image = ax.imshow(counts, origin="lower", cmap="viridis", aspect="equal")
    fig.colorbar(image, ax=ax, label="Days")
    ax.set_xlabel("Hour of maximum")
    ax.set_ylabel("Hour of minimum")
    ax.set_title(title)
    return _save(fig, path)


def plot_time_between_extrema(
    unique_pairs: pl.DataFrame, title: str, path: pathlib.Path
) -> pathlib.Path:
    """Histogram of the signed time from daily maximum to daily minimum."""
    if unique_pairs.is_empty():
        return _placeholder(title, "no days with a unique minimum and maximum", path)
    hours = unique_pairs["minutes_between"].to_numpy() / 60
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.hist(hours, bins=np.arange(-24, 25, 1), color="tab:gray", edgecolor="black")
    ax.set_xlabel("Time of minimum - time of maximum (h)")
    ax.set_ylabel("Days")
    ax.set_title(title)
    return _save(fig, path)


def plot_extrema_timing_density(
    timing_density: pl.DataFrame, title: str, path: pathlib.Path
) -> pathlib.Path:
    """Density of the time of day of the daily minima and maxima."""
    if timing_density.is_empty():
        return _placeholder(title, "not enough extrema for a density estimate", path)
    fig, ax = plt.subplots(figsize=(8, 4))
    for (kind,), rows in timing_density.group_by("kind", maintain_order=True):
        ax.plot(rows["time_of_day"], rows["density"], label=str(kind))
    ax.set_xlim(0, 24)
    ax.set_xticks(range(0, 25, 3))
    ax.set_xlabel("Time of day (h)")
    ax.set_ylabel("Density")
    ax.set_title(title)
    ax.legend()
    return _save(fig, path)


def plot_extrema_report(
    report: models.ExtremaReport, output_dir: pathlib.Path, subject_id: str
) -> List[pathlib.Path]:
    """Render the three extrema figures of a subject."""
    return [
        plot_extrema_heatmap(
            report.pair_counts,
            f"{subject_id}: hours of daily extrema",
            figure_path(output_dir, subject_id, "all", "extrema_heatmap"),
        ),
        plot_time_between_extrema(
            report.unique_pairs,
            f"{subject_id}: time between daily extrema",
            figure_path(output_dir, subject_id, "all", "time_between_extrema"),
        ),
        plot_extrema_timing_density(
            report.timing_density,
            f"{subject_id}: timing of daily extrema",
            figure_path(output_dir, subject_id, "all", "extrema_timing"),
        ),
    ]
