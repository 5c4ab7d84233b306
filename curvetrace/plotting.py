"""
Figures for standard-curve fits and forward-test validation.

All plotting functions accept precomputed results and perform no statistics
of their own beyond evaluating the fitted line for display.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.ticker import MaxNLocator

from .schema import AnalysisResult, CurvePoint, RegressionResult

FIGURE_DPI = 300
_STYLE_STATE = {"initialized": False}


@dataclass(frozen=True)
class StyleConfig:
    BASE_FONTSIZE: float = 12.0
    TITLE_FONTSIZE: float = 14.0
    LABEL_FONTSIZE: float = 12.0
    TICK_FONTSIZE: float = 11.0
    LEGEND_FONTSIZE: float = 11.0
    LINEWIDTH: float = 2.0
    LINEWIDTH_THIN: float = 1.2
    MARKERSIZE: float = 6.0
    GRID_ALPHA: float = 0.20
    FIGSIZE_SINGLE: tuple[float, float] = (7.0, 4.2)
    FIGSIZE_WIDE: tuple[float, float] = (9.5, 4.2)


STYLE = StyleConfig()

DATA_COLOR = "#004371"
LINE_COLOR = "#a50f15"
TARGET_COLOR = "#555555"


def setup_plot_style() -> None:
    """Apply the project plotting style once per process."""
    if _STYLE_STATE["initialized"]:
        return
    plt.rcParams.update(
        {
            "font.family": "STIXGeneral",
            "font.size": STYLE.BASE_FONTSIZE,
            "axes.titlesize": STYLE.TITLE_FONTSIZE,
            "axes.labelsize": STYLE.LABEL_FONTSIZE,
            "xtick.labelsize": STYLE.TICK_FONTSIZE,
            "ytick.labelsize": STYLE.TICK_FONTSIZE,
            "legend.fontsize": STYLE.LEGEND_FONTSIZE,
            "mathtext.fontset": "stix",
            "mathtext.default": "regular",
            "axes.linewidth": STYLE.LINEWIDTH_THIN,
            "axes.spines.top": False,
            "axes.spines.right": False,
            "legend.frameon": False,
            "lines.linewidth": STYLE.LINEWIDTH,
            "lines.markersize": STYLE.MARKERSIZE,
            "errorbar.capsize": 3.0,
            "savefig.dpi": FIGURE_DPI,
            "savefig.bbox": "tight",
            "savefig.pad_inches": 0.12,
        }
    )
    _STYLE_STATE["initialized"] = True


def clean_axis(ax: Axes, grid_axis: str = "y") -> None:
    """Apply consistent ticks, grid and spines to one axis."""
    ax.xaxis.set_major_locator(MaxNLocator(nbins=6, min_n_ticks=4))
    ax.yaxis.set_major_locator(MaxNLocator(nbins=6, min_n_ticks=4))
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.grid(True, axis=grid_axis, alpha=STYLE.GRID_ALPHA, linestyle=":", linewidth=0.7)


def _save(fig: plt.Figure, output_dir: str, filename: str) -> str:
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, filename)
    fig.savefig(path)
    plt.close(fig)
    return path


def plot_standard_curve(
    points: Sequence[CurvePoint],
    regression: RegressionResult,
    output_dir: str = "output",
    units: Optional[str] = None,
) -> str:
    """Render calibration points with the fitted standard curve.

    Args:
        points (Sequence[CurvePoint]): Calibration pairs (concentration,
            absorbance).
        regression (RegressionResult): Fit returned by
            :func:`curvetrace.stats.regression.fit_line`.
        output_dir (str, optional): Directory for the PNG. Defaults to
            ``"output"``.
        units (str, optional): Concentration units for the x-axis label.

    Returns:
        str: Path to ``standard_curve.png``.

    Raises:
        ValueError: If no points are supplied.

    Note:
        An undefined fit is drawn as points only, with the legend noting that
        no line could be fitted.
    """
    if not points:
        raise ValueError("No calibration points to plot.")

    setup_plot_style()
    x = np.array([p.x for p in points], dtype=float)
    y = np.array([p.y for p in points], dtype=float)

    fig, ax = plt.subplots(figsize=STYLE.FIGSIZE_SINGLE)
    ax.scatter(x, y, color=DATA_COLOR, zorder=3, label="Standards")

    if regression.defined:
        pad = 0.05 * (x.max() - x.min() if x.max() > x.min() else 1.0)
        grid = np.linspace(x.min() - pad, x.max() + pad, 200)
        ax.plot(
            grid,
            regression.slope * grid + regression.intercept,
            color=LINE_COLOR,
            linewidth=STYLE.LINEWIDTH,
            label=f"{regression.equation}\n$R^2$ = {regression.r_square:.4f}",
            zorder=2,
        )
    else:
        ax.plot([], [], " ", label="Standard curve undefined")

    xlabel = "Concentration" + (f" ({units})" if units else "")
    ax.set_xlabel(xlabel)
    ax.set_ylabel("Absorbance")
    ax.set_title("Standard curve")
    clean_axis(ax, grid_axis="both")
    ax.legend(loc="upper left")
    return _save(fig, output_dir, "standard_curve.png")


def plot_forward_test(
    result: AnalysisResult,
    output_dir: str = "output",
    units: Optional[str] = None,
) -> str:
    """Compare each group's target mean ± SD with the recovered mean ± SD.

    Args:
        result (AnalysisResult): Output of
            :func:`curvetrace.pipeline.run_traceback`.
        output_dir (str, optional): Directory for the PNG.
        units (str, optional): Concentration units for the y-axis label.

    Returns:
        str: Path to ``forward_test.png``.

    Raises:
        ValueError: If the result holds no groups.
    """
    if not result.groups:
        raise ValueError("Analysis result has no groups to plot.")

    setup_plot_style()
    names = result.group_names
    pos = np.arange(len(names), dtype=float)
    offset = 0.12

    target_mean = np.array([g.target.mean for g in result.groups])
    target_sd = np.array([g.target.sd for g in result.groups])
    rec_mean = np.array([g.recovered_mean for g in result.groups])
    rec_sd = np.array([g.recovered_sd for g in result.groups])

    fig, ax = plt.subplots(figsize=STYLE.FIGSIZE_WIDE)
    ax.errorbar(
        pos - offset,
        target_mean,
        yerr=target_sd,
        fmt="s",
        color=TARGET_COLOR,
        label="Target mean ± SD",
    )
    ax.errorbar(
        pos + offset,
        rec_mean,
        yerr=rec_sd,
        fmt="o",
        color=DATA_COLOR,
        label="Recalculated mean ± SD",
    )
    for g, x0 in zip(result.groups, pos):
        ax.scatter(
            np.full(len(g.recovered_concentrations), x0 + offset),
            g.recovered_concentrations,
            s=8,
            color=DATA_COLOR,
            alpha=0.35,
            zorder=1,
        )

    ax.set_xticks(pos)
    ax.set_xticklabels(names)
    ax.set_xlim(pos[0] - 0.6, pos[-1] + 0.6)
    ax.set_ylabel("Concentration" + (f" ({units})" if units else ""))
    ax.set_title("Forward test")
    ax.yaxis.set_major_locator(MaxNLocator(nbins=6))
    ax.grid(True, axis="y", alpha=STYLE.GRID_ALPHA, linestyle=":", linewidth=0.7)
    ax.legend(loc="best")
    return _save(fig, output_dir, "forward_test.png")
