"""Write traceback results to reproducible CSV tables.

This module is the reporting boundary between the in-memory
:class:`~curvetrace.schema.AnalysisResult` and exported artifacts. Engine
values keep full precision; rounding to ``DISPLAY_DECIMALS`` happens only
here.
"""

from __future__ import annotations

import io
import logging
import os
from typing import Dict, List, Mapping, Optional, Tuple

import pandas as pd

from .schema import COLUMNS, AnalysisResult, HypothesisTestResult

logger = logging.getLogger(__name__)

DISPLAY_DECIMALS = 4


def results_dataframe(result: AnalysisResult) -> pd.DataFrame:
    """Build the per-sample forward-test table.

    Args:
        result (AnalysisResult): Output of
            :func:`curvetrace.pipeline.run_traceback`.

    Returns:
        pandas.DataFrame: One row per sample with the group's generated
        values, recalculated concentrations and both sets of group
        statistics, in group then sample order.
    """
    rows = []
    for group in result.groups:
        for sample in group.per_sample:
            rows.append(
                {
                    COLUMNS.group: group.name,
                    COLUMNS.sample: sample.index,
                    COLUMNS.absorbance: sample.generated_value,
                    COLUMNS.absorbance_mean: group.generated_mean,
                    COLUMNS.absorbance_sd: group.generated_sd,
                    COLUMNS.recalculated: sample.recovered_concentration,
                    COLUMNS.recalculated_mean: group.recovered_mean,
                    COLUMNS.recalculated_sd: group.recovered_sd,
                }
            )
    columns = [
        COLUMNS.group,
        COLUMNS.sample,
        COLUMNS.absorbance,
        COLUMNS.absorbance_mean,
        COLUMNS.absorbance_sd,
        COLUMNS.recalculated,
        COLUMNS.recalculated_mean,
        COLUMNS.recalculated_sd,
    ]
    return pd.DataFrame.from_records(rows, columns=columns)


def standard_curve_dataframe(result: AnalysisResult) -> pd.DataFrame:
    """One-row table describing the fitted standard curve (empty without one)."""
    columns = [COLUMNS.slope, COLUMNS.intercept, COLUMNS.r_square, COLUMNS.equation]
    reg = result.regression
    if reg is None:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(
        [[reg.slope, reg.intercept, reg.r_square, reg.equation]], columns=columns
    )


def comparisons_dataframe(
    comparisons: Mapping[Tuple[str, str], HypothesisTestResult],
    alpha: float = 0.05,
) -> pd.DataFrame:
    """Tabulate named two-sample test results with a significance flag."""
    rows = []
    for (name1, name2), res in comparisons.items():
        rows.append(
            {
                "Group 1": name1,
                "Group 2": name2,
                "Test": res.kind.value,
                "t statistic": res.statistic,
                "df": res.df,
                "p-value": res.p_value,
                "Significance Level": alpha,
                "Significant": res.is_significant(alpha),
            }
        )
    return pd.DataFrame.from_records(
        rows,
        columns=[
            "Group 1",
            "Group 2",
            "Test",
            "t statistic",
            "df",
            "p-value",
            "Significance Level",
            "Significant",
        ],
    )


def _rounded(df: pd.DataFrame, decimals: int) -> pd.DataFrame:
    out = df.copy()
    numeric = out.select_dtypes(include="number").columns.difference([COLUMNS.sample])
    out[numeric] = out[numeric].round(decimals)
    return out


def save_results_csv(
    result: AnalysisResult,
    output_dir: str = "output",
    analysis_name: Optional[str] = None,
    units: Optional[str] = None,
    date: Optional[str] = None,
    experiment_name: Optional[str] = None,
    comparisons: Optional[Mapping[Tuple[str, str], HypothesisTestResult]] = None,
    alpha: float = 0.05,
    decimals: int = DISPLAY_DECIMALS,
) -> Dict[str, str]:
    """Save the forward-test table and supporting summaries to CSV files.

    Args:
        result (AnalysisResult): Pipeline output to export.
        output_dir (str): Directory where CSV outputs are written.
        analysis_name, units, date, experiment_name: Analysis details written
            above the sample table. ``analysis_name`` also names the file.
        comparisons: Optional hypothesis-test results to export alongside.
        alpha (float): Significance level recorded with the comparisons.
        decimals (int): Rounding applied to exported numeric columns.

    Returns:
        dict[str, str]: Written paths keyed by ``"results"`` and, when
        present, ``"standard_curve"`` and ``"comparisons"``.

    Note:
        The results file holds an analysis-details block, a blank line, then
        the per-sample table with its own header.
    """
    os.makedirs(output_dir, exist_ok=True)
    stem = analysis_name or "analysis"
    paths: Dict[str, str] = {}

    details = pd.DataFrame(
        [
            {
                "Analysis Name": analysis_name or "",
                "Units": units or "",
                "Date": date or "",
                "Experiment Name": experiment_name or "",
            }
        ]
    )
    table = _rounded(results_dataframe(result), decimals)

    results_path = os.path.join(output_dir, f"{stem}-results.csv")
    with open(results_path, "w", newline="", encoding="utf-8") as fh:
        details.to_csv(fh, index=False)
        fh.write("\n")
        table.to_csv(fh, index=False, float_format=f"%.{decimals}f")
    paths["results"] = results_path

    if result.regression is not None:
        curve_path = os.path.join(output_dir, "standard_curve.csv")
        _rounded(standard_curve_dataframe(result), decimals).to_csv(curve_path, index=False)
        paths["standard_curve"] = curve_path

    if comparisons:
        comp_path = os.path.join(output_dir, "statistical_tests.csv")
        comparisons_dataframe(comparisons, alpha).to_csv(comp_path, index=False)
        paths["comparisons"] = comp_path

    for label, path in paths.items():
        logger.info("Saved %s to %s", label.replace("_", " "), path)
    return paths


def read_results_table(path: str) -> pd.DataFrame:
    """Read back the per-sample table from a file written by :func:`save_results_csv`."""
    header = ",".join(results_dataframe(AnalysisResult(None, ())).columns)
    with open(path, encoding="utf-8") as fh:
        lines = fh.readlines()
    start = next((i for i, line in enumerate(lines) if line.strip() == header), None)
    if start is None:
        raise ValueError(f"No per-sample results table found in {path}")
    return pd.read_csv(io.StringIO("".join(lines[start:])))


def summarize_groups(result: AnalysisResult) -> List[dict]:
    """Target versus recovered statistics per group, for logs and reports."""
    return [
        {
            "Group": g.name,
            "Target Mean": g.target.mean,
            "Target SD": g.target.sd,
            "n": g.target.samples,
            "Recovered Mean": g.recovered_mean,
            "Recovered SD": g.recovered_sd,
        }
        for g in result.groups
    ]
