#!/usr/bin/env python3
"""
Main script for running standard-curve traceback analysis.
"""

# Pipeline overview (README-style):
# 1) Load group summaries (name, mean, sd, samples) and, optionally, the
#    standard-curve points (concentration, absorbance) from CSV files.
# 2) Fit the standard curve by least squares.
# 3) Synthesize per-sample concentrations for each group and trace them to
#    absorbance through the curve.
# 4) Forward test: invert the curve and recompute mean/SD per group.
# 5) Run the requested two-sample tests and export CSV tables and figures.

import argparse
import logging
import sys
import time

from curvetrace.data_processing import load_groups, load_standard_curve
from curvetrace.output import save_results_csv, summarize_groups
from curvetrace.pipeline import compare_groups, run_traceback
from curvetrace.plotting import plot_forward_test, plot_standard_curve
from curvetrace.stats.hypothesis import DEFAULT_SIGNIFICANCE_LEVELS


def configure_logging(log_file="curvetrace_analysis.log"):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, mode="w"),
        ],
    )


def build_parser():
    parser = argparse.ArgumentParser(
        description="Trace group summary statistics back to sample-level data."
    )
    parser.add_argument("groups", help="CSV with name, mean, sd, samples columns")
    parser.add_argument(
        "--curve", help="CSV with concentration, absorbance columns (standard curve)"
    )
    parser.add_argument(
        "--no-curve",
        action="store_true",
        help="Skip the standard curve; generated values are the concentrations",
    )
    parser.add_argument(
        "--auto-fill",
        action="store_true",
        help="Interpolate interior standard absorbances from the first and last standards",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--test",
        nargs=3,
        action="append",
        default=[],
        metavar=("GROUP1", "GROUP2", "KIND"),
        help="Two-sample test to run, e.g. --test Control Treated t-test",
    )
    parser.add_argument(
        "--alpha",
        type=float,
        default=DEFAULT_SIGNIFICANCE_LEVELS[0],
        help="Significance level for reported tests",
    )
    parser.add_argument("--analysis-name", default=None)
    parser.add_argument("--experiment-name", default=None)
    parser.add_argument("--units", default=None)
    parser.add_argument("--date", default=None)
    parser.add_argument("--output-dir", default="output")
    parser.add_argument("--no-plots", action="store_true")
    return parser


def main(argv=None):
    """Main execution function with stage timing logs."""
    args = build_parser().parse_args(argv)
    configure_logging()

    start_time = time.time()
    logging.info("Initializing traceback analysis pipeline")

    use_curve = not args.no_curve
    if use_curve and not args.curve:
        logging.error("A standard curve CSV is required unless --no-curve is given.")
        return 1

    try:
        groups = load_groups(args.groups)
        curve_points = (
            load_standard_curve(args.curve, auto_fill=args.auto_fill)
            if use_curve
            else None
        )
        logging.info("Loaded %d group(s)", len(groups))

        step_start = time.time()
        result = run_traceback(
            groups, curve_points=curve_points, use_curve=use_curve, seed=args.seed
        )
        logging.info(
            "Traceback completed in %.2f seconds", time.time() - step_start
        )

        comparisons = {}
        for name1, name2, kind in args.test:
            res = compare_groups(groups, name1, name2, kind)
            comparisons[(name1, name2)] = res
            logging.info(
                "%s vs %s (%s): p = %.4f%s",
                name1,
                name2,
                res.kind.value,
                res.p_value,
                " (significant)" if res.is_significant(args.alpha) else "",
            )
    except (KeyError, OSError, ValueError) as exc:
        logging.error("Analysis failed: %s", exc)
        return 1

    for row in summarize_groups(result):
        logging.info(
            "%s: target %.4f ± %.4f, recalculated %.4f ± %.4f (n=%d)",
            row["Group"],
            row["Target Mean"],
            row["Target SD"],
            row["Recovered Mean"],
            row["Recovered SD"],
            row["n"],
        )

    paths = save_results_csv(
        result,
        output_dir=args.output_dir,
        analysis_name=args.analysis_name,
        units=args.units,
        date=args.date,
        experiment_name=args.experiment_name,
        comparisons=comparisons,
        alpha=args.alpha,
    )

    if not args.no_plots:
        if result.regression is not None:
            paths["standard_curve_plot"] = plot_standard_curve(
                curve_points, result.regression, args.output_dir, units=args.units
            )
        paths["forward_test_plot"] = plot_forward_test(
            result, args.output_dir, units=args.units
        )

    logging.info("Total execution time: %.2f seconds", time.time() - start_time)
    logging.info("Analysis pipeline completed successfully")
    logging.info("Generated output files:")
    for label, path in paths.items():
        logging.info("  - %s: %s", label, path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
