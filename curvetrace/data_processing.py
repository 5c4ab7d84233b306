"""
Load group summaries and standard-curve points from CSV files.
"""

# Column headers are matched case-insensitively after trimming, rows that are
# entirely empty are dropped, and numeric columns are coerced so a stray
# blank cell becomes NaN and is rejected with a clear message.

import pandas as pd

from .schema import CurvePoint, GroupSummary
from .stats.regression import interpolate_standard_points

_GROUP_ALIASES = {
    "name": ("name", "group", "group name"),
    "mean": ("mean", "mean concentration"),
    "sd": ("sd", "std", "standard deviation"),
    "samples": ("samples", "n", "samples per group"),
}

_CURVE_ALIASES = {
    "x": ("concentration", "x"),
    "y": ("absorbance", "y"),
}


def _resolve_columns(df, aliases, source):
    lookup = {str(col).strip().lower(): col for col in df.columns}
    resolved = {}
    for key, options in aliases.items():
        match = next((lookup[o] for o in options if o in lookup), None)
        if match is None:
            raise KeyError(
                f"{source}: missing column for {key!r}; expected one of {list(options)}"
            )
        resolved[key] = match
    return resolved


def load_table(filepath):
    """
    Load a CSV file and drop rows that are entirely empty.

    Args:
        filepath (str): Path to the CSV file.

    Returns:
        pd.DataFrame: Loaded DataFrame.
    """
    return pd.read_csv(filepath).dropna(how="all")


def groups_from_dataframe(df, source="groups"):
    """Convert a table with name/mean/sd/samples columns into group summaries.

    Args:
        df: :class:`pandas.DataFrame` with one row per group.
        source (str): Label used in error messages.

    Returns:
        list[GroupSummary]: Groups in row order.

    Raises:
        KeyError: If a required column is missing.
        ValueError: If a numeric cell is blank or not a number, or a
            sample count is not a whole number.
    """
    cols = _resolve_columns(df, _GROUP_ALIASES, source)
    names = df[cols["name"]].astype(str).str.strip()
    means = pd.to_numeric(df[cols["mean"]], errors="coerce")
    sds = pd.to_numeric(df[cols["sd"]], errors="coerce")
    samples = pd.to_numeric(df[cols["samples"]], errors="coerce")

    groups = []
    for row, (name, mean, sd, n) in enumerate(zip(names, means, sds, samples), start=1):
        if pd.isna(mean) or pd.isna(sd) or pd.isna(n):
            raise ValueError(f"{source}: row {row} ({name!r}) has a non-numeric value")
        if float(n) != int(n):
            raise ValueError(f"{source}: row {row} ({name!r}) samples must be a whole number")
        groups.append(GroupSummary(name=name, mean=float(mean), sd=float(sd), samples=int(n)))
    return groups


def curve_points_from_dataframe(df, source="standard curve", auto_fill=False):
    """Convert a concentration/absorbance table into calibration points.

    Rows where either value is missing are skipped, the way a partially
    filled standard-curve form is read. With ``auto_fill`` every row with a
    concentration is kept and interior absorbances are interpolated from the
    first and last rows, which must both carry an absorbance.
    """
    cols = _resolve_columns(df, _CURVE_ALIASES, source)
    x = pd.to_numeric(df[cols["x"]], errors="coerce")
    y = pd.to_numeric(df[cols["y"]], errors="coerce")
    if not auto_fill:
        mask = x.notna() & y.notna()
        return [CurvePoint(float(xi), float(yi)) for xi, yi in zip(x[mask], y[mask])]

    x, y = x[x.notna()], y[x.notna()]
    if len(x) < 2 or pd.isna(y.iloc[0]) or pd.isna(y.iloc[-1]):
        raise ValueError(
            f"{source}: auto-fill needs absorbances on the first and last standards"
        )
    # Interior responses are overwritten by the fill.
    y = y.fillna(y.iloc[0])
    return interpolate_standard_points(
        [CurvePoint(float(xi), float(yi)) for xi, yi in zip(x, y)]
    )


def load_groups(filepath):
    return groups_from_dataframe(load_table(filepath), source=str(filepath))


def load_standard_curve(filepath, auto_fill=False):
    return curve_points_from_dataframe(
        load_table(filepath), source=str(filepath), auto_fill=auto_fill
    )
