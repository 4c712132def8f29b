# FILE : foilpanel/utils/results_create_save.py

import csv
import os

from .classes import PolarSweep

POLAR_COLUMNS = ["alpha_deg", "CL", "CDp", "CM", "probable_stall", "xtr_upper", "xtr_lower"]
MULTI_POLAR_COLUMNS = ["reynolds", "mach", "viscous", "transition"] + POLAR_COLUMNS


def _fmt(value, spec):
    return "" if value is None else format(value, spec)


def polar_rows(sweep: PolarSweep):
    """One dict per polar point, keyed by POLAR_COLUMNS."""
    rows = []
    for pt in sweep.points:
        rows.append({
            "alpha_deg"     : f"{pt.alpha:.3f}",
            "CL"            : f"{pt.cl:.6f}",
            "CDp"           : _fmt(pt.cdp, ".6f"),
            "CM"            : f"{pt.cm:.6f}",
            "probable_stall": int(pt.probable_stall),
            "xtr_upper"     : _fmt(pt.xtr_upper, ".4f"),
            "xtr_lower"     : _fmt(pt.xtr_lower, ".4f"),
        })
    return rows


def write_polar_csv(path: str, sweep: PolarSweep, verbose: bool = False) -> str:
    """Header row, then one row per polar point (alpha in degrees)."""
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    with open(path, "w", newline="") as fh:
        w = csv.DictWriter(fh, fieldnames=POLAR_COLUMNS)
        w.writeheader()
        w.writerows(polar_rows(sweep))

    if verbose:
        print(f"    --> polar saved: {path}")

    return path


def write_multi_polar_csv(path: str, sweeps, verbose: bool = False) -> str:
    """Combined CSV for the (flow, sweep) pairs returned by sweep_polars."""
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    with open(path, "w", newline="") as fh:
        w = csv.DictWriter(fh, fieldnames=MULTI_POLAR_COLUMNS)
        w.writeheader()
        for flow, sweep in sweeps:
            for row in polar_rows(sweep):
                row.update({
                    "reynolds"  : f"{flow.reynolds:.0f}",
                    "mach"      : f"{flow.mach:.4f}",
                    "viscous"   : int(flow.viscous),
                    "transition": flow.transition_mode.value,
                })
                w.writerow(row)

    if verbose:
        print(f"    --> {len(sweeps)} polars saved: {path}")

    return path


def default_export_path(code: str, flow, out_dir: str = "exports") -> str:
    """
    polar_<code>_Re<x.xx>e6_M<x.xx>_<visc|invisc>_<auto|forced>.csv,
    with a numeric suffix when the file already exists.
    """
    visc_tag = "visc" if flow.viscous else "invisc"
    tr_tag   = flow.transition_mode.value
    stem     = f"polar_{code}_Re{flow.reynolds/1e6:.2f}e6_M{flow.mach:.2f}_{visc_tag}_{tr_tag}"

    path = os.path.join(out_dir, f"{stem}.csv")
    i = 1
    while os.path.exists(path):
        path = os.path.join(out_dir, f"{stem}_{i}.csv")
        i += 1

    return path
