# FILE : foilpanel/main.py
"""
Headless command line:

    python -m foilpanel 2412 --alpha 4 --re 1e6 --plot
    python -m foilpanel 2412 --alpha -10:15:0.5 --re 1e6 --mach 0.1 --out polar.csv
"""

import argparse
import sys

from .utils import (
    AirfoilSolver, FlowConditions, GeometryError, LiftModel, SingularSystem, TransitionMode,
    DEFAULT_SETTINGS, default_export_path, generate_geometry, load_plot_params, load_settings,
    polar_visualisation, sweep_polar, write_polar_csv,
)
from .utils.config import DEFAULT_POINTS_PER_SURFACE, DEFAULT_REYNOLDS, DEFAULT_MACH


def parse_alpha(spec):
    """
    "5"          -> single alpha (5.0, None)
    "-5:15:0.5"  -> sweep        (None, (-5, 15, 0.5))
    """
    if ":" in spec:
        parts = spec.split(":")
        if len(parts) != 3:
            raise argparse.ArgumentTypeError("Alpha range must be START:END:STEP, e.g. -5:15:0.5")
        try:
            return None, tuple(float(p) for p in parts)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"Invalid alpha range '{spec}'.") from exc
    try:
        return float(spec), None
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid alpha '{spec}'.") from exc


def _fixup_argv(argv):
    """Turn `--alpha -5:15:0.5` into `--alpha=-5:15:0.5` so argparse doesn't read a flag."""
    out = list(argv)
    for i, arg in enumerate(out):
        if arg == "--alpha" and i + 1 < len(out) and out[i+1].startswith("-"):
            out[i] = f"--alpha={out[i+1]}"
            del out[i+1]
            break
    return out


def display_polar(sweep):
    """Print the polar as a table."""
    print(f"\n  NACA {sweep.code}  |  {len(sweep)}/{sweep.requested} points")
    print(f"  {'alpha':>7} {'CL':>9} {'CDp':>9} {'CM':>9}  stall")
    for p in sweep.points:
        cdp = "-" if p.cdp is None else f"{p.cdp:9.5f}"
        print(f"  {p.alpha:7.2f} {p.cl:9.4f} {cdp:>9} {p.cm:9.4f}  {'*' if p.probable_stall else ''}")
    for f in sweep.failures:
        print(f"  {f.alpha:7.2f}  failed: {f.reason}")
    print()


def build_parser():
    parser = argparse.ArgumentParser(
        prog="foilpanel",
        description="Vortex panel + integral boundary layer analysis of NACA 4-digit sections",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  %(prog)s 2412 --alpha 4
  %(prog)s 0012 --alpha -5:15:0.5 --re 2e6 --out polar.csv
""")
    parser.add_argument("naca", help="NACA 4-digit code, e.g. 2412")
    parser.add_argument("--alpha", type=str, default="0",
                        help="angle of attack [deg] or START:END:STEP sweep")
    parser.add_argument("--points", type=int, default=DEFAULT_POINTS_PER_SURFACE,
                        help="points per surface (default: %(default)s)")
    parser.add_argument("--re", type=float, default=DEFAULT_REYNOLDS,
                        help="chord Reynolds number (default: %(default).0f)")
    parser.add_argument("--mach", type=float, default=DEFAULT_MACH,
                        help="freestream Mach number (default: %(default)s)")
    parser.add_argument("--inviscid", action="store_true", help="skip the boundary layer")
    parser.add_argument("--forced-transition", type=float, default=None, metavar="X",
                        help="trip both surfaces at x/c = X instead of free transition")
    parser.add_argument("--lift-model", choices=[m.value for m in LiftModel],
                        default=LiftModel.PANEL_INTEGRATED.value)
    parser.add_argument("--workers", type=int, default=1, help="threads for polar sweeps")
    parser.add_argument("--settings", type=str, default=None, help="solver settings dict file")
    parser.add_argument("--out", type=str, default=None, help="polar CSV path")
    parser.add_argument("--export", action="store_true", help="write the polar CSV to the default exports/ path")
    parser.add_argument("--plot", action="store_true", help="save figures under figures/")
    parser.add_argument("--flow-params", type=str, default=None,
                        help="flow plot parameter file (e.g. plotparams_flow.txt)")
    return parser


def main(argv=None):

    argv = _fixup_argv(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        alpha, sweep_range = parse_alpha(args.alpha)
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))

    try:
        settings = load_settings(args.settings) if args.settings else DEFAULT_SETTINGS
    except (OSError, SyntaxError, ValueError) as exc:
        parser.error(f"cannot read settings file {args.settings}: {exc}")

    try:
        flow = FlowConditions.from_degrees(
            0.0 if alpha is None else alpha,
            reynolds=args.re, mach=args.mach, viscous=not args.inviscid,
            transition_mode=TransitionMode.AUTO if args.forced_transition is None else TransitionMode.FORCED,
            **({} if args.forced_transition is None else {"forced_transition_x": args.forced_transition}),
        )
    except ValueError as exc:
        parser.error(str(exc))

    try:
        geometry = generate_geometry(args.naca, args.points)

        if sweep_range is None:
            solver = AirfoilSolver(geometry, flow, settings=settings)
            solver.solve(lift_model=args.lift_model, verbose=True)
            solver.print_results()

            if args.plot:
                solver.plot_airfoil()
                solver.plot_cp()
                params = load_plot_params(args.flow_params) if args.flow_params else {"np_x": 120, "np_y": 80}
                solver.plot_flow(params)
            return 0

        sweep = sweep_polar(geometry, flow, *sweep_range, lift_model=args.lift_model,
                            settings=settings, workers=args.workers, verbose=True)
        display_polar(sweep)

        out = args.out
        if out is None and args.export:
            out = default_export_path(geometry.code, flow)
        if out is not None:
            write_polar_csv(out, sweep, verbose=True)

        if args.plot and len(sweep):
            polar_visualisation(sweep)

        return 0

    except GeometryError as exc:
        print(f"geometry error: {exc}", file=sys.stderr)
        return 2
    except SingularSystem as exc:
        print(f"solver error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
