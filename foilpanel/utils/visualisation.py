# FILE : foilpanel/utils/visualisation.py

import os

import numpy as np
from scipy.interpolate import CubicSpline

import matplotlib.pyplot as plt

from .flowfield import field_grid, sample_field_grid


def _save_figure(fig, out_dir, filename, verbose):
    # --- create a folder if it doesn't exist ---
    os.makedirs(out_dir, exist_ok=True)

    # --- save to file ---
    filepath = os.path.join(out_dir, filename)
    fig.savefig(filepath, dpi=300, bbox_inches='tight') # high-res, cropped
    plt.close(fig)

    if verbose:
        print(f"    --> plot saved in folder: {out_dir}")

    return filepath


def smooth_curve(x, y, n_samp=1000):
    """
    Return a visually smooth curve through (x,y) using cubic splines in arclength.
    """
    x = np.asarray(x).ravel(); y = np.asarray(y).ravel()
    s = np.r_[0.0, np.cumsum(np.hypot(np.diff(x), np.diff(y)))]

    # Guard against repeated points
    keep = np.r_[True, np.diff(s) > 1e-12]
    s, x, y = s[keep], x[keep], y[keep]
    csx = CubicSpline(s, x, bc_type='natural')
    csy = CubicSpline(s, y, bc_type='natural')
    S   = np.linspace(s[0], s[-1], n_samp)

    return csx(S), csy(S)


def airfoil_visualisation(geometry, plotsize=(8, 6), plot_save=True,
                          out_dir="figures/airfoil", verbose=True):
    """Filled section outline. Returns the saved path, or the figure when not saving."""
    if verbose:
        print("Starting airfoil plot...")

    x, y  = geometry.x, geometry.y
    chord = geometry.chord

    fig, ax = plt.subplots(figsize=plotsize)

    # Draw closed airfoil outline, filled
    ax.plot(x, y, 'k-', linewidth=1.2)
    ax.fill(x, y, color='black', zorder=3)

    # -- plot boundaries ---
    x_buffer = chord*0.1
    y_buffer = (np.max(y) - np.min(y))*0.1

    ax.set_xlim(np.min(x) - x_buffer, np.max(x) + x_buffer)
    ax.set_ylim(np.min(y) - y_buffer, np.max(y) + y_buffer)

    # --- labels and titles ---
    ax.set_aspect('equal')
    ax.set_xlabel('X (normalised by chord)')
    ax.set_ylabel('Y (normalised by chord)')
    ax.set_title(f'NACA {geometry.code} ({geometry.n_panels} panels)')

    if plot_save:
        return _save_figure(fig, out_dir, f"airfoil_naca{geometry.code}.png", verbose)

    return fig


def cp_visualisation(surface, code="", alpha_deg=0.0, plotsize=(8, 6), plot_save=True,
                     out_dir="figures/Cp", verbose=True):
    """Upper / lower Cp against x/c, y-axis inverted."""
    if verbose:
        print("Starting Cp plot...")

    x_u, cp_u = surface.upper()
    x_l, cp_l = surface.lower()

    fig, ax = plt.subplots(figsize=plotsize)
    ax.plot(x_u, cp_u, 'b-', linewidth=1.5, label="Upper surface")
    ax.plot(x_l, cp_l, 'r-', linewidth=1.5, label="Lower surface")

    if np.any(surface.separated):
        sep = surface.separated
        ax.plot(surface.x[sep] / surface.chord, surface.cp[sep], 'k.', markersize=3, label="Separated")

    ax.invert_yaxis()
    ax.set_xlabel('X (normalised by chord)')
    ax.set_ylabel("Pressure Coefficient (Cp)", fontsize=14)
    ax.set_title(f"Pressure Coefficient around NACA {code} at {alpha_deg:.1f}deg AoA", fontsize=12)
    ax.legend(loc='best')
    ax.grid(True, which='both', linestyle='--', alpha=0.6)

    if plot_save:
        return _save_figure(fig, out_dir, f"Cp_naca{code}_alpha{alpha_deg:.1f}.png", verbose)

    return fig


def polar_visualisation(sweep, plotsize=(11, 5), plot_save=True,
                        out_dir="figures/polar", verbose=True):
    """CL-alpha and, for viscous sweeps, CL-CDp."""
    if verbose:
        print("Starting polar plot...")

    alpha, cl, cdp = sweep.alpha, sweep.cl, sweep.cdp

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=plotsize)

    ax1.plot(alpha, cl, 'b.-', linewidth=1.2)
    stall = np.array([p.probable_stall for p in sweep.points], dtype=bool)
    if np.any(stall):
        ax1.plot(alpha[stall], cl[stall], 'rx', label="Probable stall")
        ax1.legend(loc='best')
    ax1.set_xlabel('alpha [deg]')
    ax1.set_ylabel('CL')
    ax1.grid(True, linestyle='--', alpha=0.6)

    if np.any(np.isfinite(cdp)):
        ax2.plot(cdp, cl, 'k.-', linewidth=1.2)
        ax2.set_xlabel('CDp')
    else:
        ax2.plot(alpha, sweep.cm, 'g.-', linewidth=1.2)
        ax2.set_xlabel('alpha [deg]')
        ax2.set_ylabel('CM (c/4)')
    ax2.grid(True, linestyle='--', alpha=0.6)

    fig.suptitle(f"NACA {sweep.code} polar")

    if plot_save:
        return _save_figure(fig, out_dir, f"polar_naca{sweep.code}.png", verbose)

    return fig


def flow_visualisation(panel_system, solve_result, flowplot_params, plotsize=(8, 6),
                       plot_save=True, out_dir="figures/flow", verbose=True):
    """
    Streamlines of the sampled velocity field around the section.
    Returns (X, Y, U, V) and the saved path (or figure).
    """
    if verbose:
        print("Starting flow computations...")

    flow = solve_result.flow
    X, Y = field_grid(panel_system, flow.alpha, int(flowplot_params["np_x"]), int(flowplot_params["np_y"]))
    U, V = sample_field_grid(panel_system, solve_result, X, Y)

    xs, ys = smooth_curve(panel_system.x, panel_system.y, n_samp=1200)

    fig, ax = plt.subplots(figsize=plotsize)

    # --- plot Object ---
    ax.plot(xs, ys, 'k-', linewidth=1.2)
    ax.fill(xs, ys, color='black', zorder=3)

    U_plot = np.nan_to_num(U, nan=0.0)
    V_plot = np.nan_to_num(V, nan=0.0)
    ax.streamplot(X, Y, U_plot, V_plot, density=float(flowplot_params.get("density", 2.0)), color='lightblue')

    # --- plot parameters ---
    ax.set_xlim(X.min(), X.max())
    ax.set_ylim(Y.min(), Y.max())
    ax.set_aspect('equal')
    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.set_title(f'Potential flow, freestream angle = {flow.alpha_deg:.1f}°, M = {flow.mach:.2f}')

    if verbose:
        print("    --> flow field render completed.")

    if plot_save:
        out = _save_figure(fig, out_dir, f"velocity_naca{panel_system.geometry.code}_alpha_{flow.alpha_deg:.1f}.png", verbose)
    else:
        out = fig

    return (X, Y, U, V), out
