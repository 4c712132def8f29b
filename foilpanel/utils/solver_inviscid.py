# FILE : foilpanel/utils/solver_inviscid.py

import numpy as np
from scipy.linalg import lu_factor, lu_solve

from .classes import FlowConditions, LiftModel, PanelSystem, SolveResult
from .config import DEFAULT_SETTINGS, KUTTA_CHECK_TOL, SolverSettings
from .errors import SingularSystem
from .performance import pressure_coefficient, section_coefficients, surface_velocity
from .rhs import right_hand_side_airfoil


class PanelSolver:
    """
    LU factorisation of one panel system's influence matrix, reused for every
    right-hand side (angle of attack) solved against it.
    """
    def __init__(self, panel_system: PanelSystem, settings: SolverSettings = DEFAULT_SETTINGS):

        self.panel_system = panel_system
        self.settings     = settings

        A = panel_system.influence

        if not np.all(np.isfinite(A)):
            raise SingularSystem("Influence matrix has non-finite entries.")

        with np.errstate(divide="ignore", invalid="ignore"):
            cond = float(np.linalg.cond(A))

        if not np.isfinite(cond) or cond > settings.max_condition_number:
            raise SingularSystem(
                f"Influence matrix is ill-conditioned: cond = {cond:.3e} "
                f"(limit {settings.max_condition_number:.1e})."
            )

        self.lu, self.piv = lu_factor(A)

        pivots = np.abs(np.diag(self.lu))
        if pivots.min() <= settings.pivot_tolerance * pivots.max():
            raise SingularSystem(f"Vanishing pivot in LU factorisation (min |u_ii| = {pivots.min():.3e}).")

        self.condition_number = cond

    def strengths(self, rhs):
        """[sigma_0 .. sigma_N-1, gamma] for one right-hand side."""
        q = lu_solve((self.lu, self.piv), rhs)

        if not np.all(np.isfinite(q)):
            raise SingularSystem("Non-finite panel strengths returned by the linear solve.")

        return q

    def solve(self, flow: FlowConditions, lift_model=LiftModel.PANEL_INTEGRATED, verbose=False) -> SolveResult:

        ps = self.panel_system

        # --- Build RHS ---
        rhs = right_hand_side_airfoil(ps, flow)

        # --- source and vortex strengths ---
        q     = self.strengths(rhs)
        sigma = q[:-1]
        gamma = np.full(ps.n_panels, q[-1])

        # --- surface velocity & pressure ---
        vt = surface_velocity(ps, flow, q)
        cp = pressure_coefficient(vt, flow.mach, self.settings)

        cl, cm, circulation = section_coefficients(ps, flow, gamma, cp, lift_model, self.settings)

        # --- Check Kutta resolution ---
        kutta_res = vt[ps.te_upper] + vt[ps.te_lower]

        if verbose and abs(kutta_res) >= KUTTA_CHECK_TOL:
            print(f"Kutta check = {kutta_res:.3e} | TE: upper={vt[0]:.3e}, lower={vt[-1]:.3e}\n")

        return SolveResult(
            gamma=gamma, sigma=sigma, vt=vt, cp=cp,
            cl=cl, cm=cm, circulation=circulation,
            lift_model=LiftModel(lift_model), flow=flow,
            kutta_residual=float(kutta_res),
            xmid=ps.xmid, ymid=ps.ymid, ds=ps.ds, chord=ps.chord,
        )


def vorticity_solution_kutta(panel_system: PanelSystem, rhs, settings: SolverSettings = DEFAULT_SETTINGS):
    """One-shot solve of A*q = rhs with the Kutta row already in A."""
    return PanelSolver(panel_system, settings).strengths(rhs)


def solve(panel_system: PanelSystem, flow_conditions: FlowConditions,
          lift_model=LiftModel.PANEL_INTEGRATED, settings: SolverSettings = DEFAULT_SETTINGS) -> SolveResult:
    """Factor and solve a single flow condition. Use PanelSolver to reuse the factorisation."""
    return PanelSolver(panel_system, settings).solve(flow_conditions, lift_model)
