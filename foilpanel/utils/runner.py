# FILE : foilpanel/utils/runner.py

from .classes import AirfoilGeometry, FlowConditions, LiftModel, TransitionMode
from .config import DEFAULT_SETTINGS, DEFAULT_POINTS_PER_SURFACE, DEFAULT_FORCED_TRANSITION_X, SolverSettings
from .geometry import generate_geometry
from .panel import build_panel_system
from .performance import display_airfoil_performance, sample_surface
from .solver_inviscid import PanelSolver
from .solver_viscous import estimate_boundary_layer
from .visualisation import airfoil_visualisation, cp_visualisation, flow_visualisation


class AirfoilSolver:
    """
    Geometry, panel system and LU factors of one section, solved for any
    number of flow conditions.
    """
    def __init__(self, geometry, flow: FlowConditions = None,
                 points_per_surface: int = DEFAULT_POINTS_PER_SURFACE,
                 settings: SolverSettings = DEFAULT_SETTINGS):

        if not isinstance(geometry, AirfoilGeometry):
            geometry = generate_geometry(geometry, points_per_surface)

        self.geometry     = geometry
        self.settings     = settings
        self.flow         = FlowConditions() if flow is None else flow
        self.panel_system = build_panel_system(geometry)
        self.solver       = PanelSolver(self.panel_system, settings)

        self.result         = None
        self.boundary_layer = None
        self.surface        = None

    def solve(self, flow: FlowConditions = None, lift_model=LiftModel.PANEL_INTEGRATED, verbose=False):

        if flow is not None:
            self.flow = flow

        # --- inviscid panel solution ---
        self.result = self.solver.solve(self.flow, lift_model, verbose=verbose)

        # --- boundary layer (no coupling) ---
        if self.flow.viscous:
            self.boundary_layer = estimate_boundary_layer(self.result, self.flow, self.settings)
        else:
            self.boundary_layer = None

        self.surface = sample_surface(self.panel_system, self.result, self.boundary_layer, self.settings)

        return self.result

    def print_results(self):
        # Display Results
        display_airfoil_performance(self.result, self.geometry.code, self.boundary_layer)

    def plot_airfoil(self, plot_save=True, verbose=True):
        return airfoil_visualisation(self.geometry, plot_save=plot_save, verbose=verbose)

    def plot_cp(self, plot_save=True, verbose=True):
        return cp_visualisation(self.surface, self.geometry.code, self.flow.alpha_deg,
                                plot_save=plot_save, verbose=verbose)

    def plot_flow(self, flowplot_params, plot_save=True, verbose=True):
        flowfield, _ = flow_visualisation(self.panel_system, self.result, flowplot_params,
                                          plot_save=plot_save, verbose=verbose)
        return flowfield


def solve_airfoil(
    *,
    # geometry / discretization
    naca="2412",
    points_per_surface: int = DEFAULT_POINTS_PER_SURFACE,
    chord: float = 1.0,

    # flow operating condition
    alpha_deg: float = 0.0,
    reynolds: float = 1.0e6,
    mach: float = 0.0,
    viscous: bool = True,
    transition_mode=TransitionMode.AUTO,
    forced_transition_x: float = DEFAULT_FORCED_TRANSITION_X,
    lift_model=LiftModel.PANEL_INTEGRATED,
    settings: SolverSettings = DEFAULT_SETTINGS,

    # print conditions
    print_results: bool = False,

    # visualisation conditions
    plot_airfoil: bool = False, plot_cp: bool = False, plot_save: bool = True,
    plot_flow: bool = False, flowplot_params: dict = None,
):
    """
    Single-API call pipeline for one section at one flow condition.
    Returns: solver (AirfoilSolver), flowfield (X, Y, U, V) or None
    """
    # --- geometry + flow (initialisation) ---
    geometry = generate_geometry(naca, points_per_surface, chord)
    flow = FlowConditions.from_degrees(
        alpha_deg, reynolds=reynolds, mach=mach, viscous=viscous,
        transition_mode=transition_mode, forced_transition_x=forced_transition_x,
    )

    # --- solver ---
    solver = AirfoilSolver(geometry, flow, settings=settings)
    solver.solve(lift_model=lift_model, verbose=print_results)

    # --- print results ---
    if print_results:
        solver.print_results()

    # --- visualisation ---
    if plot_airfoil:
        solver.plot_airfoil(plot_save=plot_save, verbose=print_results)

    if plot_cp:
        solver.plot_cp(plot_save=plot_save, verbose=print_results)

    if plot_flow:
        params = {"np_x": 120, "np_y": 80} if flowplot_params is None else flowplot_params
        flowfield = solver.plot_flow(params, plot_save=plot_save, verbose=print_results)
    else:
        flowfield = None

    if print_results:
        print("--- Flow solver successfully finished ---\n")

    return solver, flowfield
