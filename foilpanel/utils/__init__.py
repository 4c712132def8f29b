"""
utils package initializer

Re-exports the most commonly used functions and classes so they can be
imported directly with:

    from foilpanel.utils import generate_geometry, build_panel_system, solve, ...

If you want something more specific, you can still do:
    from foilpanel.utils.solver_viscous import march_surface
"""

# Solver Runner
from .runner import (
    solve_airfoil,
    AirfoilSolver,
)

# Configuration
from .config import (
    SolverSettings,
    DEFAULT_SETTINGS,
    load_settings,
    load_plot_params,
)

# Errors
from .errors import (
    FoilPanelError,
    GeometryError,
    SingularSystem,
    BoundaryLayerDivergence,
)

# Data containers
from .classes import (
    AirfoilGeometry,
    Panel,
    PanelSystem,
    FlowConditions,
    TransitionMode,
    LiftModel,
    FlowState,
    SolveResult,
    SurfaceBoundaryLayer,
    BoundaryLayerResult,
    SurfaceDistribution,
    PolarPoint,
    PolarFailure,
    PolarSweep,
)

# Geometry tools
from .geometry import (
    parse_naca4,
    generate_geometry,
)

# Panel preparation
from .panel import (
    data_preparation,
    build_panel_system,
)

# Influence kernels
from .vortex_kernels import (
    panel_velocities,
    vortex_panel_velocity,
    source_panel_velocity,
    influence_coefficients,
)

# RHS builders
from .rhs import (
    right_hand_side_airfoil
)

# Inviscid solver
from .solver_inviscid import (
    PanelSolver,
    vorticity_solution_kutta,
    solve,
)

# Boundary layer
from .solver_viscous import (
    march_surface,
    estimate_boundary_layer,
)

# Performance analysis
from .performance import (
    prandtl_glauert_factor,
    analytic_section_coeffs,
    sample_surface,
    display_airfoil_performance,
)

# Field sampling
from .flowfield import (
    sample_field,
    sample_field_grid,
)

# Polar sweeps
from .polar import (
    alpha_samples,
    default_polar_sweep,
    sweep_polar,
    sweep_polars,
    flow_matrix,
)

# Results export
from .results_create_save import (
    polar_rows,
    write_polar_csv,
    write_multi_polar_csv,
    default_export_path,
)

# Visualisation
from .visualisation import (
    airfoil_visualisation,
    cp_visualisation,
    polar_visualisation,
    flow_visualisation,
)

__all__ = [
    # --- solver runner ---
    "solve_airfoil", "AirfoilSolver",
    # --- configuration ---
    "SolverSettings", "DEFAULT_SETTINGS", "load_settings", "load_plot_params",
    # --- errors ---
    "FoilPanelError", "GeometryError", "SingularSystem", "BoundaryLayerDivergence",
    # --- data containers ---
    "AirfoilGeometry", "Panel", "PanelSystem", "FlowConditions", "TransitionMode", "LiftModel",
    "FlowState", "SolveResult", "SurfaceBoundaryLayer", "BoundaryLayerResult", "SurfaceDistribution",
    "PolarPoint", "PolarFailure", "PolarSweep",
    # --- geometry ---
    "parse_naca4", "generate_geometry",
    # --- panel ---
    "data_preparation", "build_panel_system",
    # --- kernels ---
    "panel_velocities", "vortex_panel_velocity", "source_panel_velocity",
    "influence_coefficients",
    # --- rhs ---
    "right_hand_side_airfoil",
    # --- inviscid solver ---
    "PanelSolver", "vorticity_solution_kutta", "solve",
    # --- viscous solver ---
    "march_surface", "estimate_boundary_layer",
    # performance
    "prandtl_glauert_factor", "analytic_section_coeffs", "sample_surface", "display_airfoil_performance",
    # field
    "sample_field", "sample_field_grid",
    # polar
    "alpha_samples", "default_polar_sweep", "sweep_polar", "sweep_polars", "flow_matrix",
    # export
    "polar_rows", "write_polar_csv", "write_multi_polar_csv", "default_export_path",
    # visualisation
    "airfoil_visualisation", "cp_visualisation", "polar_visualisation", "flow_visualisation",
]
