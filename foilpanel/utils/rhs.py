# FILE : foilpanel/utils/rhs.py

import numpy as np

from .classes import FlowConditions, PanelSystem


def right_hand_side_airfoil(panel_system: PanelSystem, flow: FlowConditions):
    """
    RHS for the flow-tangency boundary condition:
      rhs_i = -[ U*nx_i + V*ny_i ]                         (i < N)

    and for the Kutta row (last entry):
      rhs_N = -[ U*(cos_0 + cos_N-1) + V*(sin_0 + sin_N-1) ]
    """
    U, V = flow.freestream
    n    = panel_system.n_panels

    rhs = np.zeros(n + 1)
    rhs[:n] = -(U * panel_system.nx + V * panel_system.ny)

    cos, sin = panel_system.cosine, panel_system.sine
    lo, hi   = panel_system.te_upper, panel_system.te_lower
    rhs[n] = -(U * (cos[lo] + cos[hi]) + V * (sin[lo] + sin[hi]))

    return rhs


def freestream_tangential(panel_system: PanelSystem, flow: FlowConditions):
    """Freestream component along each panel tangent."""
    U, V = flow.freestream
    return U * panel_system.cosine + V * panel_system.sine
