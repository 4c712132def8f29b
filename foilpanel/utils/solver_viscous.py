# FILE : foilpanel/utils/solver_viscous.py
"""
Integral boundary-layer estimate on the inviscid surface velocity.

Each surface is marched from the stagnation point to the trailing edge:
Thwaites (laminar) -> Michel or forced transition -> Head (turbulent).
Profile drag comes from Squire-Young at the last station. There is no
coupling back into the panel solution.
"""

from functools import partial
from itertools import accumulate
from typing import NamedTuple, Optional

import numpy as np

from .classes import (
    BoundaryLayerResult, FlowConditions, FlowState, SolveResult, SurfaceBoundaryLayer,
    TransitionMode,
)
from .config import (
    DEFAULT_SETTINGS, SolverSettings,
    MIN_EDGE_VELOCITY, MIN_ARC_LENGTH, MIN_RE_THETA,
    THWAITES_COEFF, HIEMENZ_COEFF, LAMBDA_MIN, LAMBDA_MAX,
    MICHEL_RE_X_OFF, MICHEL_EXPONENT,
)
from .errors import BoundaryLayerDivergence


class Station(NamedTuple):
    s: float      # arc length from the stagnation point / chord
    x: float      # x / chord
    ue: float     # edge velocity / V_inf


class MarchState(NamedTuple):
    index: int
    s: float
    ue: float
    theta: float
    H: float
    cf: float
    state: FlowState
    u5_integral: float
    transition_index: Optional[int] = None
    separation_index: Optional[int] = None


# ======================================
## Closures
# ======================================
def thwaites_closure(lam: float):
    """Shape factor H and shear parameter l from the Thwaites parameter (Cebeci & Bradshaw fits)."""
    lam = float(np.clip(lam, LAMBDA_MIN, LAMBDA_MAX))

    if lam >= 0.0:
        H   = 2.61 - 3.75*lam + 5.24*lam**2
        ell = 0.22 + 1.57*lam - 1.8*lam**2
    else:
        H   = 2.088 + 0.0731 / (lam + 0.14)
        ell = 0.22 + 1.402*lam + 0.018*lam / (lam + 0.107)

    return H, max(ell, 0.0)


def michel_criterion(re_theta: float, re_x: float, settings: SolverSettings = DEFAULT_SETTINGS) -> bool:
    """True once Re_theta passes the Michel transition line."""
    if re_x <= 0.0:
        return False
    limit = settings.michel_coeff * (1.0 + MICHEL_RE_X_OFF / re_x) * re_x**MICHEL_EXPONENT
    return re_theta >= limit


def head_h1(H: float) -> float:
    """Head's mass-flow shape factor H1(H)."""
    if H <= 1.6:
        return 3.3 + 0.8234 * max(H - 1.1, 1e-3)**-1.287
    return 3.3 + 1.5501 * (H - 0.6778)**-3.064


def head_shape_factor(H1: float) -> float:
    """Inverse of head_h1; infinite when H1 has fallen to the 3.3 asymptote."""
    if H1 <= 3.3:
        return np.inf
    if H1 <= 5.3:
        return 0.6778 + 1.1538 * (H1 - 3.3)**-0.326
    return 1.1 + 0.86 * (H1 - 3.3)**-0.777


def head_entrainment(H1: float) -> float:
    return 0.0306 * (H1 - 3.0)**-0.6169


def ludwieg_tillmann(H: float, re_theta: float) -> float:
    re_theta = max(re_theta, MIN_RE_THETA)
    return 0.246 * 10.0**(-0.678*H) * re_theta**-0.268


def squire_young(theta: float, H: float, ue: float) -> float:
    """Far-wake momentum thickness (x2 for drag) from trailing-edge values."""
    return 2.0 * theta * ue**((H + 5.0) / 2.0)


# ======================================
## March
# ======================================
def _check_state(state: MarchState, settings: SolverSettings = DEFAULT_SETTINGS) -> MarchState:
    if not (np.isfinite(state.theta) and np.isfinite(state.H) and np.isfinite(state.cf)) or state.theta <= 0.0:
        raise BoundaryLayerDivergence(
            f"non-finite boundary layer at station {state.index} (s={state.s:.4f}, theta={state.theta}, H={state.H})",
            station=state.index,
        )
    if state.theta > settings.max_momentum_thickness:
        raise BoundaryLayerDivergence(
            f"momentum thickness {state.theta:.3e} exceeds {settings.max_momentum_thickness} at station {state.index}",
            station=state.index,
        )
    return state


def _edge_velocity(station: Station, index: int) -> float:
    if not np.isfinite(station.ue):
        raise BoundaryLayerDivergence(f"non-finite edge velocity at station {index}", station=index)
    return max(abs(station.ue), MIN_EDGE_VELOCITY)


def stagnation_state(station: Station, reynolds: float) -> MarchState:
    """Hiemenz start: ue grows linearly from the stagnation point."""
    nu = 1.0 / reynolds
    ue = _edge_velocity(station, 0)
    s  = max(station.s, MIN_ARC_LENGTH)

    u5    = ue**5 * s / 6.0
    theta = np.sqrt(HIEMENZ_COEFF * nu * s / ue)
    H, ell = thwaites_closure(theta**2 * (ue / s) / nu)
    cf    = 2.0 * ell / (reynolds * ue * theta)

    return _check_state(MarchState(0, s, ue, theta, H, cf, FlowState.ATTACHED_LAMINAR, u5))


def march_step(prev: MarchState, station: Station, *, reynolds: float,
               transition_mode=TransitionMode.AUTO, trip_x: float = 0.05,
               settings: SolverSettings = DEFAULT_SETTINGS) -> MarchState:
    """Advance the boundary layer by one station."""
    index = prev.index + 1
    ue    = _edge_velocity(station, index)
    s     = max(station.s, prev.s + MIN_ARC_LENGTH)
    ds    = s - prev.s
    nu    = 1.0 / reynolds

    # --- separated: cf = 0, H frozen, theta follows the pressure-gradient term ---
    if prev.state is FlowState.SEPARATED:
        theta = prev.theta * (prev.ue / ue)**(prev.H + 2.0)
        return _check_state(prev._replace(index=index, s=s, ue=ue, theta=theta, cf=0.0), settings)

    # --- laminar: Thwaites ---
    if prev.state is FlowState.ATTACHED_LAMINAR:
        u5    = prev.u5_integral + 0.5 * (prev.ue**5 + ue**5) * ds
        theta = np.sqrt(THWAITES_COEFF * nu * u5 / ue**6)
        lam   = theta**2 * (ue - prev.ue) / ds / nu
        H, ell = thwaites_closure(lam)

        re_theta = reynolds * ue * theta
        cf       = 2.0 * ell / re_theta

        if TransitionMode(transition_mode) is TransitionMode.FORCED:
            tripped = station.x >= trip_x
        else:
            tripped = michel_criterion(re_theta, reynolds * ue * s, settings)

        # laminar separation: short bubble, turbulent reattachment
        if tripped or H >= settings.laminar_separation_h:
            H  = settings.turbulent_start_h
            cf = ludwieg_tillmann(H, re_theta)
            return _check_state(MarchState(index, s, ue, theta, H, cf, FlowState.ATTACHED_TURBULENT,
                                           u5, transition_index=index), settings)

        return _check_state(prev._replace(index=index, s=s, ue=ue, theta=theta, H=H, cf=cf,
                                          u5_integral=u5), settings)

    # --- turbulent: Head's entrainment method ---
    re_theta = max(reynolds * prev.ue * prev.theta, MIN_RE_THETA)
    cf_prev  = ludwieg_tillmann(prev.H, re_theta)
    H1_prev  = head_h1(prev.H)

    # pressure-gradient term integrated across the step, friction explicitly
    theta = prev.theta * (prev.ue / ue)**(prev.H + 2.0) + 0.5 * cf_prev * ds
    q     = prev.ue * prev.theta * H1_prev + ds * prev.ue * head_entrainment(H1_prev)
    H     = head_shape_factor(q / (ue * theta))

    if H >= settings.turbulent_separation_h:
        return _check_state(prev._replace(index=index, s=s, ue=ue, theta=theta,
                                          H=settings.turbulent_separation_h, cf=0.0,
                                          state=FlowState.SEPARATED, separation_index=index), settings)

    cf = ludwieg_tillmann(H, reynolds * ue * theta)

    return _check_state(prev._replace(index=index, s=s, ue=ue, theta=theta, H=H, cf=cf), settings)


def march_surface(stations, reynolds: float, transition_mode=TransitionMode.AUTO,
                  trip_x: float = 0.05, settings: SolverSettings = DEFAULT_SETTINGS):
    """
    Fold march_step over the ordered stations of one surface.

    Raises BoundaryLayerDivergence carrying the states accepted so far.
    """
    stations = [Station(*st) for st in stations]
    if not stations:
        return []

    step = partial(march_step, reynolds=reynolds, transition_mode=transition_mode,
                   trip_x=trip_x, settings=settings)

    states = []
    try:
        for state in accumulate(stations[1:], step, initial=stagnation_state(stations[0], reynolds)):
            states.append(state)
    except BoundaryLayerDivergence as exc:
        raise BoundaryLayerDivergence(str(exc), exc.station, states) from exc

    return states


# ======================================
## Surface stations
# ======================================
def find_stagnation(vt, xmid):
    """
    Index k and fraction f such that vt changes sign (negative -> positive)
    between control points k and k+1, at fraction f of the way. The sign
    change closest to the LE is used.
    """
    vt = np.asarray(vt)
    cand = np.flatnonzero((vt[:-1] < 0.0) & (vt[1:] >= 0.0))
    if cand.size == 0:
        raise BoundaryLayerDivergence("no stagnation point found in surface velocity")

    k = int(cand[np.argmin(xmid[cand] + xmid[cand+1])])
    f = float(-vt[k] / (vt[k+1] - vt[k]))

    return k, f


def surface_stations(solve_result: SolveResult, k: int, f: float):
    """Stations (s, x, ue) of the upper and lower surface, each ordered from the stagnation point."""
    chord = solve_result.chord
    ds    = np.asarray(solve_result.ds) / chord
    xc    = np.asarray(solve_result.xmid) / chord
    ue    = np.abs(solve_result.vt)

    # arc length of the control points along the loop
    s_mid  = np.r_[0.0, np.cumsum(0.5*(ds[:-1] + ds[1:]))] + 0.5*ds[0]
    s_stag = s_mid[k] + f*(s_mid[k+1] - s_mid[k])

    upper_idx = np.arange(k, -1, -1)
    lower_idx = np.arange(k+1, len(ds))

    upper = np.c_[s_stag - s_mid[upper_idx], xc[upper_idx], ue[upper_idx]]
    lower = np.c_[s_mid[lower_idx] - s_stag, xc[lower_idx], ue[lower_idx]]

    return (upper_idx, upper), (lower_idx, lower)


def friction_drag(states) -> float:
    """Skin-friction drag estimate: trapezoidal integral of cf ue^2 over s."""
    if len(states) < 2:
        return 0.0
    s   = np.array([st.s for st in states])
    tau = np.array([st.cf * st.ue**2 for st in states])
    return float(np.sum(0.5*(tau[1:] + tau[:-1]) * np.diff(s)))


def _surface_result(name, panel_indices, stations, flow: FlowConditions, settings):

    message = ""
    try:
        states = march_surface(stations, flow.reynolds, flow.transition_mode,
                               flow.forced_transition_x, settings)
        degraded = False
    except BoundaryLayerDivergence as exc:
        states   = exc.states
        degraded = True
        message  = f"{name} surface: {exc}"

    n = len(stations)
    k = len(states)

    theta = np.full(n, np.nan); H = np.full(n, np.nan); cf = np.zeros(n)
    state = [FlowState.ATTACHED_LAMINAR] * n

    if k:
        theta[:k] = [st.theta for st in states]
        H[:k]     = [st.H for st in states]
        cf[:k]    = [st.cf for st in states]
        state[:k] = [st.state for st in states]

        # hold the last valid values past a divergence
        theta[k:] = states[-1].theta
        H[k:]     = states[-1].H
        state[k:] = [states[-1].state] * (n - k)

    last = states[-1] if k else None
    cd_friction = friction_drag(states)

    if degraded or last is None:
        cd = cd_friction
    else:
        cd = squire_young(last.theta, last.H, last.ue)
        if cd > settings.max_surface_drag:
            degraded = True
            message  = f"{name} surface: Squire-Young drag {cd:.3e} exceeds {settings.max_surface_drag}"
            cd       = cd_friction

    surface = SurfaceBoundaryLayer(
        surface=name, panel_indices=panel_indices,
        s=stations[:, 0], x=stations[:, 1], ue=stations[:, 2],
        theta=theta, H=H, cf=cf, state=tuple(state),
        transition_index=last.transition_index if last else None,
        separation_index=last.separation_index if last else None,
        cd=float(cd), cd_friction=cd_friction, degraded=degraded,
    )
    return surface, message


def estimate_boundary_layer(solve_result: SolveResult, flow_conditions: FlowConditions = None,
                            settings: SolverSettings = DEFAULT_SETTINGS) -> BoundaryLayerResult:
    """
    Boundary-layer estimate on both surfaces of a solved section.

    Never raises for numerical trouble: a diverging march is cut short, the
    affected surface falls back to the skin-friction drag estimate and the
    result is flagged `degraded`.
    """
    flow = solve_result.flow if flow_conditions is None else flow_conditions

    messages = []
    try:
        k, f = find_stagnation(solve_result.vt, solve_result.xmid)
    except BoundaryLayerDivergence as exc:
        # fall back to the leading-edge panel
        k, f = int(np.argmin(solve_result.xmid)), 0.5
        k = min(k, solve_result.n_panels - 2)
        messages.append(f"{exc}; using the leading edge")

    (upper_idx, upper_st), (lower_idx, lower_st) = surface_stations(solve_result, k, f)

    upper, msg_u = _surface_result("upper", upper_idx, upper_st, flow, settings)
    lower, msg_l = _surface_result("lower", lower_idx, lower_st, flow, settings)
    messages += [m for m in (msg_u, msg_l) if m]

    cdp = upper.cd + lower.cd

    return BoundaryLayerResult(
        upper=upper, lower=lower, cdp=float(cdp), stagnation_index=k,
        degraded=bool(messages), message="; ".join(messages),
        stall_window=settings.stall_separation_x,
    )
