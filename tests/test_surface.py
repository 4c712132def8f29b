from dataclasses import replace

import numpy as np
import pytest

import foilpanel as fp
from foilpanel.utils.solver_viscous import find_stagnation


def test_inviscid_surface_matches_solution(panels_2412, solver_2412):
    res = solver_2412.solve(fp.FlowConditions.from_degrees(4.0, viscous=False))
    surf = fp.sample_surface(panels_2412, res)

    assert np.array_equal(surf.cp, res.cp)
    assert np.array_equal(surf.cp_inviscid, res.cp)
    assert not np.any(surf.separated)
    assert np.array_equal(surf.x, panels_2412.xmid)


# (v/V)^2 of NACA 0012 at zero lift, Abbott & von Doenhoff, Theory of Wing Sections, App. I
NACA0012_CP = [(0.10, 1.0 - 1.411), (0.30, 1.0 - 1.350), (0.60, 1.0 - 1.166)]


@pytest.mark.parametrize("xc, cp_ref", NACA0012_CP)
def test_naca0012_pressure_matches_tabulated_values(panels_0012, solver_0012, xc, cp_ref):
    res  = solver_0012.solve(fp.FlowConditions.from_degrees(0.0, viscous=False))
    surf = fp.sample_surface(panels_0012, res)

    x_u, cp_u = surf.upper()
    x_l, cp_l = surf.lower()

    assert np.all(np.diff(x_u) > 0.0) and np.all(np.diff(x_l) > 0.0)
    assert np.interp(xc, x_u, cp_u) == pytest.approx(cp_ref, abs=0.02)
    assert np.interp(xc, x_l, cp_l) == pytest.approx(cp_ref, abs=0.02)


@pytest.mark.parametrize("code, alpha", [("2412", -4.0), ("2412", 2.0), ("2412", 8.0), ("0012", 4.0)])
def test_surface_velocity_changes_sign_once_at_stagnation(panels_2412, panels_0012, code, alpha):
    ps  = panels_2412 if code == "2412" else panels_0012
    res = fp.solve(ps, fp.FlowConditions.from_degrees(alpha, viscous=False))

    flips = np.flatnonzero(np.sign(res.vt[1:]) != np.sign(res.vt[:-1]))
    assert len(flips) == 1

    k, _ = find_stagnation(res.vt, res.xmid)
    assert flips[0] == k
    assert res.xmid[k] < 0.05

    # stagnation pressure at the sign change, suction everywhere else near the LE
    assert max(res.cp[k], res.cp[k+1]) > 0.95
    assert np.max(np.abs(res.vt)) < 5.0


def test_upper_surface_suction_near_leading_edge(panels_2412, solver_2412):
    res = solver_2412.solve(fp.FlowConditions.from_degrees(4.0, viscous=False))
    surf = fp.sample_surface(panels_2412, res)

    x_u, cp_u = surf.upper()
    x_l, cp_l = surf.lower()

    # suction peak just behind the LE, decaying toward the TE
    cp_u_02, cp_u_50 = np.interp([0.02, 0.5], x_u, cp_u)
    assert cp_u_02 < -1.0
    assert cp_u_02 < cp_u_50 < 0.0
    assert np.interp(0.1, x_l, cp_l) > np.interp(0.1, x_u, cp_u) + 0.5


def test_separated_region_is_damped_toward_plateau(panels_2412, solver_2412):
    flow = fp.FlowConditions.from_degrees(4.0, reynolds=1e6)
    res  = solver_2412.solve(flow)
    bl   = fp.estimate_boundary_layer(res, flow)

    # force separation at 70 % of the upper-surface stations
    k = int(0.7 * bl.upper.n_stations)
    bl = replace(bl, upper=replace(bl.upper, separation_index=k), lower=replace(bl.lower, separation_index=None))

    surf = fp.sample_surface(panels_2412, res, bl)

    idx     = bl.upper.panel_indices[k:]
    plateau = res.cp[idx[0]]
    damping = fp.DEFAULT_SETTINGS.separated_cp_damping

    assert np.allclose(surf.cp[idx], plateau + damping*(res.cp[idx] - plateau))
    assert np.all(surf.separated[idx])
    assert surf.separated.sum() == len(idx)

    untouched = np.setdiff1d(np.arange(res.n_panels), idx)
    assert np.array_equal(surf.cp[untouched], res.cp[untouched])


def test_inviscid_flow_ignores_boundary_layer(panels_2412, solver_2412):
    flow = fp.FlowConditions.from_degrees(4.0)
    res  = solver_2412.solve(flow)
    bl   = fp.estimate_boundary_layer(res)
    bl   = replace(bl, upper=replace(bl.upper, separation_index=10))

    res_inviscid = solver_2412.solve(replace(flow, viscous=False))
    surf = fp.sample_surface(panels_2412, res_inviscid, bl)
    assert np.array_equal(surf.cp, res_inviscid.cp)


if __name__ == "__main__":
    pytest.main()
