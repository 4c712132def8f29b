import numpy as np
import pytest

import foilpanel as fp
from foilpanel.utils import polar as polar_module


# ======================================
## Alpha grid
# ======================================
def test_default_sweep_grid():
    alphas = fp.alpha_samples(*fp.default_polar_sweep())
    assert len(alphas) == 51
    assert alphas[0] == -10.0 and alphas[-1] == 15.0
    assert alphas[1] == pytest.approx(-9.5)


def test_reversed_bounds_are_swapped():
    assert np.array_equal(fp.alpha_samples(5.0, -5.0, 1.0), fp.alpha_samples(-5.0, 5.0, 1.0))


def test_last_alpha_never_overshoots():
    alphas = fp.alpha_samples(0.0, 1.0, 0.3)
    assert alphas == pytest.approx([0.0, 0.3, 0.6, 0.9])


def test_step_that_almost_divides_the_range():
    # 0.1 is not exact in binary, the endpoint must still be reached
    alphas = fp.alpha_samples(0.0, 1.0, 0.1)
    assert len(alphas) == 11
    assert alphas[-1] == 1.0


@pytest.mark.parametrize("step", [0.0, -0.5, np.nan])
def test_invalid_step_raises(step):
    with pytest.raises(ValueError):
        fp.alpha_samples(-5.0, 5.0, step)


# ======================================
## Sweeps
# ======================================
def test_inviscid_sweep_has_no_drag(naca2412):
    sweep = fp.sweep_polar(naca2412, fp.FlowConditions(viscous=False), -4.0, 4.0, 2.0)

    assert len(sweep) == 5
    assert sweep.is_complete
    assert all(p.cdp is None for p in sweep)
    assert np.all(np.isnan(sweep.cdp))
    assert np.all(np.diff(sweep.cl) > 0.0)
    assert sweep.code == "2412"


def test_viscous_sweep_reports_drag_and_transition(naca2412):
    sweep = fp.sweep_polar(naca2412, fp.FlowConditions(reynolds=1e6, mach=0.1), 0.0, 6.0, 3.0)

    assert len(sweep) == 3
    assert np.all(np.isfinite(sweep.cdp))
    assert np.all(sweep.cdp > 0.0)
    assert all(p.xtr_upper is None or 0.0 <= p.xtr_upper <= 1.0 for p in sweep)


def test_sweep_matches_single_solves(naca2412, solver_2412):
    flow = fp.FlowConditions(viscous=False)
    sweep = fp.sweep_polar(naca2412, flow, -2.0, 2.0, 2.0)

    for p in sweep:
        single = solver_2412.solve(fp.FlowConditions.from_degrees(p.alpha, viscous=False))
        assert p.cl == pytest.approx(single.cl, rel=1e-10)
        assert p.cm == pytest.approx(single.cm, rel=1e-10, abs=1e-12)


def test_panel_system_is_built_once_per_sweep(naca2412, monkeypatch):
    calls = []
    original = polar_module.build_panel_system

    def counting(*args, **kwargs):
        calls.append(args)
        return original(*args, **kwargs)

    monkeypatch.setattr(polar_module, "build_panel_system", counting)
    fp.sweep_polar(naca2412, fp.FlowConditions(viscous=False), -5.0, 5.0, 1.0)
    assert len(calls) == 1


def test_failed_alpha_is_skipped(naca2412, monkeypatch):
    original = fp.PanelSolver.solve

    def flaky(self, flow, *args, **kwargs):
        if abs(flow.alpha_deg - 2.0) < 1e-9:
            raise fp.SingularSystem("injected failure")
        return original(self, flow, *args, **kwargs)

    monkeypatch.setattr(fp.PanelSolver, "solve", flaky)
    sweep = fp.sweep_polar(naca2412, fp.FlowConditions(viscous=False), 0.0, 4.0, 1.0)

    assert sweep.requested == 5
    assert len(sweep) == 4
    assert not sweep.is_complete
    assert [f.alpha for f in sweep.failures] == [2.0]
    assert "injected" in sweep.failures[0].reason
    assert 2.0 not in sweep.alpha


def test_singular_panel_system_fails_every_alpha(naca2412, monkeypatch):
    def singular(self, panel_system, settings=fp.DEFAULT_SETTINGS):
        raise fp.SingularSystem("singular")

    monkeypatch.setattr(fp.PanelSolver, "__init__", singular)
    sweep = fp.sweep_polar(naca2412, fp.FlowConditions(viscous=False), 0.0, 2.0, 1.0)

    assert len(sweep) == 0
    assert len(sweep.failures) == 3
    assert sweep.requested == 3


def test_threaded_sweep_matches_sequential(naca2412):
    flow = fp.FlowConditions(reynolds=1e6)
    seq = fp.sweep_polar(naca2412, flow, -2.0, 4.0, 2.0)
    par = fp.sweep_polar(naca2412, flow, -2.0, 4.0, 2.0, workers=2)

    assert np.array_equal(seq.alpha, par.alpha)
    assert np.allclose(seq.cl, par.cl, rtol=1e-12)
    assert np.allclose(seq.cdp, par.cdp, rtol=1e-12)


def test_code_and_parameter_inputs():
    a = fp.sweep_polar("0012", fp.FlowConditions(viscous=False), 0.0, 2.0, 1.0, points_per_surface=60)
    b = fp.sweep_polar((0.0, 0.0, 0.12), fp.FlowConditions(viscous=False), 0.0, 2.0, 1.0,
                       points_per_surface=60)
    assert np.allclose(a.cl, b.cl)
    assert a.cl[0] == pytest.approx(0.0, abs=1e-8)


def test_multiple_flows_share_the_geometry(naca2412):
    flows = fp.flow_matrix([5e5, 2e6], [0.0, 0.3])
    assert len(flows) == 4
    assert [f.reynolds for f in flows] == [5e5, 5e5, 2e6, 2e6]

    out = fp.sweep_polars(naca2412, flows, 0.0, 4.0, 2.0)
    assert [flow for flow, _ in out] == flows
    assert all(len(sweep) == 3 for _, sweep in out)

    # compressibility raises the lift at the same Reynolds number
    (_, low_m), (_, high_m) = out[0], out[1]
    assert high_m.cl[-1] > low_m.cl[-1]


def test_polar_points_must_increase():
    pts = [fp.PolarPoint(alpha=2.0, cl=0.4, cdp=None), fp.PolarPoint(alpha=1.0, cl=0.3, cdp=None)]
    with pytest.raises(ValueError):
        fp.PolarSweep(points=pts)


def test_full_default_viscous_sweep():
    geom = fp.generate_geometry("2412", 80)
    sweep = fp.sweep_polar(geom, fp.FlowConditions(reynolds=1e6, mach=0.1), *fp.default_polar_sweep())

    assert sweep.requested == 51
    assert len(sweep) + len(sweep.failures) == 51
    assert len(sweep) == 51
    assert np.all(np.isfinite(sweep.cl))


if __name__ == "__main__":
    pytest.main()
