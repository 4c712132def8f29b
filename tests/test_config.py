from pathlib import Path

import pytest

import foilpanel as fp

ROOT = Path(__file__).parents[1]


def write(path, text):
    path.write_text(text)
    return str(path)


def test_shipped_settings_file_matches_defaults():
    settings = fp.load_settings(str(ROOT / "solverparams.txt"))
    assert settings == fp.DEFAULT_SETTINGS


def test_shipped_plot_params():
    params = fp.load_plot_params(str(ROOT / "plotparams_flow.txt"))
    assert params["np_x"] >= 2 and params["np_y"] >= 2


def test_overrides_are_applied_on_top_of_base(tmp_path):
    path = write(tmp_path / "solver.txt", '{"max_surface_drag": 0.3, "turbulent_separation_h": 2.6}')
    settings = fp.load_settings(path)

    assert settings.max_surface_drag == 0.3
    assert settings.turbulent_separation_h == 2.6
    assert settings.michel_coeff == fp.DEFAULT_SETTINGS.michel_coeff


def test_unknown_setting_is_rejected(tmp_path):
    path = write(tmp_path / "solver.txt", '{"kutta_mode": "velocity"}')
    with pytest.raises(ValueError, match="kutta_mode"):
        fp.load_settings(path)


def test_file_must_hold_a_dict(tmp_path):
    path = write(tmp_path / "solver.txt", '["michel_coeff", 1.2]')
    with pytest.raises(ValueError):
        fp.load_settings(path)


@pytest.mark.parametrize("changes", [
    {"max_momentum_thickness": 0.0},
    {"max_surface_drag": -1.0},
    {"analytic_blend_weight": 1.5},
    {"separated_cp_damping": -0.1},
    {"min_pg_beta_squared": 0.0},
    {"turbulent_start_h": 2.5},
    {"stall_separation_x": (0.9, 0.2)},
])
def test_invalid_settings_raise(changes):
    with pytest.raises(ValueError):
        fp.DEFAULT_SETTINGS.replace(**changes)


def test_plot_params_need_grid_sizes(tmp_path):
    with pytest.raises(ValueError, match="np_y"):
        fp.load_plot_params(write(tmp_path / "plot.txt", '{"np_x": 40}'))
    with pytest.raises(ValueError):
        fp.load_plot_params(write(tmp_path / "plot.txt", '{"np_x": 40, "np_y": 1}'))


if __name__ == "__main__":
    pytest.main()
