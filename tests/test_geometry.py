import numpy as np
import pytest

import foilpanel as fp
from foilpanel.utils.geometry import (
    camber_line, check_panel_loop, cosine_spacing, find_self_intersections, thickness_distribution,
)


def test_parse_naca4():
    assert fp.parse_naca4("2412") == pytest.approx((0.02, 0.4, 0.12))
    assert fp.parse_naca4("NACA 0012") == pytest.approx((0.0, 0.0, 0.12))


@pytest.mark.parametrize("code", ["24a2", "241", "24120", ""])
def test_parse_naca4_rejects_bad_codes(code):
    with pytest.raises(fp.GeometryError):
        fp.parse_naca4(code)


def test_loop_is_closed_selig_ordered(naca2412):
    n = naca2412.points_per_surface
    assert naca2412.n_points == 2*n - 1
    assert naca2412.n_panels == 2*n - 2

    # TE repeated at both ends
    assert naca2412.x[0] == naca2412.x[-1]
    assert naca2412.y[0] == naca2412.y[-1]
    assert naca2412.x[0] == pytest.approx(1.0)

    # LE in the middle of the loop
    assert naca2412.x[n-1] == pytest.approx(0.0, abs=1e-15)
    assert naca2412.y[n-1] == pytest.approx(0.0, abs=1e-15)

    # upper surface first, counter-clockwise
    assert np.all(naca2412.y[1:n-1] > naca2412.y[n:-1][::-1])


def test_generation_is_deterministic():
    a = fp.generate_geometry("4415", 120)
    b = fp.generate_geometry("4415", 120)
    assert np.array_equal(a.x, b.x)
    assert np.array_equal(a.y, b.y)


def test_tuple_and_code_inputs_agree():
    a = fp.generate_geometry("2412", 80)
    b = fp.generate_geometry((0.02, 0.4, 0.12), 80)
    assert np.array_equal(a.x, b.x) and np.array_equal(a.y, b.y)
    assert b.code == "2412"


def test_symmetric_section_is_mirror_image(naca0012):
    n = naca0012.points_per_surface
    upper = naca0012.y[:n][::-1]
    lower = naca0012.y[n-1:]
    assert np.allclose(upper, -lower, atol=1e-15)


def test_max_thickness_matches_designation(naca0012):
    n = naca0012.points_per_surface
    upper = naca0012.y[:n][::-1]
    lower = naca0012.y[n-1:]
    assert np.max(upper - lower) == pytest.approx(0.12, abs=2e-3)


def test_closed_trailing_edge_thickness_law():
    assert thickness_distribution(np.array([1.0]), 0.12)[0] == pytest.approx(0.0, abs=1e-12)


def test_camber_line_peaks_at_p():
    xc = np.linspace(0.0, 1.0, 1001)
    yc = camber_line(xc, 0.02, 0.4)
    assert xc[np.argmax(yc)] == pytest.approx(0.4, abs=1e-3)
    assert np.max(yc) == pytest.approx(0.02)
    assert np.all(camber_line(xc, 0.0, 0.0) == 0.0)


def test_cosine_spacing_clusters_at_both_edges():
    xc = cosine_spacing(101)
    dx = np.diff(xc)
    assert xc[0] == 0.0 and xc[-1] == pytest.approx(1.0)
    assert dx[0] < dx[50] and dx[-1] < dx[50]


def test_chord_scaling():
    geom = fp.generate_geometry("0012", 40, chord=2.0)
    assert np.max(geom.x) == pytest.approx(2.0)
    assert geom.chord == 2.0


def test_arrays_are_read_only(naca2412):
    with pytest.raises(ValueError):
        naca2412.x[0] = 0.5


@pytest.mark.parametrize("digits, points, chord", [
    ("2400", 80, 1.0),               # zero thickness
    ((0.0, 0.0, 1e-3), 80, 1.0),     # thinner than the panel system resolves
    ((0.0, 0.0, 1e-6), 80, 1.0),
    ("2012", 80, 1.0),               # camber without a camber position
    ((0.02, 1.0, 0.12), 80, 1.0),    # camber position at the TE
    ((0.0, 0.0, 0.55), 80, 1.0),     # too thick
    ((0.2, 0.4, 0.12), 80, 1.0),     # too much camber
    ("0012", 5, 1.0),                # too few points
    ("0012", 80, 0.0),               # no chord
])
def test_invalid_parameters_raise_geometry_error(digits, points, chord):
    with pytest.raises(fp.GeometryError):
        fp.generate_geometry(digits, points, chord)


def test_geometry_error_is_a_value_error():
    assert issubclass(fp.GeometryError, ValueError)


def test_self_intersection_is_detected():
    # bow-tie: first and third segments cross at (0.5, 0.5)
    x = np.array([0.0, 1.0, 1.0, 0.0, 0.0])
    y = np.array([0.0, 1.0, 0.0, 1.0, 0.0])

    crossings = find_self_intersections(x, y)
    assert [0, 2] in crossings.tolist()

    with pytest.raises(fp.GeometryError):
        check_panel_loop(x, y)


def test_generated_loops_do_not_self_intersect(naca2412):
    assert find_self_intersections(naca2412.x, naca2412.y).size == 0


def test_zero_length_panel_is_rejected():
    x = np.array([1.0, 0.0, 0.0, 0.5, 1.0])
    y = np.array([0.0, 0.1, 0.1, -0.1, 0.0])
    with pytest.raises(fp.GeometryError, match="Zero-length"):
        check_panel_loop(x, y)


if __name__ == "__main__":
    pytest.main()
