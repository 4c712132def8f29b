import matplotlib
matplotlib.use("Agg")

import pytest

import foilpanel as fp


@pytest.fixture(scope="session")
def naca2412():
    return fp.generate_geometry("2412", 160)


@pytest.fixture(scope="session")
def naca0012():
    return fp.generate_geometry("0012", 160)


@pytest.fixture(scope="session")
def panels_2412(naca2412):
    return fp.build_panel_system(naca2412)


@pytest.fixture(scope="session")
def panels_0012(naca0012):
    return fp.build_panel_system(naca0012)


@pytest.fixture(scope="session")
def solver_2412(panels_2412):
    return fp.PanelSolver(panels_2412)


@pytest.fixture(scope="session")
def solver_0012(panels_0012):
    return fp.PanelSolver(panels_0012)
