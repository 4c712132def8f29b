"""
foilpanel: source-vortex panel analysis of NACA 4-digit sections.

    import foilpanel as fp

    geom   = fp.generate_geometry("2412", 160)
    panels = fp.build_panel_system(geom)
    result = fp.solve(panels, fp.FlowConditions.from_degrees(4.0))
    polar  = fp.sweep_polar(geom, fp.FlowConditions(reynolds=1e6), -4, 10, 1)
"""

__version__ = "0.1.0"

from .utils import *  # noqa: F401,F403
from .utils import __all__
