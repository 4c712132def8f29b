# FILE : foilpanel/utils/errors.py


class FoilPanelError(Exception):
    """Base class for all solver errors."""


class GeometryError(FoilPanelError, ValueError):
    """Section parameters or point counts that cannot produce a valid panel loop."""


class SingularSystem(FoilPanelError, RuntimeError):
    """The assembled influence matrix cannot be factored or solved reliably."""


class BoundaryLayerDivergence(FoilPanelError, ArithmeticError):
    """
    Raised inside the boundary-layer march when a station produces a
    non-finite or non-positive state.

    `station` is the index (in marching order) of the failing station and
    `states` holds every state accepted before it.
    """
    def __init__(self, message: str, station: int = -1, states=()):
        super().__init__(message)
        self.station = station
        self.states  = list(states)
