"""Exception hierarchy shared by the SafeRoute services and collaborators."""


class SafeRouteError(Exception):
    """Base class for all SafeRoute errors."""


class DataSourceError(SafeRouteError):
    """An upstream data source (WFS, boundary file, weather) could not be read."""


class RoutingError(SafeRouteError):
    """The routing oracle failed to produce a usable answer for one request."""


class OutsideBoundaryError(SafeRouteError):
    """A requested origin lies outside the loaded administrative boundary."""

    def __init__(self, lat: float, lng: float):
        super().__init__(f"Point ({lat:.5f}, {lng:.5f}) is outside the boundary")
        self.lat = lat
        self.lng = lng


__all__ = ["SafeRouteError", "DataSourceError",
           "RoutingError", "OutsideBoundaryError"]
