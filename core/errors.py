"""Exception types raised by the sun-exposure core and its service clients."""


class SunRouteError(ValueError):
    """Base class for every error raised by the core."""


class InvalidRouteError(SunRouteError):
    """Route has fewer than two points or contains an unusable coordinate."""


class InvalidTimeError(SunRouteError):
    """Start instant cannot be parsed or represented."""


class InvalidSpeedError(SunRouteError):
    """Assumed travel speed is not a positive, finite number."""


class RoutingError(SunRouteError):
    """The routing service answered but produced no usable route."""


class GeocodingError(SunRouteError):
    """A free-text location could not be resolved to coordinates."""
