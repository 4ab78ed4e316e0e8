"""Exceptions raised by the globe engine and its collaborators."""


class GlobeError(Exception):
    """Base class for globe errors."""


class SurfaceUnavailableError(GlobeError):
    """The 3D surface could not be created; the engine falls back to 2D."""


class AssetLoadError(GlobeError):
    """A texture could not be read or decoded."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class GeometryFetchError(GlobeError):
    """Landmass polygons could not be fetched or parsed."""


class ConfigError(GlobeError, ValueError):
    """Invalid engine settings or body configuration."""
