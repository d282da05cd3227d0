"""
Exceptions raised by the wallpaper pipeline.

Everything a single update cycle can fail with derives from PipelineError,
so the scheduler can skip the cycle and try again at the next interval.
ConfigError is the only one that should stop the program.
"""


class WallpaperAppError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(WallpaperAppError):
    """Settings are missing or invalid."""


class PipelineError(WallpaperAppError):
    """One fetch / parse / render / apply cycle failed."""


class MalformedReport(PipelineError, ValueError):
    """The METAR has too few tokens or an unusable observation time."""

    def __init__(self, message, report=""):
        super().__init__(message)
        self.report = report


class FetchError(PipelineError):
    """The report could not be downloaded."""

    def __init__(self, message, station=None, status_code=None):
        super().__init__(message)
        self.station = station
        self.status_code = status_code


class RenderError(PipelineError):
    """The wallpaper image could not be drawn or saved."""


class WallpaperError(PipelineError):
    """The desktop background could not be changed."""
