"""Desktop wallpaper annotated with the latest METAR for a home airport."""

__version__ = "1.0.0"
