import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from metar_wallpaper.errors import ConfigError

DEFAULT_AIRPORT = "KBFI"
DEFAULT_METAR_API_URL = "https://aviationweather.gov/api/data/metar"

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Runtime settings, built once at startup and handed to every service."""

    airport: str = DEFAULT_AIRPORT
    background_image: Optional[Path] = None
    output_image: Optional[Path] = None
    user_name: str = ""
    bold_font: Optional[Path] = Path("assets/bold.ttf")
    regular_font: Optional[Path] = Path("assets/regular.ttf")
    light_font: Optional[Path] = Path("assets/light.ttf")
    metar_api_url: str = DEFAULT_METAR_API_URL
    request_timeout: float = 10.0
    interval_minutes: int = 15
    apply_wallpaper: bool = True

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **overrides) -> "Settings":
        """Read settings from the environment (and .env), letting explicit
        keyword overrides win. Overrides set to None are ignored so unset
        CLI flags fall through to the environment."""
        load_dotenv(env_file)

        values = {
            "airport": os.getenv("METAR_AIRPORT", DEFAULT_AIRPORT),
            "background_image": os.getenv("WALLPAPER_BACKGROUND") or None,
            "output_image": os.getenv("WALLPAPER_OUTPUT") or None,
            "user_name": os.getenv("WALLPAPER_NAME", ""),
            "bold_font": os.getenv("WALLPAPER_BOLD_FONT", "assets/bold.ttf") or None,
            "regular_font": os.getenv("WALLPAPER_REGULAR_FONT", "assets/regular.ttf") or None,
            "light_font": os.getenv("WALLPAPER_LIGHT_FONT", "assets/light.ttf") or None,
            "metar_api_url": os.getenv("METAR_API_URL", DEFAULT_METAR_API_URL),
            "request_timeout": os.getenv("METAR_REQUEST_TIMEOUT", "10"),
            "interval_minutes": os.getenv("WALLPAPER_INTERVAL_MINUTES", "15"),
            "apply_wallpaper": os.getenv("WALLPAPER_APPLY", "true").strip().lower() in _TRUTHY,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            settings = cls(**values)
        except ValueError as e:
            raise ConfigError(f"Invalid settings: {e}") from e

        if settings.interval_minutes <= 0:
            raise ConfigError("interval_minutes must be positive")
        settings.airport = settings.airport.strip().upper()
        return settings

    def require_paths(self) -> None:
        if self.background_image is None or self.output_image is None:
            raise ConfigError(
                "Both background and output image paths must be provided "
                "(--background/--output or WALLPAPER_BACKGROUND/WALLPAPER_OUTPUT)."
            )
