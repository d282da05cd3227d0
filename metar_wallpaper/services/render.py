import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from metar_wallpaper.config import Settings
from metar_wallpaper.errors import RenderError
from metar_wallpaper.models.weather import WeatherReport

logger = logging.getLogger(__name__)

LEFT_MARGIN = 100
# the whole text block sits this far below its original anchor
OFFSET_Y = 200

ACCENT = (192, 168, 143)
WHITE = (255, 255, 255)
SOFT_WHITE = (225, 225, 225)

def time_of_day_greeting(hour: int) -> str:
    if 5 <= hour < 12:
        return "MORNING"
    if 12 <= hour < 17:
        return "AFTERNOON"
    if 17 <= hour < 21:
        return "EVENING"
    return "NIGHT"

def weather_line(report: WeatherReport) -> str:
    return (
        f"Temperature: {report.temperature:.1f}°C, "
        f"Visibility: {report.visibility or 'N/A'}, "
        f"Wind: {report.wind.speed}KT"
    )

def updated_line(now: datetime) -> str:
    local = now.astimezone()
    zulu = now.astimezone(timezone.utc)
    return f"Updated: {local:%H:%M} Local / {zulu:%H:%M} Zulu"

def load_font(path: Optional[Path], size: int):
    """Load a TrueType font, or Pillow's bundled default when no path is set."""
    if path is None:
        return ImageFont.load_default(size=size)
    try:
        return ImageFont.truetype(str(path), size)
    except OSError as e:
        raise RenderError(f"Failed to load font {path}: {e}") from e

def create_wallpaper(report: WeatherReport, settings: Settings, now: Optional[datetime] = None) -> Path:
    """Draw the greeting and weather block onto the background image and save it as PNG."""
    settings.require_paths()
    now = (now or datetime.now(timezone.utc)).astimezone()

    try:
        background = Image.open(settings.background_image)
        background.load()
    except (OSError, ValueError) as e:
        raise RenderError(f"Failed to load background image {settings.background_image}: {e}") from e

    regular = load_font(settings.regular_font, 25)
    bold = load_font(settings.bold_font, 40)
    light = load_font(settings.light_font, 20)

    im = background.convert("RGB")
    draw = ImageDraw.Draw(im)

    draw.text((LEFT_MARGIN, 775 + OFFSET_Y), f"It's {now:%A}", font=regular, fill=ACCENT, anchor="ls")

    draw.text((LEFT_MARGIN, 800 + OFFSET_Y), f"HOPE YOUR {time_of_day_greeting(now.hour)}", font=bold, fill=WHITE, anchor="lm")
    if settings.user_name:
        draw.text((LEFT_MARGIN, 850 + OFFSET_Y), "IS GOING WELL,", font=bold, fill=WHITE, anchor="lm")
        draw.text((LEFT_MARGIN, 900 + OFFSET_Y), settings.user_name.upper(), font=bold, fill=WHITE, anchor="lm")
    else:
        draw.text((LEFT_MARGIN, 850 + OFFSET_Y), "IS GOING WELL", font=bold, fill=WHITE, anchor="lm")

    draw.text((LEFT_MARGIN, 950 + OFFSET_Y), weather_line(report), font=light, fill=SOFT_WHITE, anchor="lm")
    draw.text((LEFT_MARGIN, 975 + OFFSET_Y), updated_line(now), font=light, fill=SOFT_WHITE, anchor="lm")

    output = Path(settings.output_image)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        im.save(output, format="PNG")
    except OSError as e:
        raise RenderError(f"Failed to save wallpaper to {output}: {e}") from e

    logger.info(f"🖼 Wallpaper written to {output}")
    return output
