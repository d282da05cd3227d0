import logging
from datetime import datetime, timezone
from typing import Optional

import requests

from metar_wallpaper.config import Settings
from metar_wallpaper.models.response import CycleResult
from metar_wallpaper.services.metar import parse_metar
from metar_wallpaper.services.render import create_wallpaper
from metar_wallpaper.services.wallpaper import set_wallpaper
from metar_wallpaper.services.weather import fetch_metar

logger = logging.getLogger(__name__)

def run_cycle(settings: Settings, session: Optional[requests.Session] = None, now: Optional[datetime] = None) -> CycleResult:
    """Fetch, parse, render and apply once.

    Each step raises its own PipelineError subclass; nothing is caught here so
    the caller decides whether to skip this cycle.
    """
    now = now or datetime.now(timezone.utc)

    logger.info(f"📡 Updating wallpaper for {settings.airport}")
    raw = fetch_metar(settings.airport, settings, session=session)
    report = parse_metar(raw, now=now)
    logger.info(
        f"🌤 {report.station_id}: wind {report.wind.direction:03d}/{report.wind.speed}KT, "
        f"vis {report.visibility or 'N/A'}, {len(report.cloud_layers)} cloud layer(s), "
        f"temp {report.temperature:g}, altimeter {report.altimeter:.2f}"
    )

    image_path = create_wallpaper(report, settings, now=now)

    applied = False
    if settings.apply_wallpaper:
        set_wallpaper(image_path)
        applied = True

    logger.info("✅ Wallpaper cycle complete")
    return CycleResult(
        station=settings.airport,
        report=report,
        image_path=str(image_path),
        applied=applied,
        completed_at=datetime.now(timezone.utc),
    )
