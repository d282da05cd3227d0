import logging
import requests
from typing import Optional

from metar_wallpaper.config import Settings
from metar_wallpaper.errors import FetchError

logger = logging.getLogger(__name__)

def fetch_metar(station: str, settings: Settings, session: Optional[requests.Session] = None) -> str:
    """Download the latest raw METAR for `station` from aviationweather.gov.

    The endpoint answers in plain text, one report per line; only the first
    report is returned.
    """
    http = session or requests
    url = settings.metar_api_url
    logger.info(f"🌐 Fetching METAR for {station}: {url}")

    try:
        r = http.get(url, params={"ids": station}, timeout=settings.request_timeout)
    except requests.RequestException as e:
        raise FetchError(f"Failed to fetch METAR data for {station}: {e}", station=station) from e

    logger.debug(f"📊 METAR Response Status: {r.status_code}")

    if r.status_code != 200:
        raise FetchError(
            f"aviationweather.gov error {r.status_code} for {station}: {r.text}",
            station=station,
            status_code=r.status_code,
        )

    for line in r.text.splitlines():
        if line.strip():
            logger.debug(f"📄 METAR Data: {line.strip()}")
            return line.strip()

    raise FetchError(f"No METAR available for {station}", station=station, status_code=r.status_code)
