import logging
import os
import threading
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from metar_wallpaper import __version__
from metar_wallpaper.config import Settings
from metar_wallpaper.errors import FetchError, MalformedReport
from metar_wallpaper.models.response import CycleResult, HealthResponse, ParseRequest
from metar_wallpaper.models.weather import WeatherReport
from metar_wallpaper.services.metar import parse_metar
from metar_wallpaper.services.weather import fetch_metar

logger = logging.getLogger(__name__)

SERVICE_NAME = "METAR Wallpaper"

class LatestResult:
    """Most recent successful cycle, shared between the scheduler thread and requests."""

    def __init__(self):
        self._lock = threading.Lock()
        self._result: Optional[CycleResult] = None

    def set(self, result: CycleResult) -> None:
        with self._lock:
            self._result = result

    def get(self) -> Optional[CycleResult]:
        with self._lock:
            return self._result

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_latest(request: Request) -> LatestResult:
    return request.app.state.latest

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(
        title=SERVICE_NAME,
        description="Status and parsing API for the METAR desktop wallpaper",
        version=__version__,
    )
    app.state.settings = settings
    app.state.latest = LatestResult()

    # Get allowed origins from environment
    allowed_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173").split(",")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_methods=["GET", "POST", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.get("/")
    @app.head("/")
    def health(settings: Settings = Depends(get_settings)):
        """Health check endpoint"""
        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "version": __version__,
            "airport": settings.airport,
        }

    @app.get("/health", response_model=HealthResponse)
    def detailed_health(settings: Settings = Depends(get_settings)):
        """Detailed health check for monitoring"""
        return HealthResponse(
            status="healthy",
            service=SERVICE_NAME,
            version=__version__,
            airport=settings.airport,
            services={
                "metar_api": settings.metar_api_url,
                "background": "configured" if settings.background_image else "missing",
                "output": "configured" if settings.output_image else "missing",
                "apply_wallpaper": "enabled" if settings.apply_wallpaper else "disabled",
            },
        )

    @app.post("/parse", response_model=WeatherReport)
    def parse(req: ParseRequest):
        try:
            return parse_metar(req.raw)
        except MalformedReport as e:
            raise HTTPException(status_code=422, detail=str(e))

    @app.get("/metar/{station}", response_model=WeatherReport)
    def metar(station: str, settings: Settings = Depends(get_settings)):
        station = station.strip().upper()
        try:
            raw = fetch_metar(station, settings)
            return parse_metar(raw)
        except FetchError as e:
            logger.error(f"❌ Weather error for {station}: {e}")
            raise HTTPException(status_code=502, detail=str(e))
        except MalformedReport as e:
            raise HTTPException(status_code=422, detail=str(e))

    @app.get("/latest", response_model=CycleResult)
    def latest(latest: LatestResult = Depends(get_latest)):
        result = latest.get()
        if result is None:
            raise HTTPException(status_code=404, detail="No wallpaper update has completed yet")
        return result

    return app
