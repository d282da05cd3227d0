from datetime import datetime
from pydantic import BaseModel
from typing import Dict, Optional
from .weather import WeatherReport

class ParseRequest(BaseModel):
    raw: str  # e.g. "KBFI 261853Z 18015G22KT 10SM FEW020 22/15 A2992"

class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    airport: str
    services: Optional[Dict[str, str]] = None

class CycleResult(BaseModel):
    station: str
    report: WeatherReport
    image_path: str
    applied: bool
    completed_at: datetime
