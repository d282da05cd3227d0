from datetime import datetime
from pydantic import BaseModel, Field
from typing import List

class Wind(BaseModel):
    direction: int = 0  # degrees, 0 when variable (VRB)
    speed: int = 0
    gust: int = 0

class CloudLayer(BaseModel):
    coverage: str  # FEW, SCT, BKN or OVC
    height: int  # feet

class WeatherReport(BaseModel):
    station_id: str
    observation_time: datetime
    wind: Wind = Field(default_factory=Wind)
    visibility: str = ""
    cloud_layers: List[CloudLayer] = Field(default_factory=list)
    temperature: float = 0
    dew_point: float = 0
    altimeter: float = 0  # inHg
    remarks: str = ""
    raw_text: str = ""
