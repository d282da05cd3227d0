"""
METAR parser.

Turns a raw report such as

    KBFI 261853Z 18015G22KT 10SM FEW020 SCT035 BKN250 22/15 A2992 RMK AO2 SLP132

into a WeatherReport. Only the station and observation time are mandatory;
every other group is picked up if present and left at its zero value if not.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from metar_wallpaper.errors import MalformedReport
from metar_wallpaper.models.weather import CloudLayer, WeatherReport, Wind

WIND_RE = re.compile(r"(\d{3}|VRB)(\d{2,3})(G\d{2,3})?KT", re.ASCII)
VISIBILITY_RE = re.compile(r"(\d+)SM", re.ASCII)
CLOUD_RE = re.compile(r"(FEW|SCT|BKN|OVC)(\d{3})", re.ASCII)
TEMPERATURE_RE = re.compile(r"(\d{2})/(\d{2})", re.ASCII)
ALTIMETER_RE = re.compile(r"A(\d{4})", re.ASCII)


def _lenient_int(digits: str) -> int:
    # non-numeric groups count as 0 rather than rejecting the report
    return int(digits) if digits.isascii() and digits.isdigit() else 0


def _first_match(pattern, parts: List[str]):
    for part in parts:
        match = pattern.fullmatch(part)
        if match:
            return match
    return None


def parse_observation_time(group: str, now: Optional[datetime] = None) -> datetime:
    """
    Build a UTC timestamp from a DDHHMMZ group.

    The group carries no year or month, so those come from `now`. Values out
    of range roll over into the neighbouring day or month instead of failing.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    day = _lenient_int(group[0:2])
    hour = _lenient_int(group[2:4])
    minute = _lenient_int(group[4:6])
    month_start = datetime(now.year, now.month, 1, tzinfo=timezone.utc)
    return month_start + timedelta(days=day - 1, hours=hour, minutes=minute)


def parse_wind(group: str) -> Wind:
    match = WIND_RE.fullmatch(group)
    if not match:
        return Wind()
    direction, speed, gust = match.groups()
    return Wind(
        direction=0 if direction == "VRB" else int(direction),
        speed=int(speed),
        gust=int(gust[1:]) if gust else 0,
    )


def parse_metar(report: str, now: Optional[datetime] = None) -> WeatherReport:
    """
    Parse a raw METAR string.

    Raises MalformedReport when there are fewer than two tokens or the
    observation time group is shorter than six characters. Nothing else
    is an error.
    """
    parts = report.split()

    if len(parts) < 2:
        raise MalformedReport(f"METAR data is incomplete or malformed: {report!r}", report)
    if len(parts[1]) < 6:
        raise MalformedReport(f"Invalid observation time format in METAR: {report!r}", report)

    wind = parse_wind(parts[2]) if len(parts) > 2 else Wind()

    # visibility normally follows the wind group
    visibility = ""
    match = _first_match(VISIBILITY_RE, parts[3:])
    if match:
        visibility = match.group(1) + "SM"

    cloud_layers = []
    for part in parts:
        match = CLOUD_RE.fullmatch(part)
        if match:
            cloud_layers.append(CloudLayer(coverage=match.group(1), height=int(match.group(2)) * 100))

    temperature = dew_point = 0.0
    match = _first_match(TEMPERATURE_RE, parts)
    if match:
        temperature, dew_point = float(match.group(1)), float(match.group(2))

    altimeter = 0.0
    match = _first_match(ALTIMETER_RE, parts)
    if match:
        altimeter = int(match.group(1)) / 100.0

    remarks = ""
    if "RMK" in parts:
        remarks = " ".join(parts[parts.index("RMK"):])

    return WeatherReport(
        station_id=parts[0],
        observation_time=parse_observation_time(parts[1], now),
        wind=wind,
        visibility=visibility,
        cloud_layers=cloud_layers,
        temperature=temperature,
        dew_point=dew_point,
        altimeter=altimeter,
        remarks=remarks,
        raw_text=report.strip(),
    )
