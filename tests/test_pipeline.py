from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from PIL import Image

from metar_wallpaper.config import Settings
from metar_wallpaper.errors import FetchError, MalformedReport
from metar_wallpaper.services.pipeline import run_cycle

NOW = datetime(2026, 10, 18, 19, 0, tzinfo=timezone.utc)
RAW = "KBFI 181853Z 18015G22KT 10SM FEW020 SCT035 22/15 A2992 RMK AO2"


class MockResponse:

    def __init__(self, text="", status_code=200):
        self.text = text
        self.status_code = status_code


def make_session(text, status_code=200):
    session = MagicMock()
    session.get.return_value = MockResponse(text, status_code)
    return session


@pytest.fixture
def settings(tmp_path):
    background = tmp_path / "background.png"
    Image.new("RGB", (1400, 1300)).save(background)
    return Settings(
        background_image=background,
        output_image=tmp_path / "wallpaper.png",
        bold_font=None,
        regular_font=None,
        light_font=None,
        apply_wallpaper=False,
    )


def test_cycle_without_applying(settings, monkeypatch):
    applied = MagicMock()
    monkeypatch.setattr("metar_wallpaper.services.pipeline.set_wallpaper", applied)

    result = run_cycle(settings, session=make_session(RAW), now=NOW)

    assert result.station == "KBFI"
    assert result.report.wind.gust == 22
    assert result.report.observation_time == datetime(2026, 10, 18, 18, 53, tzinfo=timezone.utc)
    assert result.applied is False
    assert settings.output_image.exists()
    applied.assert_not_called()


def test_cycle_applies_wallpaper(settings, monkeypatch):
    applied = MagicMock()
    monkeypatch.setattr("metar_wallpaper.services.pipeline.set_wallpaper", applied)
    settings.apply_wallpaper = True

    result = run_cycle(settings, session=make_session(RAW), now=NOW)

    assert result.applied is True
    applied.assert_called_once_with(settings.output_image)


def test_fetch_failure_propagates(settings):
    with pytest.raises(FetchError):
        run_cycle(settings, session=make_session("oops", 500), now=NOW)
    assert not settings.output_image.exists()


def test_malformed_report_propagates(settings):
    with pytest.raises(MalformedReport):
        run_cycle(settings, session=make_session("KBFI"), now=NOW)
    assert not settings.output_image.exists()
