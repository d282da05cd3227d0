import pytest

ENV_VARS = [
    "METAR_AIRPORT",
    "WALLPAPER_BACKGROUND",
    "WALLPAPER_OUTPUT",
    "WALLPAPER_NAME",
    "WALLPAPER_BOLD_FONT",
    "WALLPAPER_REGULAR_FONT",
    "WALLPAPER_LIGHT_FONT",
    "METAR_API_URL",
    "METAR_REQUEST_TIMEOUT",
    "WALLPAPER_INTERVAL_MINUTES",
    "WALLPAPER_APPLY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in ENV_VARS:
        # setenv first so teardown also removes anything load_dotenv adds
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    # keep any .env in the working tree out of the picture
    monkeypatch.chdir(tmp_path)
