"""
Set the desktop background on macOS, Windows and GNOME-style Linux desktops.

Every backend stretches the image to fill the screen, cropping the overflow.
"""

import logging
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from metar_wallpaper.errors import WallpaperError

logger = logging.getLogger(__name__)

SPI_SETDESKWALLPAPER = 0x0014
SPIF_UPDATEINIFILE = 0x01
SPIF_SENDCHANGE = 0x02


def _run(cmd: List[str]) -> None:
    try:
        subprocess.run(cmd, check=True, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise WallpaperError(f"Command not found: {cmd[0]}") from e
    except subprocess.CalledProcessError as e:
        raise WallpaperError(f"{cmd[0]} failed with exit code {e.returncode}: {e.stderr.strip()}") from e


def _set_macos(path: Path) -> None:
    script = f'tell application "System Events" to tell every desktop to set picture to "{path}"'
    _run(["osascript", "-e", script])


def _set_gnome(path: Path) -> None:
    uri = path.as_uri()
    schema = "org.gnome.desktop.background"
    _run(["gsettings", "set", schema, "picture-uri", uri])
    # newer GNOME releases read a separate key in dark mode; older ones reject it
    try:
        _run(["gsettings", "set", schema, "picture-uri-dark", uri])
    except WallpaperError:
        logger.debug("picture-uri-dark not supported, skipping")
    _run(["gsettings", "set", schema, "picture-options", "zoom"])


def _set_windows(path: Path) -> None:
    import ctypes
    import winreg

    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, r"Control Panel\Desktop", 0, winreg.KEY_SET_VALUE) as key:
            # "10" is Fill: scale to cover, cropping what does not fit
            winreg.SetValueEx(key, "WallpaperStyle", 0, winreg.REG_SZ, "10")
            winreg.SetValueEx(key, "TileWallpaper", 0, winreg.REG_SZ, "0")
    except OSError as e:
        raise WallpaperError(f"Failed to set wallpaper style: {e}") from e

    ok = ctypes.windll.user32.SystemParametersInfoW(
        SPI_SETDESKWALLPAPER, 0, str(path), SPIF_UPDATEINIFILE | SPIF_SENDCHANGE
    )
    if not ok:
        raise WallpaperError("SystemParametersInfoW refused the wallpaper")


def set_wallpaper(path, platform: Optional[str] = None) -> None:
    """Apply the image at `path` as the desktop background."""
    path = Path(path).resolve()
    if not path.is_file():
        raise WallpaperError(f"Wallpaper image does not exist: {path}")

    platform = platform or sys.platform
    logger.info(f"🖥 Setting wallpaper ({platform}): {path}")

    if platform == "darwin":
        _set_macos(path)
    elif platform.startswith("win"):
        _set_windows(path)
    elif platform.startswith("linux") or "bsd" in platform:
        _set_gnome(path)
    else:
        raise WallpaperError(f"Unsupported platform: {platform}")
