from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional

from PySide6 import QtCore

logger = logging.getLogger(__name__)

APP_NAME = "RecorderConverter"


def debug_enabled() -> bool:
    return os.environ.get("DEBUG") is not None


def app_data_dir(app_name: str = APP_NAME) -> Path:
    base = QtCore.QStandardPaths.writableLocation(QtCore.QStandardPaths.AppLocalDataLocation)
    return Path(base) / app_name


@dataclass
class AppSettings:
    """Serializable application settings."""

    window_x: int = 200
    window_y: int = 200
    ffmpeg_path: str = ""  # optional explicit path to ffmpeg executable


class SettingsStore:
    """Stores settings in the platform's app data location as JSON."""

    def __init__(self, app_name: str = APP_NAME, directory: Optional[Path] = None) -> None:
        self._dir = directory if directory is not None else app_data_dir(app_name)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._file = self._dir / "settings.json"

    @property
    def path(self) -> Path:
        return self._file

    def load(self) -> AppSettings:
        if self._file.exists():
            try:
                data = json.loads(self._file.read_text(encoding="utf-8"))
                known = {f.name for f in fields(AppSettings)}
                return AppSettings(**{k: v for k, v in data.items() if k in known})
            except (OSError, ValueError, TypeError, AttributeError) as e:
                logger.warning(f"ignoring unreadable settings file {self._file}: {e}")
        return AppSettings()

    def save(self, settings: AppSettings) -> None:
        payload = asdict(settings)
        self._file.write_text(json.dumps(payload, indent=2), encoding="utf-8")
