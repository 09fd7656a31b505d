from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

SETTINGS_VERSION = 1
LOG_LEVEL_ENV = "IMAGESHOP_LOG_LEVEL"


@dataclass
class EditorSettings:
    # Where file dialogs start
    image_dir: str = ""

    # Saving / batch export
    default_save_ext: str = ".png"
    batch_suffix: str = "_edited"

    # Window
    window_w: int = 950
    window_h: int = 600

    log_level: str = "INFO"

    def effective_log_level(self) -> str:
        return (os.environ.get(LOG_LEVEL_ENV) or self.log_level or "INFO").upper()


def default_settings_path() -> Path:
    return Path.home() / ".imageshop" / "settings.json"


def _normalize_ext(ext: str) -> str:
    ext = ext.strip().lower() or ".png"
    return ext if ext.startswith(".") else f".{ext}"


def settings_from_raw(raw: dict) -> EditorSettings:
    return EditorSettings(
        image_dir=str(raw.get("image_dir", "")),
        default_save_ext=_normalize_ext(str(raw.get("default_save_ext", ".png"))),
        batch_suffix=str(raw.get("batch_suffix", "_edited")),
        window_w=max(200, int(raw.get("window_w", 950))),
        window_h=max(200, int(raw.get("window_h", 600))),
        log_level=str(raw.get("log_level", "INFO")).upper(),
    )


def load_settings(path: Optional[str] = None) -> EditorSettings:
    settings_file = Path(path) if path else default_settings_path()
    if not settings_file.exists():
        return EditorSettings()
    try:
        raw = json.loads(settings_file.read_text(encoding="utf-8"))
        state_raw = raw.get("settings", {})
        if not isinstance(state_raw, dict):
            raise ValueError("'settings' must be an object")
        return settings_from_raw(state_raw)
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", settings_file, e)
        return EditorSettings()


def save_settings(settings: EditorSettings, path: Optional[str] = None) -> None:
    settings_file = Path(path) if path else default_settings_path()
    settings_file.parent.mkdir(parents=True, exist_ok=True)
    payload = {"version": SETTINGS_VERSION, "settings": asdict(settings)}
    settings_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")
