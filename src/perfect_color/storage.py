from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .color_space import Color

log = logging.getLogger(__name__)

LAST_COLOR_KEY = "lastColor"


class LastColorStore:
    """
    Single-slot key-value file holding the last finished color as '#rrggbb'.
    Storage problems are logged and never reach the session.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError):
            log.warning("could not read %s; starting empty", self.path, exc_info=True)
            return {}
        return data if isinstance(data, dict) else {}

    def save(self, color: Color) -> bool:
        data = self._read()
        data[LAST_COLOR_KEY] = color.hex
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError:
            log.exception("could not persist last color to %s", self.path)
            return False
        log.info("saved %s=%s to %s", LAST_COLOR_KEY, color.hex, self.path)
        return True

    def load(self) -> Optional[Color]:
        raw = self._read().get(LAST_COLOR_KEY)
        if not isinstance(raw, str):
            return None
        try:
            return Color.from_hex(raw)
        except ValueError:
            log.warning("ignoring malformed %s value %r", LAST_COLOR_KEY, raw)
            return None


__all__ = ["LAST_COLOR_KEY", "LastColorStore"]
