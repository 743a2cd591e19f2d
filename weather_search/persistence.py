"""Key-value persistence for remembering the last searched city."""

import json
from pathlib import Path
from typing import Protocol

from weather_search.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

LAST_SEARCHED_CITY_KEY = "LastSearchedCity"


class KeyValueStore(Protocol):
    """Synchronous string store."""

    def get_string(self, key: str) -> str | None: ...

    def set_string(self, key: str, value: str) -> None: ...


class InMemoryStore:
    """Process-local store, lost on restart."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})

    def get_string(self, key: str) -> str | None:
        return self._values.get(key)

    def set_string(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFileStore:
    """Store backed by a JSON object on disk.

    The whole file is rewritten on every set. A missing file reads as empty;
    so does a corrupt one, after logging.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, str]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            # ValueError covers undecodable bytes and invalid JSON
            log_with_context(
                logger,
                "error",
                "Unreadable preferences file, ignoring it",
                file_path=str(self._path),
                error=str(e),
                error_type=type(e).__name__,
                event_type="store_invalid",
            )
            return {}

        if not isinstance(data, dict):
            log_with_context(
                logger,
                "error",
                "Preferences file must contain a JSON object, ignoring it",
                file_path=str(self._path),
                event_type="store_invalid",
            )
            return {}

        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get_string(self, key: str) -> str | None:
        return self._read().get(key)

    def set_string(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        log_with_context(
            logger,
            "info",
            "Saved preference",
            key=key,
            file_path=str(self._path),
            event_type="store_saved",
        )
