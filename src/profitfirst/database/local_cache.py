"""On-disk key-value cache holding the offline working set.

The file is a single JSON object. Two keys matter to the application::

    "profit-first-store"     {"state": <payload>}
    "profit-first-migrated"  "true" once local data reached the remote store
"""

import os
from pathlib import Path
from typing import Any, Optional

import structlog

from profitfirst.domain.entities import AppState
from profitfirst.domain.errors import StoreError, ValidationError, store_failure
from profitfirst.domain.payload import dump_payload, load_payload, state_from_payload, state_to_payload
from profitfirst.domain.validator import build_report

logger = structlog.get_logger(__name__)


class LocalCache:
    """JSON file key-value store namespaced like the browser storage it mirrors."""

    def __init__(self, path: str | Path, namespace: str = "profit-first"):
        self.path = Path(path)
        self.namespace = namespace

    @property
    def store_key(self) -> str:
        return f"{self.namespace}-store"

    @property
    def migrated_key(self) -> str:
        return f"{self.namespace}-migrated"

    def _read_all(self) -> dict[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StoreError(store_failure("read local cache", e)) from e
        if not text.strip():
            return {}
        try:
            data = load_payload(text)
        except ValidationError as e:
            logger.warning("cache.unreadable", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            logger.warning("cache.unreadable", path=str(self.path), error="not an object")
            return {}
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(dump_payload(data), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StoreError(store_failure("write local cache", e)) from e

    def get(self, key: str) -> Optional[Any]:
        return self._read_all().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def load_state(self) -> AppState:
        """Return the cached working set, or an empty state.

        A snapshot that no longer validates is ignored with a warning.
        """
        entry = self.get(self.store_key)
        if not isinstance(entry, dict) or not isinstance(entry.get("state"), dict):
            return AppState()
        payload = entry["state"]
        report = build_report(payload)
        if not report.is_valid:
            logger.warning(
                "cache.invalid_state",
                path=str(self.path),
                errors=[str(f) for f in report.errors],
            )
            return AppState()
        try:
            return state_from_payload(payload)
        except ValidationError as e:
            logger.warning("cache.invalid_state", path=str(self.path), errors=[str(e)])
            return AppState()

    def save_state(self, state: AppState) -> None:
        self.set(self.store_key, {"state": state_to_payload(state)})

    def is_migrated(self) -> bool:
        return self.get(self.migrated_key) == "true"

    def mark_migrated(self) -> None:
        self.set(self.migrated_key, "true")
