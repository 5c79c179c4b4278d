"""JSON-file store for bookmarks and search history.

Every read-modify-write goes through one lock per store so concurrent
requests in the same process cannot interleave their writes.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from mentor_finder.config import get_settings
from mentor_finder.contracts.mentor_search import MentorFilter, Profile

logger = logging.getLogger(__name__)


def _empty_state() -> dict[str, list[Any]]:
    return {"bookmarks": [], "search_history": []}


class LocalStore:
    def __init__(self, path: Path, *, history_limit: int = 20) -> None:
        self.path = path
        self.history_limit = history_limit
        self._lock = threading.Lock()

    def _read(self) -> dict[str, list[Any]]:
        if not self.path.exists():
            return _empty_state()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("Local store unreadable, starting fresh", extra={"path": str(self.path)})
            return _empty_state()
        if not isinstance(data, dict):
            return _empty_state()
        state = _empty_state()
        for key in state:
            if isinstance(data.get(key), list):
                state[key] = data[key]
        return state

    def _write(self, state: dict[str, list[Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(state, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    def bookmarks(self) -> list[Profile]:
        with self._lock:
            raw_items = self._read()["bookmarks"]
        profiles: list[Profile] = []
        for item in raw_items:
            try:
                profiles.append(Profile.model_validate(item))
            except ValidationError:
                logger.warning("Skipping malformed bookmark", extra={"path": str(self.path)})
        return profiles

    def add_bookmark(self, profile: Profile) -> bool:
        """Save a profile verbatim. Returns False when it was already saved."""
        with self._lock:
            state = self._read()
            if any(isinstance(item, dict) and item.get("id") == profile.id for item in state["bookmarks"]):
                return False
            state["bookmarks"].append(profile.to_wire())
            self._write(state)
        return True

    def remove_bookmark(self, profile_id: str) -> bool:
        with self._lock:
            state = self._read()
            kept = [item for item in state["bookmarks"] if not (isinstance(item, dict) and item.get("id") == profile_id)]
            if len(kept) == len(state["bookmarks"]):
                return False
            state["bookmarks"] = kept
            self._write(state)
        return True

    def search_history(self) -> list[dict[str, Any]]:
        with self._lock:
            return list(self._read()["search_history"])

    def record_search(self, mentor_filter: MentorFilter) -> None:
        entry = {
            "filter": mentor_filter.supplied(),
            "searched_at": datetime.now(timezone.utc).isoformat(),
        }
        with self._lock:
            state = self._read()
            state["search_history"] = [entry, *state["search_history"]][: self.history_limit]
            self._write(state)


@lru_cache
def get_local_store() -> LocalStore:
    settings = get_settings()
    return LocalStore(Path(settings.local_store_path), history_limit=settings.search_history_limit)
