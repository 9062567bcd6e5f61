"""
Key-value persistence for LifeTunes aggregates.

This module provides:
- A string-keyed store interface with in-memory and JSON-file backends
- AppRepository: typed load/save for each persisted aggregate

Decode failures never propagate: a missing or malformed blob is logged and
replaced by the aggregate's default value.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, TypeVar

from lifetunes.core.models import Challenge, MoodRecord, Playlist, User

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ============================================================================
# CONSTANTS
# ============================================================================

KEY_USER = "LifeTunesUser"
KEY_ONBOARDING_COMPLETED = "LifeTunesOnboardingCompleted"
KEY_PLAYLISTS = "LifeTunesPlaylists"
KEY_DAILY_CHALLENGES = "LifeTunesDailyChallenges"
KEY_COMPLETED_CHALLENGES = "LifeTunesCompletedChallenges"
KEY_TOTAL_POINTS = "LifeTunesTotalPoints"
KEY_CURRENT_STREAK = "LifeTunesCurrentStreak"
KEY_BOOKMARKED_IDS = "LifeTunesBookmarkedIds"
KEY_READ_ARTICLES = "LifeTunesReadArticles"
KEY_LAST_CHALLENGE_GENERATION = "LastChallengeGeneration"
KEY_MOOD_RECORDS = "LifeTunesMoodRecords"

DATE_FORMAT = "%Y-%m-%d"
DEFAULT_STORE_PATH = "lifetunes_state.json"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class StoreError(Exception):
    """Raised when a backend cannot read or write its storage."""
    pass


# ============================================================================
# STORES
# ============================================================================

class KeyValueStore(ABC):
    """Opaque string-keyed blob store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Returns the blob stored under key, or None."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Stores value under key, replacing any previous blob."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Removes key if present."""


class InMemoryStore(KeyValueStore):
    """Process-local store, used for tests and dry runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


class JsonFileStore(KeyValueStore):
    """
    Stores all keys in a single JSON object on disk.

    The file is read once on construction and rewritten on every write.
    An unreadable file starts the store empty.
    """

    def __init__(self, path: str = DEFAULT_STORE_PATH):
        self.path = path
        self._data: Dict[str, str] = self._read()

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("state file is not a JSON object")
            return {str(k): str(v) for k, v in data.items()}
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read state file {self.path}: {e}. Starting empty.")
            return {}

    def _write(self) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Failed to write state file {self.path}: {e}")
            raise StoreError(f"Write failed: {e}") from e

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._write()

    def delete(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._write()


# ============================================================================
# TYPED REPOSITORY
# ============================================================================

class AppRepository:
    """Typed get/set per aggregate on top of a KeyValueStore."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    # --- generic helpers ----------------------------------------------------

    def _load(self, key: str, default: T, decode: Callable[[Any], T]) -> T:
        raw = self.store.get(key)
        if raw is None:
            return default
        try:
            return decode(json.loads(raw))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Failed to decode '{key}', using default: {e}")
            return default

    def _save(self, key: str, value: Any) -> None:
        self.store.set(key, json.dumps(value, ensure_ascii=False))

    # --- user profile -------------------------------------------------------

    def load_user(self) -> User:
        return self._load(KEY_USER, User(), User.from_dict)

    def save_user(self, user: User) -> None:
        self._save(KEY_USER, user.to_dict())

    def load_onboarding_completed(self) -> bool:
        return self._load(KEY_ONBOARDING_COMPLETED, False, bool)

    def save_onboarding_completed(self, completed: bool) -> None:
        self._save(KEY_ONBOARDING_COMPLETED, bool(completed))

    # --- playlists ----------------------------------------------------------

    def load_playlists(self) -> List[Playlist]:
        return self._load(KEY_PLAYLISTS, [], lambda items: [Playlist.from_dict(p) for p in items])

    def save_playlists(self, playlists: List[Playlist]) -> None:
        self._save(KEY_PLAYLISTS, [p.to_dict() for p in playlists])

    # --- challenges ---------------------------------------------------------

    def load_daily_challenges(self) -> List[Challenge]:
        return self._load(KEY_DAILY_CHALLENGES, [], lambda items: [Challenge.from_dict(c) for c in items])

    def save_daily_challenges(self, challenges: List[Challenge]) -> None:
        self._save(KEY_DAILY_CHALLENGES, [c.to_dict() for c in challenges])

    def load_completed_challenges(self) -> List[Challenge]:
        return self._load(KEY_COMPLETED_CHALLENGES, [], lambda items: [Challenge.from_dict(c) for c in items])

    def save_completed_challenges(self, challenges: List[Challenge]) -> None:
        self._save(KEY_COMPLETED_CHALLENGES, [c.to_dict() for c in challenges])

    def load_total_points(self) -> int:
        return self._load(KEY_TOTAL_POINTS, 0, int)

    def save_total_points(self, points: int) -> None:
        self._save(KEY_TOTAL_POINTS, int(points))

    def load_current_streak(self) -> int:
        return self._load(KEY_CURRENT_STREAK, 0, int)

    def save_current_streak(self, streak: int) -> None:
        self._save(KEY_CURRENT_STREAK, int(streak))

    def load_last_generation_date(self) -> Optional[date]:
        return self._load(KEY_LAST_CHALLENGE_GENERATION, None, _parse_date)

    def save_last_generation_date(self, day: date) -> None:
        self._save(KEY_LAST_CHALLENGE_GENERATION, day.strftime(DATE_FORMAT))

    # --- news ---------------------------------------------------------------

    def load_bookmarked_ids(self) -> List[str]:
        return self._load(KEY_BOOKMARKED_IDS, [], _string_list)

    def save_bookmarked_ids(self, ids: List[str]) -> None:
        self._save(KEY_BOOKMARKED_IDS, list(ids))

    def load_read_ids(self) -> List[str]:
        return self._load(KEY_READ_ARTICLES, [], _string_list)

    def save_read_ids(self, ids: List[str]) -> None:
        self._save(KEY_READ_ARTICLES, list(ids))

    # --- mood journal -------------------------------------------------------

    def load_mood_records(self) -> List[MoodRecord]:
        return self._load(KEY_MOOD_RECORDS, [], lambda items: [MoodRecord.from_dict(r) for r in items])

    def save_mood_records(self, records: List[MoodRecord]) -> None:
        self._save(KEY_MOOD_RECORDS, [r.to_dict() for r in records])


def _parse_date(value: Any) -> date:
    return datetime.strptime(str(value), DATE_FORMAT).date()


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        raise TypeError(f"expected a list, got {type(value).__name__}")
    return [str(item) for item in value]
