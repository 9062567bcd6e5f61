"""
Mood analytics over the geo-tagged mood journal.

The engine owns a bounded, append-only log of mood records and answers
read-side queries over it:
- Trends (mood counts over a rolling window)
- Average intensity per mood
- Hotspots (grid cell + mood frequency ranking)
- Diversity and consistency scores
- Proximity lookups

All queries are total: an empty log yields zeros and empty collections.
"""

import logging
import statistics
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from lifetunes.core import geo, recommendations
from lifetunes.core.events import EventEmitter
from lifetunes.core.models import Coordinate, Mood, MoodRecord

logger = logging.getLogger(__name__)


# ============================================================================
# CONFIGURATION
# ============================================================================

class MoodAnalyticsConfig:
    """Centralized tunables for mood analytics."""

    # Log retention (oldest evicted first)
    MAX_RECORDS: int = 100

    # Default rolling window for trends / averages
    DEFAULT_PERIOD: timedelta = timedelta(days=7)

    # Hotspot ranking
    HOTSPOT_LIMIT: int = 20
    CELL_PRECISION: int = geo.DEFAULT_CELL_PRECISION

    # Proximity lookups (meters)
    DEFAULT_RADIUS: float = 1000.0

    # Std dev that maps to zero consistency
    CONSISTENCY_SCALE: float = 0.5


# ============================================================================
# RESULT TYPES
# ============================================================================

@dataclass(frozen=True)
class Hotspot:
    """A grid cell where one mood was logged `frequency` times."""
    location: Coordinate
    mood: Mood
    frequency: int


# ============================================================================
# ENGINE
# ============================================================================

class MoodAnalyticsEngine(EventEmitter):
    """
    Owns the mood log and computes analytics over it.

    Events:
        mood_recorded: payload is the new MoodRecord.
    """

    def __init__(self, repository=None,
                 clock: Callable[[], datetime] = datetime.now):
        super().__init__()
        self.repository = repository
        self.clock = clock
        self._records: List[MoodRecord] = []
        self.current_mood: Optional[Mood] = None

        if repository is not None:
            self._records = repository.load_mood_records()[-MoodAnalyticsConfig.MAX_RECORDS:]
            if self._records:
                self.current_mood = self._records[-1].mood
            logger.info(f"Loaded {len(self._records)} mood records")

    @property
    def records(self) -> List[MoodRecord]:
        """Snapshot of the log, oldest first."""
        return list(self._records)

    # ------------------------------------------------------------------------
    # WRITE SIDE
    # ------------------------------------------------------------------------

    def record(self, mood: Mood, intensity: float, location: Coordinate,
               notes: str = "", activities: Optional[List[str]] = None,
               weather: Optional[str] = None,
               music_genre: Optional[str] = None) -> MoodRecord:
        """
        Appends a new record stamped with the current time.

        Intensity is clamped to [0, 1]; the log keeps the newest
        MAX_RECORDS entries.
        """
        entry = MoodRecord.create(
            mood=mood,
            intensity=intensity,
            location=location,
            timestamp=self.clock(),
            notes=notes,
            activities=activities,
            weather=weather,
            music_genre=music_genre,
        )

        self._records.append(entry)
        overflow = len(self._records) - MoodAnalyticsConfig.MAX_RECORDS
        if overflow > 0:
            del self._records[:overflow]
            logger.debug(f"Evicted {overflow} oldest mood record(s)")

        self.current_mood = mood
        self._persist()
        logger.info(f"[MOOD] Recorded {mood.value} ({entry.intensity:.2f}) at {location}")
        self.emit("mood_recorded", entry)
        return entry

    def _persist(self) -> None:
        if self.repository is not None:
            self.repository.save_mood_records(self._records)

    # ------------------------------------------------------------------------
    # QUERIES
    # ------------------------------------------------------------------------

    def _within(self, period: timedelta) -> List[MoodRecord]:
        # Boundary inclusive: a record exactly `period` old is kept
        cutoff = self.clock() - period
        return [r for r in self._records if r.timestamp >= cutoff]

    def trends(self, period: timedelta = MoodAnalyticsConfig.DEFAULT_PERIOD) -> Dict[Mood, int]:
        """Mood -> count for records inside the rolling window."""
        counts: Dict[Mood, int] = {}
        for entry in self._within(period):
            counts[entry.mood] = counts.get(entry.mood, 0) + 1
        return counts

    def average_intensity(self, mood: Mood,
                          period: timedelta = MoodAnalyticsConfig.DEFAULT_PERIOD) -> float:
        """Mean intensity of `mood` inside the window, 0.0 when absent."""
        intensities = [r.intensity for r in self._within(period) if r.mood == mood]
        if not intensities:
            return 0.0
        return statistics.mean(intensities)

    def most_frequent_mood(self, period: timedelta = MoodAnalyticsConfig.DEFAULT_PERIOD) -> Optional[Mood]:
        """
        Most logged mood inside the window, or None when it is empty.

        Ties go to the mood that was logged first.
        """
        counts = self.trends(period)
        if not counts:
            return None
        return max(counts, key=counts.get)

    def hotspots(self, limit: int = MoodAnalyticsConfig.HOTSPOT_LIMIT) -> List[Hotspot]:
        """
        Ranks (cell, mood) groups by frequency, descending.

        The same cell with different moods yields distinct hotspots. Ties
        keep the order in which each group was first seen. A hotspot's
        location is the location of the first record in its group.
        """
        groups: Dict[str, List] = {}
        for entry in self._records:
            key = f"{geo.cell_key(entry.location, MoodAnalyticsConfig.CELL_PRECISION)}_{entry.mood.value}"
            if key in groups:
                groups[key][2] += 1
            else:
                groups[key] = [entry.location, entry.mood, 1]

        ranked = sorted(groups.values(), key=lambda g: g[2], reverse=True)
        return [Hotspot(location=loc, mood=mood, frequency=count)
                for loc, mood, count in ranked[:limit]]

    def location_mood_map(self) -> Dict[str, Dict[Mood, int]]:
        """Cell key -> mood counts, grouping by location only."""
        result: Dict[str, Dict[Mood, int]] = {}
        cells = geo.group_by_cell(self._records, MoodAnalyticsConfig.CELL_PRECISION)
        for cell, entries in cells.items():
            result[cell] = dict(Counter(entry.mood for entry in entries))
        return result

    def records_near(self, center: Coordinate,
                     radius: float = MoodAnalyticsConfig.DEFAULT_RADIUS) -> List[MoodRecord]:
        return geo.near(self._records, center, radius)

    def diversity(self) -> float:
        """Distinct moods logged / total mood variants, in [0, 1]."""
        if not self._records:
            return 0.0
        distinct = len({r.mood for r in self._records})
        return distinct / len(Mood)

    def consistency(self) -> float:
        """
        1 - (population std dev of intensities / 0.5), floored at 0.

        Returns 0.0 with fewer than two records.
        """
        if len(self._records) < 2:
            return 0.0
        deviation = statistics.pstdev(r.intensity for r in self._records)
        return max(0.0, 1.0 - deviation / MoodAnalyticsConfig.CONSISTENCY_SCALE)

    # ------------------------------------------------------------------------
    # RECOMMENDATIONS
    # ------------------------------------------------------------------------

    @staticmethod
    def suggest_activities(mood: Mood) -> List[str]:
        return recommendations.suggest_activities(mood)

    @staticmethod
    def recommended_genre(mood: Mood) -> str:
        return recommendations.recommended_genre(mood)

    def summary(self) -> Dict[str, object]:
        """Snapshot of the headline analytics, for reporting."""
        top = self.most_frequent_mood()
        return {
            'total_records': len(self._records),
            'current_mood': self.current_mood.value if self.current_mood else None,
            'most_frequent': top.value if top else None,
            'trends': {mood.value: count for mood, count in self.trends().items()},
            'diversity': round(self.diversity(), 3),
            'consistency': round(self.consistency(), 3),
        }


def log_summary(summary: Dict[str, object], _logger: logging.Logger) -> None:
    """Helper to log an analytics summary."""
    _logger.info(f"[MOOD_ANALYTICS] {summary['total_records']} records, "
                 f"current: {summary['current_mood']}, most frequent: {summary['most_frequent']}")
    _logger.info(f"[MOOD_ANALYTICS] Diversity {summary['diversity']} | Consistency {summary['consistency']}")
