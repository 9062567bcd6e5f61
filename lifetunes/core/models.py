"""
Domain model for LifeTunes.

Records and aggregates shared by the analytics, challenge and recommendation
engines. Every dataclass serializes to plain JSON-compatible dicts so the
repository layer can store it as an opaque blob.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


# ============================================================================
# ENUMS
# ============================================================================

class Mood(Enum):
    """The twelve mood categories a user can log."""
    HAPPY = "Happy"
    EXCITED = "Excited"
    CALM = "Calm"
    FOCUSED = "Focused"
    ENERGETIC = "Energetic"
    RELAXED = "Relaxed"
    MELANCHOLIC = "Melancholic"
    STRESSED = "Stressed"
    CREATIVE = "Creative"
    SOCIAL = "Social"
    CONTEMPLATIVE = "Contemplative"
    ADVENTUROUS = "Adventurous"

    @property
    def emoji(self) -> str:
        from lifetunes.core.recommendations import MOOD_EMOJI
        return MOOD_EMOJI[self]

    @property
    def color(self) -> str:
        from lifetunes.core.recommendations import MOOD_COLORS
        return MOOD_COLORS[self]

    @classmethod
    def parse(cls, value: str) -> "Mood":
        """Case-insensitive lookup by value or member name."""
        for mood in cls:
            if value.lower() in (mood.value.lower(), mood.name.lower()):
                return mood
        raise ValueError(f"Unknown mood: {value}")


class ChallengeCategory(Enum):
    FITNESS = "Fitness"
    MINDFULNESS = "Mindfulness"
    CREATIVITY = "Creativity"
    SOCIAL = "Social"
    LEARNING = "Learning"
    MUSIC = "Music"


class ChallengeDifficulty(Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    EXPERT = "Expert"


class ChallengeState(Enum):
    """Lifecycle of a challenge. COMPLETED is terminal."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class NewsCategory(Enum):
    LIFESTYLE = "Lifestyle"
    MUSIC = "Music"
    HEALTH = "Health"
    TECHNOLOGY = "Technology"
    ENTERTAINMENT = "Entertainment"
    TRAVEL = "Travel"
    FITNESS = "Fitness"
    MINDFULNESS = "Mindfulness"


class LocationPermission(Enum):
    NOT_DETERMINED = "not_determined"
    AUTHORIZED = "authorized"
    DENIED = "denied"


# ============================================================================
# HELPERS
# ============================================================================

def _new_id() -> str:
    return str(uuid.uuid4())


def _dt_to_str(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _dt_from_str(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# ============================================================================
# VALUE TYPES
# ============================================================================

@dataclass(frozen=True)
class Coordinate:
    """A (latitude, longitude) pair in decimal degrees."""
    latitude: float
    longitude: float

    def as_tuple(self) -> tuple:
        return (self.latitude, self.longitude)

    def to_dict(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Coordinate"]:
        if not data:
            return None
        return cls(float(data["latitude"]), float(data["longitude"]))

    def __str__(self) -> str:
        return f"({self.latitude:.4f}, {self.longitude:.4f})"


# ============================================================================
# RECORDS
# ============================================================================

@dataclass
class MoodRecord:
    """A single geo-tagged mood journal entry."""
    id: str
    mood: Mood
    intensity: float        # 0.0 to 1.0
    location: Coordinate
    timestamp: datetime
    notes: str = ""
    activities: List[str] = field(default_factory=list)
    weather: Optional[str] = None
    music_genre: Optional[str] = None

    @classmethod
    def create(cls, mood: Mood, intensity: float, location: Coordinate,
               timestamp: datetime, notes: str = "",
               activities: Optional[List[str]] = None,
               weather: Optional[str] = None,
               music_genre: Optional[str] = None) -> "MoodRecord":
        """Builds a new record, clamping intensity into [0, 1]."""
        return cls(
            id=_new_id(),
            mood=mood,
            intensity=clamp(float(intensity), 0.0, 1.0),
            location=location,
            timestamp=timestamp,
            notes=notes,
            activities=list(activities or []),
            weather=weather,
            music_genre=music_genre,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "mood": self.mood.value,
            "intensity": self.intensity,
            "location": self.location.to_dict(),
            "timestamp": _dt_to_str(self.timestamp),
            "notes": self.notes,
            "activities": list(self.activities),
            "weather": self.weather,
            "music_genre": self.music_genre,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MoodRecord":
        return cls(
            id=data["id"],
            mood=Mood(data["mood"]),
            intensity=clamp(float(data["intensity"]), 0.0, 1.0),
            location=Coordinate.from_dict(data["location"]),
            timestamp=_dt_from_str(data["timestamp"]),
            notes=data.get("notes", ""),
            activities=list(data.get("activities", [])),
            weather=data.get("weather"),
            music_genre=data.get("music_genre"),
        )


@dataclass
class Track:
    title: str
    artist: str
    duration: float         # seconds
    genre: str = ""
    mood: str = ""
    is_local: bool = False
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "duration": self.duration,
            "genre": self.genre,
            "mood": self.mood,
            "is_local": self.is_local,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Track":
        return cls(
            id=data["id"],
            title=data["title"],
            artist=data["artist"],
            duration=float(data["duration"]),
            genre=data.get("genre", ""),
            mood=data.get("mood", ""),
            is_local=bool(data.get("is_local", False)),
        )


@dataclass
class Playlist:
    name: str
    tracks: List[Track] = field(default_factory=list)
    location: Optional[Coordinate] = None
    mood: str = ""
    genre: str = ""
    is_geo_tuned: bool = False
    created_date: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "tracks": [track.to_dict() for track in self.tracks],
            "location": self.location.to_dict() if self.location else None,
            "mood": self.mood,
            "genre": self.genre,
            "is_geo_tuned": self.is_geo_tuned,
            "created_date": _dt_to_str(self.created_date),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Playlist":
        return cls(
            id=data["id"],
            name=data["name"],
            tracks=[Track.from_dict(t) for t in data.get("tracks", [])],
            location=Coordinate.from_dict(data.get("location")),
            mood=data.get("mood", ""),
            genre=data.get("genre", ""),
            is_geo_tuned=bool(data.get("is_geo_tuned", False)),
            created_date=_dt_from_str(data.get("created_date")) or datetime.now(),
        )


@dataclass
class Challenge:
    """A daily challenge and its step progress."""
    title: str
    description: str
    category: ChallengeCategory
    difficulty: ChallengeDifficulty
    duration: float         # seconds
    required_steps: int
    current_progress: int = 0
    is_completed: bool = False
    completed_date: Optional[datetime] = None
    started_date: Optional[datetime] = None
    motivational_track: Optional[Track] = None
    rewards: List[str] = field(default_factory=list)
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        self.required_steps = max(1, int(self.required_steps))
        self.current_progress = int(clamp(self.current_progress, 0, self.required_steps))

    @property
    def state(self) -> ChallengeState:
        if self.is_completed:
            return ChallengeState.COMPLETED
        if self.started_date is not None or self.current_progress > 0:
            return ChallengeState.IN_PROGRESS
        return ChallengeState.NOT_STARTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category.value,
            "difficulty": self.difficulty.value,
            "duration": self.duration,
            "required_steps": self.required_steps,
            "current_progress": self.current_progress,
            "is_completed": self.is_completed,
            "completed_date": _dt_to_str(self.completed_date),
            "started_date": _dt_to_str(self.started_date),
            "motivational_track": (self.motivational_track.to_dict()
                                   if self.motivational_track else None),
            "rewards": list(self.rewards),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Challenge":
        track = data.get("motivational_track")
        return cls(
            id=data["id"],
            title=data["title"],
            description=data.get("description", ""),
            category=ChallengeCategory(data["category"]),
            difficulty=ChallengeDifficulty(data["difficulty"]),
            duration=float(data.get("duration", 0)),
            required_steps=int(data["required_steps"]),
            current_progress=int(data.get("current_progress", 0)),
            is_completed=bool(data.get("is_completed", False)),
            completed_date=_dt_from_str(data.get("completed_date")),
            started_date=_dt_from_str(data.get("started_date")),
            motivational_track=Track.from_dict(track) if track else None,
            rewards=list(data.get("rewards", [])),
        )


@dataclass
class NewsArticle:
    title: str
    summary: str
    content: str
    category: NewsCategory
    author: str
    source_url: str
    published_date: datetime = field(default_factory=datetime.now)
    image_url: Optional[str] = None
    is_bookmarked: bool = False
    tags: List[str] = field(default_factory=list)
    id: str = field(default_factory=_new_id)

    @property
    def reading_time(self) -> int:
        """Approximate reading time in minutes."""
        return max(1, len(self.content) // 250)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "content": self.content,
            "category": self.category.value,
            "author": self.author,
            "source_url": self.source_url,
            "published_date": _dt_to_str(self.published_date),
            "image_url": self.image_url,
            "is_bookmarked": self.is_bookmarked,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewsArticle":
        return cls(
            id=data["id"],
            title=data["title"],
            summary=data.get("summary", ""),
            content=data.get("content", ""),
            category=NewsCategory(data["category"]),
            author=data.get("author", ""),
            source_url=data.get("source_url", ""),
            published_date=_dt_from_str(data.get("published_date")) or datetime.now(),
            image_url=data.get("image_url"),
            is_bookmarked=bool(data.get("is_bookmarked", False)),
            tags=list(data.get("tags", [])),
        )


@dataclass
class User:
    """The single user profile of an installation."""
    name: str = ""
    music_preferences: List[str] = field(default_factory=list)
    lifestyle_goals: List[str] = field(default_factory=list)
    news_interests: List[str] = field(default_factory=list)
    location: Optional[Coordinate] = None
    daily_goal: int = 3
    current_streak: int = 0
    joined_date: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "music_preferences": sorted(set(self.music_preferences)),
            "lifestyle_goals": sorted(set(self.lifestyle_goals)),
            "news_interests": sorted(set(self.news_interests)),
            "location": self.location.to_dict() if self.location else None,
            "daily_goal": self.daily_goal,
            "current_streak": self.current_streak,
            "joined_date": _dt_to_str(self.joined_date),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            music_preferences=list(data.get("music_preferences", [])),
            lifestyle_goals=list(data.get("lifestyle_goals", [])),
            news_interests=list(data.get("news_interests", [])),
            location=Coordinate.from_dict(data.get("location")),
            daily_goal=int(data.get("daily_goal", 3)),
            current_streak=int(data.get("current_streak", 0)),
            joined_date=_dt_from_str(data.get("joined_date")) or datetime.now(),
        )
