"""
Recommendation tables for moods, challenges and articles.

Single home for every mood-keyed lookup (activities, genres, emoji, colors)
and for the matching rules used to pick tracks for a challenge and articles
for a user's interests. Everything here is static data or a pure function.
"""

from typing import Dict, Iterable, List

from lifetunes.core.models import (
    ChallengeCategory,
    Mood,
    NewsArticle,
    Track,
)


# ============================================================================
# MOOD TABLES
# ============================================================================

MOOD_ACTIVITIES: Dict[Mood, List[str]] = {
    Mood.HAPPY: ["Share with friends", "Dance to music", "Take photos", "Explore the area"],
    Mood.EXCITED: ["Share with friends", "Dance to music", "Take photos", "Explore the area"],
    Mood.CALM: ["Meditation", "Read a book", "Listen to ambient music", "Gentle stretching"],
    Mood.RELAXED: ["Meditation", "Read a book", "Listen to ambient music", "Gentle stretching"],
    Mood.FOCUSED: ["Study session", "Creative work", "Goal planning", "Skill practice"],
    Mood.ENERGETIC: ["Workout", "Running", "Sports", "Active exploration"],
    Mood.STRESSED: ["Deep breathing", "Calming music", "Walk in nature", "Call a friend"],
    Mood.CREATIVE: ["Art creation", "Writing", "Music composition", "Photography"],
    Mood.SOCIAL: ["Meet friends", "Join group activities", "Community events", "Collaborative projects"],
    Mood.ADVENTUROUS: ["Explore new places", "Try new activities", "Adventure sports", "Discovery walks"],
    Mood.CONTEMPLATIVE: ["Journaling", "Philosophy reading", "Nature observation", "Quiet reflection"],
    Mood.MELANCHOLIC: ["Gentle music", "Comfort activities", "Support group", "Self-care routine"],
}

MOOD_GENRES: Dict[Mood, str] = {
    Mood.HAPPY: "Pop, Upbeat",
    Mood.EXCITED: "Pop, Upbeat",
    Mood.CALM: "Ambient, Classical",
    Mood.RELAXED: "Ambient, Classical",
    Mood.FOCUSED: "Lo-fi, Instrumental",
    Mood.ENERGETIC: "Electronic, Rock",
    Mood.STRESSED: "Meditation, Nature sounds",
    Mood.CREATIVE: "Jazz, Experimental",
    Mood.SOCIAL: "Dance, Party",
    Mood.ADVENTUROUS: "World, Folk",
    Mood.CONTEMPLATIVE: "Classical, Post-rock",
    Mood.MELANCHOLIC: "Blues, Indie",
}

MOOD_EMOJI: Dict[Mood, str] = {
    Mood.HAPPY: "😊",
    Mood.EXCITED: "🤩",
    Mood.CALM: "😌",
    Mood.FOCUSED: "🎯",
    Mood.ENERGETIC: "⚡",
    Mood.RELAXED: "😴",
    Mood.MELANCHOLIC: "😔",
    Mood.STRESSED: "😰",
    Mood.CREATIVE: "🎨",
    Mood.SOCIAL: "👥",
    Mood.CONTEMPLATIVE: "🤔",
    Mood.ADVENTUROUS: "🌟",
}

MOOD_COLORS: Dict[Mood, str] = {
    Mood.HAPPY: "#FFD700",
    Mood.EXCITED: "#FF6B6B",
    Mood.CALM: "#74C0FC",
    Mood.FOCUSED: "#8884FF",
    Mood.ENERGETIC: "#FF8C42",
    Mood.RELAXED: "#95E1D3",
    Mood.MELANCHOLIC: "#A8DADC",
    Mood.STRESSED: "#F72585",
    Mood.CREATIVE: "#B794F6",
    Mood.SOCIAL: "#48CAE4",
    Mood.CONTEMPLATIVE: "#457B9D",
    Mood.ADVENTUROUS: "#F77F00",
}

DEFAULT_TRACK_LIMIT = 3


def suggest_activities(mood: Mood) -> List[str]:
    """Returns a copy of the suggested activities for a mood."""
    return list(MOOD_ACTIVITIES[mood])


def recommended_genre(mood: Mood) -> str:
    return MOOD_GENRES[mood]


# ============================================================================
# TRACKS
# ============================================================================

def track_matches_category(track: Track, category: ChallengeCategory) -> bool:
    """
    Decides whether a track suits a challenge category.

    Social and Music challenges accept any track.
    """
    if category is ChallengeCategory.FITNESS:
        return track.mood == Mood.ENERGETIC.value or track.genre == "Electronic"
    if category is ChallengeCategory.MINDFULNESS:
        return track.mood in (Mood.CALM.value, Mood.RELAXED.value)
    if category is ChallengeCategory.CREATIVITY:
        return track.mood == Mood.CREATIVE.value or track.genre == "Instrumental"
    if category is ChallengeCategory.LEARNING:
        return track.mood == Mood.FOCUSED.value or track.genre == "Lo-fi"
    return True


def recommended_tracks(category: ChallengeCategory, tracks: Iterable[Track],
                       limit: int = DEFAULT_TRACK_LIMIT) -> List[Track]:
    """First `limit` tracks matching the category, in catalog order."""
    matches = [track for track in tracks if track_matches_category(track, category)]
    return matches[:limit]


# ============================================================================
# ARTICLES
# ============================================================================

def article_matches_interests(article: NewsArticle, interests: Iterable[str]) -> bool:
    """Case-insensitive substring match of any interest against title, summary or tags."""
    title = article.title.lower()
    summary = article.summary.lower()
    tags = [tag.lower() for tag in article.tags]

    for interest in interests:
        needle = interest.lower()
        if needle in title or needle in summary or any(needle in tag for tag in tags):
            return True
    return False


def filter_articles(articles: Iterable[NewsArticle], interests: Iterable[str]) -> List[NewsArticle]:
    interests = list(interests)
    return [article for article in articles if article_matches_interests(article, interests)]
