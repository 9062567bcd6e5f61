"""
Personalized news feed over a local sample dataset.

Provides:
- Interest-based feed personalization
- Full-text search
- Bookmarks and read tracking (persisted by article id)
- Trending topics from the loaded feed
"""

import logging
import random
import re
import uuid
from collections import Counter
from dataclasses import replace
from typing import Iterable, List, Optional

from lifetunes.core import recommendations
from lifetunes.core.events import EventEmitter
from lifetunes.core.models import NewsArticle, NewsCategory, User

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

FEED_LIMIT = 10
TRENDING_LIMIT = 10
TRENDING_MIN_WORD_LENGTH = 5


def _article(title: str, summary: str, content: str, category: NewsCategory,
             author: str, source_url: str, tags: List[str]) -> NewsArticle:
    # Stable id derived from the source URL
    return NewsArticle(
        id=str(uuid.uuid5(uuid.NAMESPACE_URL, source_url)),
        title=title,
        summary=summary,
        content=content,
        category=category,
        author=author,
        source_url=source_url,
        tags=tags,
    )


SAMPLE_ARTICLES: List[NewsArticle] = [
    _article(
        "The Science of Music and Productivity",
        "Research shows how different genres can boost focus and creativity.",
        "Studies have revealed that instrumental music, particularly classical and ambient genres, "
        "can significantly enhance cognitive performance and focus. The key is finding the right "
        "tempo and complexity that matches your task.",
        NewsCategory.MUSIC, "Dr. Sarah Mitchell", "https://example.com/music-productivity",
        ["music", "focus", "productivity"],
    ),
    _article(
        "5 Daily Habits That Transform Your Lifestyle",
        "Simple changes that can lead to dramatic improvements in well-being.",
        "Small, consistent habits can create powerful transformations. From morning meditation to "
        "evening gratitude practices, these five habits can reshape your daily experience and "
        "long-term happiness.",
        NewsCategory.LIFESTYLE, "Michael Chen", "https://example.com/daily-habits",
        ["habits", "wellbeing"],
    ),
    _article(
        "Mindful Walking: A New Approach to Urban Exploration",
        "How to turn your daily walk into a mindfulness practice.",
        "Mindful walking combines physical exercise with mental wellness. By paying attention to your "
        "surroundings, breathing, and body sensations, you can transform routine walks into powerful "
        "mindfulness sessions.",
        NewsCategory.MINDFULNESS, "Emma Rodriguez", "https://example.com/mindful-walking",
        ["mindfulness", "walking", "city"],
    ),
    _article(
        "The Rise of Location-Based Wellness Apps",
        "Technology meets geography in the latest health trend.",
        "Location-aware wellness applications are revolutionizing how we approach health and fitness. "
        "By leveraging GPS and local data, these apps provide personalized recommendations based on "
        "your environment.",
        NewsCategory.TECHNOLOGY, "Alex Thompson", "https://example.com/location-wellness",
        ["technology", "wellness", "location"],
    ),
    _article(
        "Music Therapy in Modern Healthcare",
        "How hospitals are using music to improve patient outcomes.",
        "Music therapy has shown remarkable results in reducing anxiety, managing pain, and "
        "accelerating recovery. Many healthcare facilities are now integrating music programs into "
        "their treatment protocols.",
        NewsCategory.HEALTH, "Dr. Jennifer Park", "https://example.com/music-therapy",
        ["music", "health", "therapy"],
    ),
    _article(
        "Building Sustainable Fitness Habits",
        "Expert tips for creating workout routines that last.",
        "The key to sustainable fitness isn't intensity, it's consistency. Fitness experts share "
        "strategies for building exercise habits that fit seamlessly into your lifestyle and provide "
        "long-term benefits.",
        NewsCategory.FITNESS, "Coach Maria Santos", "https://example.com/sustainable-fitness",
        ["fitness", "habits", "workout"],
    ),
]


# ============================================================================
# SERVICE
# ============================================================================

class NewsService(EventEmitter):
    """
    Serves the sample feed with per-user personalization.

    Events:
        articles_changed: payload is the current feed.
    """

    def __init__(self, repository, articles: Optional[List[NewsArticle]] = None,
                 rng: Optional[random.Random] = None):
        super().__init__()
        self.repository = repository
        source = articles if articles is not None else SAMPLE_ARTICLES
        self.catalog: List[NewsArticle] = [replace(a) for a in source]
        self.rng = rng or random.Random()
        self.articles: List[NewsArticle] = []

    # --- feed ---------------------------------------------------------------

    @staticmethod
    def _matches_user(article: NewsArticle, interests: Iterable[str]) -> bool:
        category = article.category.value.lower()
        for interest in interests:
            if interest.lower() in category:
                return True
        return recommendations.article_matches_interests(article, interests)

    def fetch_personalized(self, user: User, shuffle: bool = True) -> List[NewsArticle]:
        """
        Builds the user's feed: interest matches (by category, title, summary
        or tags), plus every music article when the user has music
        preferences. Deduplicated, capped at FEED_LIMIT, with persisted
        bookmark flags applied.

        With shuffle=False the feed keeps catalog order, so positions are
        stable between calls.
        """
        selected = list(self.catalog)
        if user.news_interests:
            interests = list(user.news_interests)
            selected = [a for a in selected if self._matches_user(a, interests)]

        if user.music_preferences:
            selected.extend(a for a in self.catalog if a.category is NewsCategory.MUSIC)

        unique = list({a.id: a for a in selected}.values())
        if shuffle:
            self.rng.shuffle(unique)
        self._apply_bookmarks(unique)

        self.articles = unique[:FEED_LIMIT]
        logger.info(f"Fetched {len(self.articles)} personalized articles for '{user.name or 'anonymous'}'")
        self.emit("articles_changed", list(self.articles))
        return list(self.articles)

    def search(self, query: str) -> List[NewsArticle]:
        """Case-insensitive search over title, summary, content and tags."""
        needle = query.strip().lower()
        if not needle:
            return []
        results = [
            a for a in self.catalog
            if needle in a.title.lower()
            or needle in a.summary.lower()
            or needle in a.content.lower()
            or any(needle in tag.lower() for tag in a.tags)
        ]
        self._apply_bookmarks(results)
        return results

    def by_category(self, category: NewsCategory) -> List[NewsArticle]:
        return [a for a in self.articles if a.category is category]

    def recommended(self, interests: Iterable[str]) -> List[NewsArticle]:
        return recommendations.filter_articles(self.articles, interests)

    def trending_topics(self) -> List[str]:
        """Words longer than four letters appearing more than once in the feed."""
        words = []
        for article in self.articles:
            for raw in f"{article.title} {article.summary}".split():
                word = re.sub(r"^\W+|\W+$", "", raw.lower())
                if len(word) >= TRENDING_MIN_WORD_LENGTH:
                    words.append(word)

        counts = Counter(words)
        ranked = [word for word, count in counts.most_common() if count > 1]
        return ranked[:TRENDING_LIMIT]

    # --- bookmarks ----------------------------------------------------------

    def _apply_bookmarks(self, articles: List[NewsArticle]) -> None:
        bookmarked = set(self.repository.load_bookmarked_ids())
        for article in articles:
            article.is_bookmarked = article.id in bookmarked

    def toggle_bookmark(self, article: NewsArticle) -> bool:
        """
        Flips the bookmark state of an article.

        Returns:
            The new bookmark state.
        """
        ids = self.repository.load_bookmarked_ids()
        if article.id in ids:
            ids = [i for i in ids if i != article.id]
            state = False
        else:
            ids.append(article.id)
            state = True
        self.repository.save_bookmarked_ids(ids)

        article.is_bookmarked = state
        for loaded in self.articles:
            if loaded.id == article.id:
                loaded.is_bookmarked = state
        return state

    def bookmarked_articles(self) -> List[NewsArticle]:
        """Catalog articles whose ids are bookmarked, in catalog order."""
        ids = set(self.repository.load_bookmarked_ids())
        return [a for a in self.catalog if a.id in ids]

    # --- read tracking ------------------------------------------------------

    def mark_read(self, article: NewsArticle) -> None:
        ids = self.repository.load_read_ids()
        if article.id not in ids:
            ids.append(article.id)
            self.repository.save_read_ids(ids)

    def is_read(self, article: NewsArticle) -> bool:
        return article.id in self.repository.load_read_ids()
