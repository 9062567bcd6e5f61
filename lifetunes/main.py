"""
LifeTunes: mood journaling, daily challenges, geo-tuned playlists and news.

Command-line front end wiring the engines to a persistent store:
- log / stats / hotspots / nearby: geo-tagged mood journal and analytics
- challenges / start / progress: daily challenge batch, points and streak
- playlist: geo-tuned or mood-based playlist generation
- news: personalized feed, search and bookmarks
- profile: user preferences

Store backends (LIFETUNES_STORE): memory, file (default), mongo.
"""

import os
import sys
import argparse
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional

from dotenv import load_dotenv

from lifetunes.adapters.clients import weather as weather_client
from lifetunes.adapters.clients.location import LocationProvider
from lifetunes.adapters.clients.music import MusicCatalog
from lifetunes.adapters.clients.news import NewsService
from lifetunes.adapters.repositories import mongo as mongo_store
from lifetunes.adapters.repositories.store import (
    AppRepository,
    DEFAULT_STORE_PATH,
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
)
from lifetunes.core.analyzer import MoodAnalyticsEngine, log_summary
from lifetunes.core.challenges import ChallengeEngine
from lifetunes.core.models import Coordinate, Mood
from lifetunes.core.playlists import PlaylistLibrary
from lifetunes.core.profile import UserProfileService
from lifetunes.utils.logger import setup_logger


logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

STORE_BACKENDS = ("memory", "file", "mongo")
DEFAULT_STORE_BACKEND = "file"


# ============================================================================
# WIRING
# ============================================================================

@dataclass
class AppContext:
    """Every engine and service of one LifeTunes process."""
    repository: AppRepository
    location: LocationProvider
    analytics: MoodAnalyticsEngine
    music: MusicCatalog
    challenges: ChallengeEngine
    playlists: PlaylistLibrary
    profile: UserProfileService
    news: NewsService


def create_store(backend: str, path: Optional[str] = None) -> KeyValueStore:
    """
    Builds the key-value store for `backend`.

    A MongoDB connection failure falls back to the JSON file store.
    """
    if backend == "memory":
        return InMemoryStore()
    if backend == "mongo":
        try:
            return mongo_store.get_state_store()
        except mongo_store.MongoDBConnectionError as e:
            logger.error(f"MongoDB error: {e}")
            logger.warning("[WARN] CONTINGENCY MODE: Falling back to local file store")
    return JsonFileStore(path or os.environ.get("LIFETUNES_STORE_PATH", DEFAULT_STORE_PATH))


def build_app(store: KeyValueStore, location: Optional[LocationProvider] = None) -> AppContext:
    repository = AppRepository(store)
    location = location or LocationProvider()
    music = MusicCatalog()
    profile = UserProfileService(repository)
    analytics = MoodAnalyticsEngine(repository)
    challenges = ChallengeEngine(repository, music=music)

    # The challenge engine owns the streak; the profile mirrors it both ways
    profile.set_streak(challenges.current_streak)
    challenges.subscribe("streak_changed", profile.set_streak)
    profile.subscribe("streak_changed", challenges.set_streak)

    # Profile follows the last logged position
    analytics.subscribe("mood_recorded", lambda record: profile.update_location(record.location))
    location.subscribe("location_changed", profile.update_location)

    return AppContext(
        repository=repository,
        location=location,
        analytics=analytics,
        music=music,
        challenges=challenges,
        playlists=PlaylistLibrary(repository),
        profile=profile,
        news=NewsService(repository),
    )


# ============================================================================
# ARGUMENT PARSING
# ============================================================================

def _add_location_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--lat", type=float, help="Current latitude")
    parser.add_argument("--lon", type=float, help="Current longitude")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="LifeTunes: mood journal, daily challenges, playlists and news",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py log happy 0.8 --lat 37.77 --lon -122.42 --notes "Sunny walk"
  python run.py stats --days 30
  python run.py challenges
  python run.py progress 1 2
  python run.py playlist --mood calm
  python run.py --store memory news --search music
        """
    )
    parser.add_argument("--store", choices=STORE_BACKENDS,
                        default=os.environ.get("LIFETUNES_STORE", DEFAULT_STORE_BACKEND),
                        help="Persistence backend")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    log_cmd = sub.add_parser("log", help="Record a mood at the current location")
    log_cmd.add_argument("mood", help="One of: " + ", ".join(m.value for m in Mood))
    log_cmd.add_argument("intensity", type=float, help="0.0 to 1.0 (clamped)")
    log_cmd.add_argument("--notes", default="")
    log_cmd.add_argument("--activity", action="append", default=[], dest="activities")
    log_cmd.add_argument("--weather", action="store_true", help="Attach current weather")
    _add_location_args(log_cmd)

    stats_cmd = sub.add_parser("stats", help="Mood trends and scores")
    stats_cmd.add_argument("--days", type=float, default=7)

    hotspots_cmd = sub.add_parser("hotspots", help="Most frequent mood locations")
    hotspots_cmd.add_argument("--limit", type=int, default=20)

    nearby_cmd = sub.add_parser("nearby", help="Mood records near a location")
    nearby_cmd.add_argument("--radius", type=float, default=1000)
    _add_location_args(nearby_cmd)

    sub.add_parser("challenges", help="Show (and generate) today's challenges")

    start_cmd = sub.add_parser("start", help="Start a challenge by its number")
    start_cmd.add_argument("index", type=int)

    progress_cmd = sub.add_parser("progress", help="Set progress on a challenge")
    progress_cmd.add_argument("index", type=int)
    progress_cmd.add_argument("steps", type=int)

    playlist_cmd = sub.add_parser("playlist", help="Generate a playlist")
    playlist_cmd.add_argument("--mood", default="")
    _add_location_args(playlist_cmd)

    news_cmd = sub.add_parser("news", help="Personalized news feed")
    news_cmd.add_argument("--search", default="")
    news_cmd.add_argument("--bookmark", type=int, help="Toggle bookmark on feed item number")

    profile_cmd = sub.add_parser("profile", help="Update the user profile")
    profile_cmd.add_argument("--name")
    profile_cmd.add_argument("--music", action="append", default=[])
    profile_cmd.add_argument("--goal", action="append", default=[])
    profile_cmd.add_argument("--interest", action="append", default=[])
    profile_cmd.add_argument("--daily-goal", type=int)

    return parser.parse_args(argv)


def location_from_args(args: argparse.Namespace) -> LocationProvider:
    provider = LocationProvider()
    lat, lon = getattr(args, "lat", None), getattr(args, "lon", None)
    if lat is not None and lon is not None:
        provider.request_permission(granted=True)
        provider.update_location(Coordinate(lat, lon))
    return provider


# ============================================================================
# COMMANDS
# ============================================================================

def cmd_log(app: AppContext, args: argparse.Namespace) -> int:
    try:
        mood = Mood.parse(args.mood)
    except ValueError as e:
        logger.error(str(e))
        return 2

    location = app.location.current_location()
    if location is None:
        logger.warning("Location not available. Pass --lat and --lon.")
        return 1

    weather = weather_client.describe_weather(location) if args.weather else None
    record = app.analytics.record(
        mood, args.intensity, location,
        notes=args.notes,
        activities=args.activities,
        weather=weather,
        music_genre=app.analytics.recommended_genre(mood),
    )
    print(f"{mood.emoji} {mood.value} ({record.intensity:.2f}) logged at {location}")
    print("Try: " + ", ".join(app.analytics.suggest_activities(mood)))
    print(f"Music: {app.analytics.recommended_genre(mood)}")
    return 0


def cmd_stats(app: AppContext, args: argparse.Namespace) -> int:
    period = timedelta(days=args.days)
    trends = app.analytics.trends(period)

    if not trends:
        print(f"No moods logged in the last {args.days:g} days.")
    for mood, count in sorted(trends.items(), key=lambda item: item[1], reverse=True):
        avg = app.analytics.average_intensity(mood, period)
        print(f"{mood.emoji} {mood.value:<14} x{count:<3} avg intensity {avg:.2f}")

    summary = app.analytics.summary()
    print(f"Diversity: {summary['diversity']:.0%} | Consistency: {summary['consistency']:.0%}")
    log_summary(summary, logger)
    return 0


def cmd_hotspots(app: AppContext, args: argparse.Namespace) -> int:
    spots = app.analytics.hotspots(args.limit)
    if not spots:
        print("No hotspots yet.")
    for spot in spots:
        print(f"{spot.mood.emoji} {spot.mood.value:<14} x{spot.frequency:<3} at {spot.location}")
    return 0


def cmd_nearby(app: AppContext, args: argparse.Namespace) -> int:
    center = app.location.current_location()
    if center is None:
        logger.warning("Location not available. Pass --lat and --lon.")
        return 1
    records = app.analytics.records_near(center, args.radius)
    print(f"{len(records)} mood record(s) within {args.radius:g} m of {center}")
    for record in records:
        print(f"  {record.timestamp:%Y-%m-%d %H:%M} {record.mood.value} ({record.intensity:.2f}) {record.notes}")
    return 0


def _print_challenges(app: AppContext) -> None:
    engine = app.challenges
    for number, challenge in enumerate(engine.daily_challenges, start=1):
        mark = "x" if challenge.is_completed else " "
        print(f"[{mark}] {number}. {challenge.title} ({challenge.difficulty.value}, "
              f"{challenge.current_progress}/{challenge.required_steps}) - {challenge.description}")
        if challenge.motivational_track and not challenge.is_completed:
            print(f"      Soundtrack: {challenge.motivational_track.title} by {challenge.motivational_track.artist}")
    print(f"Today: {engine.todays_progress():.0%} | Points: {engine.total_points} | "
          f"Streak: {engine.current_streak} | This week: {len(engine.weekly_completed())} completed")


def _challenge_at(app: AppContext, index: int):
    batch = app.challenges.daily_challenges
    if not 1 <= index <= len(batch):
        logger.error(f"No challenge #{index}; today's batch has {len(batch)}")
        return None
    return batch[index - 1]


def cmd_challenges(app: AppContext, args: argparse.Namespace) -> int:
    app.challenges.generate_daily()
    _print_challenges(app)
    return 0


def cmd_start(app: AppContext, args: argparse.Namespace) -> int:
    app.challenges.generate_daily()
    challenge = _challenge_at(app, args.index)
    if challenge is None or app.challenges.start(challenge) is None:
        return 1
    _print_challenges(app)
    return 0


def cmd_progress(app: AppContext, args: argparse.Namespace) -> int:
    app.challenges.generate_daily()
    challenge = _challenge_at(app, args.index)
    if challenge is None or app.challenges.update_progress(challenge, args.steps) is None:
        return 1
    _print_challenges(app)
    return 0


def cmd_playlist(app: AppContext, args: argparse.Namespace) -> int:
    location = app.location.current_location()
    if location is not None:
        playlist = app.music.generate_geo_tuned_playlist(location, args.mood)
        name = app.location.location_name(location)
        if name:
            playlist.name = f"{name} Mix"
    elif args.mood:
        try:
            playlist = app.music.generate_mood_playlist(Mood.parse(args.mood))
        except ValueError as e:
            logger.error(str(e))
            return 2
    else:
        logger.error("Location not available. Pass --lat/--lon or --mood.")
        return 1

    app.playlists.add(playlist)
    print(f"{playlist.name} ({len(playlist.tracks)} tracks)")
    for track in playlist.tracks:
        print(f"  {track.title} - {track.artist} [{track.genre}]")
    return 0


def cmd_news(app: AppContext, args: argparse.Namespace) -> int:
    if args.search:
        articles = app.news.search(args.search)
    else:
        # Catalog order keeps item numbers valid for a later --bookmark run
        articles = app.news.fetch_personalized(app.profile.user, shuffle=False)

    if args.bookmark is not None:
        if not 1 <= args.bookmark <= len(articles):
            logger.error(f"No article #{args.bookmark}")
            return 1
        app.news.toggle_bookmark(articles[args.bookmark - 1])

    for number, article in enumerate(articles, start=1):
        flag = "*" if article.is_bookmarked else " "
        print(f"{flag} {number}. [{article.category.value}] {article.title} "
              f"({article.reading_time} min) - {article.author}")
    return 0


def cmd_profile(app: AppContext, args: argparse.Namespace) -> int:
    user = app.profile.user
    if args.name is not None or args.music or args.goal or args.interest:
        app.profile.update_user(
            name=args.name if args.name is not None else user.name,
            music_preferences=args.music or user.music_preferences,
            lifestyle_goals=args.goal or user.lifestyle_goals,
            news_interests=args.interest or user.news_interests,
        )
    if args.daily_goal is not None:
        app.profile.update_daily_goal(args.daily_goal)
    if not app.profile.onboarding_completed:
        app.profile.complete_onboarding()

    user = app.profile.user
    print(f"{user.name or '(unnamed)'} | goal {user.daily_goal}/day | streak {user.current_streak}")
    print(f"Music: {', '.join(user.music_preferences) or '-'}")
    print(f"Goals: {', '.join(user.lifestyle_goals) or '-'}")
    print(f"News:  {', '.join(user.news_interests) or '-'}")
    return 0


COMMANDS = {
    "log": cmd_log,
    "stats": cmd_stats,
    "hotspots": cmd_hotspots,
    "nearby": cmd_nearby,
    "challenges": cmd_challenges,
    "start": cmd_start,
    "progress": cmd_progress,
    "playlist": cmd_playlist,
    "news": cmd_news,
    "profile": cmd_profile,
}


# ============================================================================
# MAIN EXECUTION
# ============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    setup_logger("lifetunes", level=logging.DEBUG if args.verbose else logging.INFO)

    store = create_store(args.store)
    app = build_app(store, location=location_from_args(args))

    logger.debug(f"Running '{args.command}' on {type(store).__name__}")
    return COMMANDS[args.command](app, args)


if __name__ == "__main__":
    sys.exit(main())
