"""
Daily challenges: generation, step progress, points and streaks.

Each calendar day gets one batch of DAILY_BATCH_SIZE challenges drawn from a
fixed candidate pool. A challenge moves NOT_STARTED -> IN_PROGRESS ->
COMPLETED; completion is terminal, awards points once, and completing the
whole batch extends the streak by one.
"""

import logging
import random
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional

from lifetunes.core.events import EventEmitter
from lifetunes.core.models import Challenge, ChallengeCategory, ChallengeDifficulty

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

DAILY_BATCH_SIZE = 3
WEEKLY_WINDOW = timedelta(days=7)

POINTS_BY_DIFFICULTY = {
    ChallengeDifficulty.EASY: 10,
    ChallengeDifficulty.MEDIUM: 25,
    ChallengeDifficulty.HARD: 50,
    ChallengeDifficulty.EXPERT: 100,
}

# (title, description, category, difficulty, duration seconds, required steps)
CHALLENGE_POOL = [
    ("Morning Energy Boost",
     "Start your day with 10 minutes of energetic music and stretching",
     ChallengeCategory.FITNESS, ChallengeDifficulty.EASY, 600, 1),
    ("Mindful Listening",
     "Listen to a calming playlist for 15 minutes while focusing on your breath",
     ChallengeCategory.MINDFULNESS, ChallengeDifficulty.EASY, 900, 1),
    ("Creative Expression",
     "Create something inspired by your current mood and location",
     ChallengeCategory.CREATIVITY, ChallengeDifficulty.MEDIUM, 1800, 3),
    ("Social Harmony",
     "Share a meaningful song with a friend and discuss its impact",
     ChallengeCategory.SOCIAL, ChallengeDifficulty.MEDIUM, 1200, 2),
    ("Learn Something New",
     "Explore a new music genre and learn about its cultural background",
     ChallengeCategory.LEARNING, ChallengeDifficulty.HARD, 2700, 4),
    ("Workout Rhythm",
     "Complete a 20-minute workout with your favorite high-energy playlist",
     ChallengeCategory.FITNESS, ChallengeDifficulty.MEDIUM, 1200, 2),
    ("Musical Discovery",
     "Discover and save 5 new songs that match your current mood",
     ChallengeCategory.MUSIC, ChallengeDifficulty.EASY, 900, 5),
    ("Meditation Journey",
     "Complete a 25-minute meditation session with ambient background music",
     ChallengeCategory.MINDFULNESS, ChallengeDifficulty.HARD, 1500, 1),
    ("Location Soundtrack",
     "Create a playlist that captures the essence of your current location",
     ChallengeCategory.CREATIVITY, ChallengeDifficulty.MEDIUM, 1800, 6),
    ("Skill Practice",
     "Practice a musical instrument or singing for 30 minutes",
     ChallengeCategory.LEARNING, ChallengeDifficulty.HARD, 1800, 1),
]


def points_for(difficulty: ChallengeDifficulty) -> int:
    return POINTS_BY_DIFFICULTY[difficulty]


def build_candidates() -> List[Challenge]:
    """Fresh Challenge instances (new ids, zero progress) for the whole pool."""
    return [
        Challenge(title=title, description=description, category=category,
                  difficulty=difficulty, duration=duration, required_steps=steps)
        for title, description, category, difficulty, duration, steps in CHALLENGE_POOL
    ]


# ============================================================================
# ENGINE
# ============================================================================

class ChallengeEngine(EventEmitter):
    """
    Tracks the daily batch, the completed archive, points and streak.

    Events:
        challenges_generated: payload is the new batch.
        challenge_started: payload is the started Challenge.
        progress_updated: payload is the updated Challenge.
        challenge_completed: payload is the completed Challenge.
        streak_changed: payload is the new streak value.
    """

    def __init__(self, repository, music=None,
                 clock: Callable[[], datetime] = datetime.now,
                 rng: Optional[random.Random] = None):
        super().__init__()
        self.repository = repository
        self.music = music
        self.clock = clock
        self.rng = rng or random.Random()

        self.daily_challenges: List[Challenge] = repository.load_daily_challenges()
        self.completed_challenges: List[Challenge] = repository.load_completed_challenges()
        self.total_points: int = repository.load_total_points()
        self.current_streak: int = repository.load_current_streak()
        self.current_challenge: Optional[Challenge] = None

    # ------------------------------------------------------------------------
    # PERSISTENCE
    # ------------------------------------------------------------------------

    def _save(self) -> None:
        self.repository.save_daily_challenges(self.daily_challenges)
        self.repository.save_completed_challenges(self.completed_challenges)
        self.repository.save_total_points(self.total_points)
        self.repository.save_current_streak(self.current_streak)

    def _find(self, challenge_id: str) -> Optional[Challenge]:
        for challenge in self.daily_challenges:
            if challenge.id == challenge_id:
                return challenge
        return None

    # ------------------------------------------------------------------------
    # GENERATION
    # ------------------------------------------------------------------------

    def generate_daily(self) -> bool:
        """
        Draws a new batch unless one was already generated today.

        Returns:
            True if a new batch was generated.
        """
        today: date = self.clock().date()
        last_generated = self.repository.load_last_generation_date()

        if last_generated == today:
            logger.debug(f"Daily challenges already generated for {today}")
            return False

        self.daily_challenges = self.rng.sample(build_candidates(), DAILY_BATCH_SIZE)
        self.current_challenge = None
        self.repository.save_last_generation_date(today)
        self._save()

        titles = ", ".join(c.title for c in self.daily_challenges)
        logger.info(f"[CHALLENGES] New batch for {today}: {titles}")
        self.emit("challenges_generated", list(self.daily_challenges))
        return True

    # ------------------------------------------------------------------------
    # PROGRESS
    # ------------------------------------------------------------------------

    def start(self, challenge: Challenge) -> Optional[Challenge]:
        """
        Makes `challenge` the current one with progress reset to zero and a
        motivational track attached when the catalog has one.

        Completed challenges cannot be restarted; None is returned for them
        and for challenges outside today's batch.
        """
        target = self._find(challenge.id)
        if target is None:
            logger.warning(f"Challenge '{challenge.title}' is not in today's batch")
            return None
        if target.is_completed:
            logger.warning(f"Challenge '{target.title}' is already completed")
            return None

        target.current_progress = 0
        target.started_date = self.clock()
        if self.music is not None:
            tracks = self.music.recommended_tracks(target)
            if tracks:
                target.motivational_track = tracks[0]

        self.current_challenge = target
        self._save()
        logger.info(f"[CHALLENGES] Started '{target.title}'")
        self.emit("challenge_started", target)
        return target

    def update_progress(self, challenge: Challenge, progress: int) -> Optional[Challenge]:
        """
        Sets progress, clamped to [0, required_steps], and completes the
        challenge when the threshold is reached.

        Completed challenges ignore further updates, so points are awarded
        exactly once.
        """
        target = self._find(challenge.id)
        if target is None:
            logger.warning(f"Challenge '{challenge.title}' is not in today's batch")
            return None
        if target.is_completed:
            logger.debug(f"Ignoring progress on completed challenge '{target.title}'")
            return target

        target.current_progress = max(0, min(int(progress), target.required_steps))
        if target.current_progress >= target.required_steps:
            self._complete(target)
        else:
            self.emit("progress_updated", target)

        self._save()
        return target

    def _complete(self, challenge: Challenge) -> None:
        challenge.is_completed = True
        challenge.completed_date = self.clock()
        challenge.current_progress = challenge.required_steps

        self.completed_challenges.append(challenge)
        points = points_for(challenge.difficulty)
        self.total_points += points

        if self.current_challenge is not None and self.current_challenge.id == challenge.id:
            self.current_challenge = None

        logger.info(f"[CHALLENGES] Completed '{challenge.title}' (+{points} pts, total {self.total_points})")
        self.emit("challenge_completed", challenge)

        if self.daily_challenges and all(c.is_completed for c in self.daily_challenges):
            self.current_streak += 1
            logger.info(f"[CHALLENGES] Daily batch complete, streak is now {self.current_streak}")
            self.emit("streak_changed", self.current_streak)

    def reset_streak(self) -> None:
        self.current_streak = 0
        self._save()
        self.emit("streak_changed", self.current_streak)

    def set_streak(self, streak: int) -> None:
        """Adopts a streak changed elsewhere; a no-op when unchanged."""
        streak = max(0, int(streak))
        if streak == self.current_streak:
            return
        self.current_streak = streak
        self._save()
        self.emit("streak_changed", self.current_streak)

    # ------------------------------------------------------------------------
    # QUERIES
    # ------------------------------------------------------------------------

    def todays_progress(self) -> float:
        """Fraction of today's batch that is completed."""
        if not self.daily_challenges:
            return 0.0
        done = sum(1 for c in self.daily_challenges if c.is_completed)
        return done / len(self.daily_challenges)

    def weekly_completed(self) -> List[Challenge]:
        """Archive entries completed within the last 7 days, rolling from now."""
        cutoff = self.clock() - WEEKLY_WINDOW
        return [c for c in self.completed_challenges
                if c.completed_date is not None and c.completed_date >= cutoff]

    @staticmethod
    def points_for(difficulty: ChallengeDifficulty) -> int:
        return points_for(difficulty)
