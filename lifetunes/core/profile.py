"""
User profile aggregate: preferences, goals, streak and onboarding flag.
"""

import logging
from typing import Iterable, Optional

from lifetunes.core.events import EventEmitter
from lifetunes.core.models import Coordinate, User

logger = logging.getLogger(__name__)


class UserProfileService(EventEmitter):
    """
    Owns the single User of this installation.

    Events:
        profile_changed: payload is the User.
        streak_changed: payload is the new streak, after increment or reset.
    """

    def __init__(self, repository):
        super().__init__()
        self.repository = repository
        self.user: User = repository.load_user()
        self.onboarding_completed: bool = repository.load_onboarding_completed()

    def _save(self) -> None:
        self.repository.save_user(self.user)
        self.repository.save_onboarding_completed(self.onboarding_completed)
        self.emit("profile_changed", self.user)

    def update_user(self, name: str, music_preferences: Iterable[str],
                    lifestyle_goals: Iterable[str], news_interests: Iterable[str]) -> User:
        # Preference collections are sets; order is not meaningful
        self.user.name = name
        self.user.music_preferences = sorted(set(music_preferences))
        self.user.lifestyle_goals = sorted(set(lifestyle_goals))
        self.user.news_interests = sorted(set(news_interests))
        self._save()
        return self.user

    def complete_onboarding(self) -> None:
        self.onboarding_completed = True
        self._save()

    def update_daily_goal(self, goal: int) -> None:
        self.user.daily_goal = max(1, int(goal))
        self._save()

    def increment_streak(self) -> int:
        self.user.current_streak += 1
        self._save()
        self.emit("streak_changed", self.user.current_streak)
        return self.user.current_streak

    def reset_streak(self) -> None:
        self.user.current_streak = 0
        self._save()
        self.emit("streak_changed", self.user.current_streak)

    def set_streak(self, streak: int) -> None:
        """Mirrors the challenge streak onto the profile."""
        if streak == self.user.current_streak:
            return
        self.user.current_streak = max(0, int(streak))
        self._save()

    def update_location(self, location: Optional[Coordinate]) -> None:
        if location is None:
            return
        self.user.location = location
        self._save()
        logger.debug(f"User location updated to {location}")
