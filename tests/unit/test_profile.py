from unittest.mock import MagicMock

from lifetunes.core.models import Coordinate
from lifetunes.core.profile import UserProfileService


class TestUserProfileService:

    def test_update_user_normalizes_collections(self, repository):
        service = UserProfileService(repository)

        user = service.update_user("Sam", ["Rock", "Jazz", "Rock"], ["Fitness"], ["music", "health"])

        assert user.name == "Sam"
        assert user.music_preferences == ["Jazz", "Rock"]
        assert user.news_interests == ["health", "music"]
        assert UserProfileService(repository).user.name == "Sam"

    def test_onboarding(self, repository):
        service = UserProfileService(repository)
        assert service.onboarding_completed is False

        service.complete_onboarding()

        assert UserProfileService(repository).onboarding_completed is True

    def test_daily_goal_floor(self, repository):
        service = UserProfileService(repository)
        service.update_daily_goal(0)
        assert service.user.daily_goal == 1
        service.update_daily_goal(5)
        assert service.user.daily_goal == 5

    def test_streak(self, repository):
        service = UserProfileService(repository)
        assert service.increment_streak() == 1
        assert service.increment_streak() == 2
        service.set_streak(7)
        assert service.user.current_streak == 7
        service.reset_streak()
        assert UserProfileService(repository).user.current_streak == 0

    def test_streak_changes_emit_event(self, repository):
        service = UserProfileService(repository)
        listener = MagicMock()
        service.subscribe("streak_changed", listener)

        service.increment_streak()
        service.reset_streak()
        service.set_streak(3)

        assert [c.args[0] for c in listener.call_args_list] == [1, 0]

    def test_update_location(self, repository):
        service = UserProfileService(repository)
        listener = MagicMock()
        service.subscribe("profile_changed", listener)

        service.update_location(None)
        listener.assert_not_called()

        service.update_location(Coordinate(1.0, 2.0))
        assert service.user.location == Coordinate(1.0, 2.0)
        listener.assert_called_once_with(service.user)
