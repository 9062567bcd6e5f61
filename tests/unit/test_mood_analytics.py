import pytest
from datetime import timedelta
from unittest.mock import MagicMock

from lifetunes.core.analyzer import MoodAnalyticsEngine, MoodAnalyticsConfig, Hotspot, log_summary
from lifetunes.core.models import Coordinate, Mood


class TestMoodAnalyticsEngine:
    """Test suite for the mood journal and its analytics."""

    @pytest.fixture(autouse=True)
    def setup(self, repository, clock, san_francisco):
        self.repository = repository
        self.clock = clock
        self.here = san_francisco
        self.engine = MoodAnalyticsEngine(repository, clock=clock)

    # ========================================================================
    # 1. RECORDING
    # ========================================================================

    def test_record_appends_and_sets_current_mood(self):
        entry = self.engine.record(Mood.HAPPY, 0.8, self.here, notes="Sunny walk")

        assert self.engine.records == [entry]
        assert self.engine.current_mood is Mood.HAPPY
        assert entry.timestamp == self.clock.now
        assert entry.notes == "Sunny walk"

    @pytest.mark.parametrize("raw, expected", [(1.7, 1.0), (-0.3, 0.0), (0.42, 0.42)])
    def test_intensity_is_clamped(self, raw, expected):
        entry = self.engine.record(Mood.CALM, raw, self.here)
        assert entry.intensity == pytest.approx(expected)

    def test_log_is_bounded_and_evicts_oldest(self):
        first = self.engine.record(Mood.CALM, 0.5, self.here)
        for _ in range(MoodAnalyticsConfig.MAX_RECORDS):
            self.engine.record(Mood.HAPPY, 0.5, self.here)

        records = self.engine.records
        assert len(records) == MoodAnalyticsConfig.MAX_RECORDS
        assert first not in records

    def test_records_is_a_snapshot(self):
        self.engine.record(Mood.CALM, 0.5, self.here)
        snapshot = self.engine.records
        snapshot.clear()
        assert len(self.engine.records) == 1

    def test_record_persists_and_reloads(self):
        self.engine.record(Mood.FOCUSED, 0.6, self.here, activities=["Study session"])

        reloaded = MoodAnalyticsEngine(self.repository, clock=self.clock)

        assert len(reloaded.records) == 1
        assert reloaded.records[0].mood is Mood.FOCUSED
        assert reloaded.records[0].activities == ["Study session"]
        assert reloaded.current_mood is Mood.FOCUSED

    def test_record_emits_event(self):
        listener = MagicMock()
        self.engine.subscribe("mood_recorded", listener)

        entry = self.engine.record(Mood.SOCIAL, 0.5, self.here)

        listener.assert_called_once_with(entry)

    # ========================================================================
    # 2. TRENDS & AVERAGES
    # ========================================================================

    def test_empty_log_is_total(self):
        assert self.engine.trends() == {}
        assert self.engine.average_intensity(Mood.HAPPY) == 0.0
        assert self.engine.most_frequent_mood() is None
        assert self.engine.hotspots() == []
        assert self.engine.diversity() == 0.0
        assert self.engine.consistency() == 0.0

    def test_trends_counts_by_mood(self):
        self.engine.record(Mood.HAPPY, 0.5, self.here)
        self.engine.record(Mood.HAPPY, 0.7, self.here)
        self.engine.record(Mood.CALM, 0.4, self.here)

        assert self.engine.trends() == {Mood.HAPPY: 2, Mood.CALM: 1}

    def test_trends_window_is_inclusive(self):
        self.engine.record(Mood.HAPPY, 0.5, self.here)

        self.clock.advance(days=7)
        assert self.engine.trends(timedelta(days=7)) == {Mood.HAPPY: 1}

        self.clock.advance(seconds=1)
        assert self.engine.trends(timedelta(days=7)) == {}

    def test_average_intensity_within_period(self):
        self.engine.record(Mood.HAPPY, 0.2, self.here)
        self.clock.advance(days=10)
        self.engine.record(Mood.HAPPY, 0.6, self.here)
        self.engine.record(Mood.HAPPY, 0.8, self.here)

        assert self.engine.average_intensity(Mood.HAPPY) == pytest.approx(0.7)
        assert self.engine.average_intensity(Mood.HAPPY, timedelta(days=30)) == pytest.approx(1.6 / 3)
        assert self.engine.average_intensity(Mood.CALM) == 0.0

    def test_most_frequent_mood_tie_goes_to_first_logged(self):
        self.engine.record(Mood.CALM, 0.5, self.here)
        self.engine.record(Mood.HAPPY, 0.5, self.here)

        assert self.engine.most_frequent_mood() is Mood.CALM

    def test_most_frequent_mood(self):
        self.engine.record(Mood.CALM, 0.5, self.here)
        self.engine.record(Mood.HAPPY, 0.5, self.here)
        self.engine.record(Mood.HAPPY, 0.5, self.here)

        assert self.engine.most_frequent_mood() is Mood.HAPPY

    # ========================================================================
    # 3. HOTSPOTS
    # ========================================================================

    def test_hotspot_groups_same_cell_and_mood(self):
        first = Coordinate(37.0, -122.0)
        self.engine.record(Mood.HAPPY, 0.5, first)
        self.engine.record(Mood.HAPPY, 0.5, Coordinate(37.0001, -122.0001))

        hotspots = self.engine.hotspots()

        assert hotspots == [Hotspot(location=first, mood=Mood.HAPPY, frequency=2)]

    def test_hotspot_same_cell_different_moods_are_distinct(self):
        self.engine.record(Mood.HAPPY, 0.5, self.here)
        self.engine.record(Mood.CALM, 0.5, self.here)

        moods = {h.mood for h in self.engine.hotspots()}
        assert moods == {Mood.HAPPY, Mood.CALM}

    def test_hotspots_ranked_by_frequency_with_stable_ties(self):
        a = Coordinate(10.0, 10.0)
        b = Coordinate(20.0, 20.0)
        c = Coordinate(30.0, 30.0)
        self.engine.record(Mood.CALM, 0.5, a)
        self.engine.record(Mood.HAPPY, 0.5, b)
        self.engine.record(Mood.HAPPY, 0.5, b)
        self.engine.record(Mood.SOCIAL, 0.5, c)

        hotspots = self.engine.hotspots()

        assert [h.location for h in hotspots] == [b, a, c]
        assert [h.frequency for h in hotspots] == [2, 1, 1]

    def test_hotspots_limit(self):
        for i in range(5):
            self.engine.record(Mood.HAPPY, 0.5, Coordinate(float(i), 0.0))
        assert len(self.engine.hotspots(limit=3)) == 3

    def test_location_mood_map(self):
        self.engine.record(Mood.HAPPY, 0.5, Coordinate(37.0, -122.0))
        self.engine.record(Mood.CALM, 0.5, Coordinate(37.0001, -122.0001))
        self.engine.record(Mood.HAPPY, 0.5, Coordinate(37.0002, -122.0002))

        assert self.engine.location_mood_map() == {
            "37000_-122000": {Mood.HAPPY: 2, Mood.CALM: 1},
        }

    def test_records_near(self, oakland):
        near = self.engine.record(Mood.HAPPY, 0.5, self.here)
        self.engine.record(Mood.CALM, 0.5, oakland)

        assert self.engine.records_near(self.here) == [near]
        assert len(self.engine.records_near(self.here, radius=20000)) == 2

    # ========================================================================
    # 4. SCORES
    # ========================================================================

    def test_diversity(self):
        self.engine.record(Mood.HAPPY, 0.5, self.here)
        self.engine.record(Mood.HAPPY, 0.5, self.here)
        self.engine.record(Mood.CALM, 0.5, self.here)

        assert self.engine.diversity() == pytest.approx(2 / 12)

    def test_diversity_all_moods(self):
        for mood in Mood:
            self.engine.record(mood, 0.5, self.here)
        assert self.engine.diversity() == pytest.approx(1.0)

    def test_consistency_requires_two_records(self):
        self.engine.record(Mood.HAPPY, 0.5, self.here)
        assert self.engine.consistency() == 0.0

    @pytest.mark.parametrize("intensities, expected", [
        ([0.5, 0.5], 1.0),
        ([0.25, 0.75], 0.5),
        ([0.0, 1.0], 0.0),
    ])
    def test_consistency(self, intensities, expected):
        for value in intensities:
            self.engine.record(Mood.HAPPY, value, self.here)
        assert self.engine.consistency() == pytest.approx(expected)

    # ========================================================================
    # 5. RECOMMENDATIONS & SUMMARY
    # ========================================================================

    def test_suggest_activities_and_genre(self):
        assert "Meditation" in self.engine.suggest_activities(Mood.CALM)
        assert self.engine.recommended_genre(Mood.FOCUSED) == "Lo-fi, Instrumental"

    def test_summary_and_log(self):
        self.engine.record(Mood.HAPPY, 0.5, self.here)
        summary = self.engine.summary()

        assert summary['total_records'] == 1
        assert summary['current_mood'] == "Happy"
        assert summary['most_frequent'] == "Happy"
        assert summary['trends'] == {"Happy": 1}

        mock_logger = MagicMock()
        log_summary(summary, mock_logger)
        assert mock_logger.info.call_count == 2

    def test_engine_without_repository(self):
        engine = MoodAnalyticsEngine(clock=self.clock)
        engine.record(Mood.HAPPY, 0.5, self.here)
        assert len(engine.records) == 1
