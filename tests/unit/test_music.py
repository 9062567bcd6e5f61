import random
from unittest.mock import MagicMock

from lifetunes.adapters.clients.music import (
    MusicCatalog, GEO_PLAYLIST_SIZE, MOOD_FALLBACK_SIZE, PLACE_NAMES, SAMPLE_TRACKS
)
from lifetunes.core.challenges import build_candidates
from lifetunes.core.models import ChallengeCategory, Mood


class TestMusicCatalog:

    def setup_method(self):
        self.catalog = MusicCatalog(rng=random.Random(3))

    def test_geo_tuned_playlist(self, san_francisco):
        playlist = self.catalog.generate_geo_tuned_playlist(san_francisco)

        assert playlist.is_geo_tuned is True
        assert playlist.location == san_francisco
        assert len(playlist.tracks) == GEO_PLAYLIST_SIZE
        assert playlist.name.replace(" Mix", "") in PLACE_NAMES

    def test_geo_tuned_playlist_mood_filter(self, san_francisco):
        playlist = self.catalog.generate_geo_tuned_playlist(san_francisco, mood="energetic")

        assert {t.title for t in playlist.tracks} == {"Morning Energy", "Workout Beast"}
        assert playlist.mood == "energetic"

    def test_mood_playlist(self):
        playlist = self.catalog.generate_mood_playlist(Mood.CALM)

        assert playlist.name == "Calm Playlist"
        assert [t.title for t in playlist.tracks] == ["Peaceful Moments"]

    def test_mood_playlist_fallback(self):
        playlist = self.catalog.generate_mood_playlist(Mood.STRESSED)
        assert playlist.tracks == SAMPLE_TRACKS[:MOOD_FALLBACK_SIZE]

    def test_recommended_tracks_for_challenge(self):
        fitness = next(c for c in build_candidates() if c.category is ChallengeCategory.FITNESS)
        titles = [t.title for t in self.catalog.recommended_tracks(fitness)]
        assert titles == ["Morning Energy", "Workout Beast"]

    def test_playback_state(self):
        listener = MagicMock()
        self.catalog.subscribe("playback_changed", listener)
        track = SAMPLE_TRACKS[0]

        self.catalog.play(track)
        assert self.catalog.is_playing and self.catalog.current_track is track

        self.catalog.pause()
        assert not self.catalog.is_playing and self.catalog.current_track is track

        self.catalog.stop()
        assert self.catalog.current_track is None
        assert listener.call_count == 3
