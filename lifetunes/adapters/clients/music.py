"""
Local music catalog for playlist generation and challenge soundtracks.

There is no streaming backend: playlists are assembled from a fixed
sample catalog, and playback is a state holder for the UI layer.
"""

import logging
import random
from typing import List, Optional

from lifetunes.core import recommendations
from lifetunes.core.events import EventEmitter
from lifetunes.core.models import Challenge, Coordinate, Mood, Playlist, Track

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

SAMPLE_TRACKS: List[Track] = [
    Track(title="Morning Energy", artist="LifeTunes", duration=210, genre="Electronic", mood="Energetic"),
    Track(title="City Vibes", artist="Urban Sounds", duration=180, genre="Hip Hop", mood="Happy"),
    Track(title="Peaceful Moments", artist="Calm Collective", duration=240, genre="Ambient", mood="Calm"),
    Track(title="Workout Beast", artist="Fitness Beats", duration=195, genre="Electronic", mood="Energetic"),
    Track(title="Study Focus", artist="Concentration", duration=300, genre="Lo-fi", mood="Focused"),
    Track(title="Evening Chill", artist="Relaxation", duration=270, genre="Jazz", mood="Relaxed"),
    Track(title="Adventure Time", artist="Explorer", duration=220, genre="Rock", mood="Adventurous"),
    Track(title="Creative Flow", artist="Inspiration", duration=260, genre="Instrumental", mood="Creative"),
]

PLACE_NAMES = ["Downtown", "Park", "Beach", "Cafe", "Gym", "Home", "Office", "City"]

GEO_PLAYLIST_SIZE = 6
MOOD_FALLBACK_SIZE = 4


# ============================================================================
# CATALOG
# ============================================================================

class MusicCatalog(EventEmitter):
    """
    Builds playlists from the sample catalog and tracks playback state.

    Events:
        playback_changed: payload is the current Track or None.
    """

    def __init__(self, tracks: Optional[List[Track]] = None,
                 rng: Optional[random.Random] = None):
        super().__init__()
        self.tracks: List[Track] = list(tracks if tracks is not None else SAMPLE_TRACKS)
        self.rng = rng or random.Random()
        self.current_track: Optional[Track] = None
        self.is_playing: bool = False

    # --- playlist generation ------------------------------------------------

    def generate_geo_tuned_playlist(self, location: Coordinate, mood: str = "") -> Playlist:
        """
        Location-flavoured mix: optional mood substring filter, shuffled,
        at most GEO_PLAYLIST_SIZE tracks.
        """
        candidates = list(self.tracks)
        if mood:
            candidates = [t for t in candidates if mood.lower() in t.mood.lower()]
        self.rng.shuffle(candidates)

        place = self.rng.choice(PLACE_NAMES)
        playlist = Playlist(
            name=f"{place} Mix",
            tracks=candidates[:GEO_PLAYLIST_SIZE],
            location=location,
            mood=mood,
            genre="Mixed",
            is_geo_tuned=True,
        )
        logger.info(f"Generated geo-tuned playlist '{playlist.name}' with {len(playlist.tracks)} tracks")
        return playlist

    def generate_mood_playlist(self, mood: Mood) -> Playlist:
        """Tracks tagged with `mood`, or the first few catalog tracks if none are."""
        matches = [t for t in self.tracks if t.mood.lower() == mood.value.lower()]
        if not matches:
            logger.info(f"No tracks tagged {mood.value}, falling back to catalog head")
            matches = self.tracks[:MOOD_FALLBACK_SIZE]

        return Playlist(
            name=f"{mood.value} Playlist",
            tracks=list(matches),
            mood=mood.value,
            genre="Mixed",
        )

    def recommended_tracks(self, challenge: Challenge) -> List[Track]:
        return recommendations.recommended_tracks(challenge.category, self.tracks)

    # --- playback -----------------------------------------------------------

    def play(self, track: Track) -> None:
        self.current_track = track
        self.is_playing = True
        self.emit("playback_changed", track)

    def pause(self) -> None:
        self.is_playing = False
        self.emit("playback_changed", self.current_track)

    def stop(self) -> None:
        self.is_playing = False
        self.current_track = None
        self.emit("playback_changed", None)
