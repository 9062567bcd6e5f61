"""
Saved playlist library.
"""

import logging
from typing import List, Optional

from lifetunes.core import geo
from lifetunes.core.events import EventEmitter
from lifetunes.core.models import Coordinate, Playlist

logger = logging.getLogger(__name__)

NEARBY_RADIUS_METERS = 5000


class PlaylistLibrary(EventEmitter):
    """
    Persisted list of playlists plus the one currently selected.

    Events:
        playlists_changed: payload is the playlist list.
    """

    def __init__(self, repository):
        super().__init__()
        self.repository = repository
        self.playlists: List[Playlist] = repository.load_playlists()
        self.current_playlist: Optional[Playlist] = None

    def _save(self) -> None:
        self.repository.save_playlists(self.playlists)
        self.emit("playlists_changed", list(self.playlists))

    def add(self, playlist: Playlist) -> bool:
        """Adds and selects a playlist. Returns False if its id is already saved."""
        self.current_playlist = playlist
        if any(p.id == playlist.id for p in self.playlists):
            return False
        self.playlists.append(playlist)
        self._save()
        logger.info(f"Saved playlist '{playlist.name}'")
        return True

    def delete(self, playlist_id: str) -> bool:
        before = len(self.playlists)
        self.playlists = [p for p in self.playlists if p.id != playlist_id]
        if self.current_playlist is not None and self.current_playlist.id == playlist_id:
            self.current_playlist = None
        if len(self.playlists) == before:
            return False
        self._save()
        return True

    def for_location(self, center: Coordinate,
                     radius: float = NEARBY_RADIUS_METERS) -> List[Playlist]:
        """Playlists tagged with a location within `radius` meters of center."""
        return geo.near(self.playlists, center, radius)

    def for_mood(self, mood: str) -> List[Playlist]:
        return [p for p in self.playlists if p.mood.lower() == mood.lower()]
