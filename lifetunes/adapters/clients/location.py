"""
Location provider: permission state, last known position, place names.

The device location APIs live outside this package; callers push fixes in
through `update_location`. Absence of a location is a normal state, never an
error.
"""

import logging
from typing import Optional

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from lifetunes.core.events import EventEmitter
from lifetunes.core.models import Coordinate, LocationPermission

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

GEOCODER_USER_AGENT = "lifetunes_app"
GEOCODER_TIMEOUT = 10

# San Francisco, used to centre maps when no fix is available
DEFAULT_MAP_CENTER = Coordinate(37.7749, -122.4194)


# ============================================================================
# PROVIDER
# ============================================================================

class LocationProvider(EventEmitter):
    """
    Tracks permission state and the most recent location fix.

    Events:
        permission_changed: payload is the LocationPermission.
        location_changed: payload is the new Coordinate.
    """

    def __init__(self, permission: LocationPermission = LocationPermission.NOT_DETERMINED,
                 geocoder=None):
        super().__init__()
        self.permission = permission
        self.location: Optional[Coordinate] = None
        self._geocoder = geocoder

    @property
    def is_enabled(self) -> bool:
        return self.permission is LocationPermission.AUTHORIZED

    def request_permission(self, granted: bool) -> LocationPermission:
        """
        Resolves a pending permission request.

        Only NOT_DETERMINED transitions; an explicit denial sticks until
        `set_permission` is called by the platform layer.
        """
        if self.permission is LocationPermission.NOT_DETERMINED:
            self.set_permission(LocationPermission.AUTHORIZED if granted else LocationPermission.DENIED)
        return self.permission

    def set_permission(self, permission: LocationPermission) -> None:
        self.permission = permission
        if permission is not LocationPermission.AUTHORIZED:
            self.location = None
        logger.info(f"Location permission: {permission.value}")
        self.emit("permission_changed", permission)

    def update_location(self, location: Coordinate) -> None:
        """Accepts a fix from the platform; ignored without permission."""
        if not self.is_enabled:
            logger.debug("Ignoring location update without permission")
            return
        self.location = location
        self.emit("location_changed", location)

    def current_location(self) -> Optional[Coordinate]:
        return self.location if self.is_enabled else None

    def map_center(self) -> Coordinate:
        return self.current_location() or DEFAULT_MAP_CENTER

    # --- reverse geocoding --------------------------------------------------

    @property
    def geocoder(self):
        if self._geocoder is None:
            self._geocoder = Nominatim(user_agent=GEOCODER_USER_AGENT, timeout=GEOCODER_TIMEOUT)
        return self._geocoder

    def location_name(self, location: Coordinate) -> Optional[str]:
        """
        "City, State, Country" for a coordinate, or None when unavailable.
        """
        try:
            place = self.geocoder.reverse(location.as_tuple(), language="en")
        except GeopyError as e:
            logger.warning(f"Reverse geocoding failed for {location}: {e}")
            return None

        if place is None:
            return None

        address = place.raw.get("address", {}) if isinstance(place.raw, dict) else {}
        locality = address.get("city") or address.get("town") or address.get("village")
        parts = [p for p in (locality, address.get("state"), address.get("country")) if p]
        name = ", ".join(parts)
        return name or None
