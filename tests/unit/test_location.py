from unittest.mock import MagicMock

from geopy.exc import GeocoderTimedOut

from lifetunes.adapters.clients.location import LocationProvider, DEFAULT_MAP_CENTER
from lifetunes.core.models import LocationPermission


class TestLocationProvider:

    def test_location_requires_permission(self, san_francisco):
        provider = LocationProvider()
        provider.update_location(san_francisco)

        assert provider.current_location() is None
        assert provider.map_center() == DEFAULT_MAP_CENTER

    def test_granted_permission(self, san_francisco):
        provider = LocationProvider()
        listener = MagicMock()
        provider.subscribe("location_changed", listener)

        assert provider.request_permission(granted=True) is LocationPermission.AUTHORIZED
        provider.update_location(san_francisco)

        assert provider.current_location() == san_francisco
        assert provider.map_center() == san_francisco
        listener.assert_called_once_with(san_francisco)

    def test_denial_sticks(self):
        provider = LocationProvider()
        provider.request_permission(granted=False)

        assert provider.request_permission(granted=True) is LocationPermission.DENIED
        assert provider.is_enabled is False

    def test_revoking_clears_location(self, san_francisco):
        provider = LocationProvider(permission=LocationPermission.AUTHORIZED)
        provider.update_location(san_francisco)

        provider.set_permission(LocationPermission.DENIED)

        assert provider.location is None

    # ========================================================================
    # REVERSE GEOCODING
    # ========================================================================

    def test_location_name(self, san_francisco):
        geocoder = MagicMock()
        geocoder.reverse.return_value.raw = {
            "address": {"city": "San Francisco", "state": "California", "country": "United States"}
        }
        provider = LocationProvider(geocoder=geocoder)

        assert provider.location_name(san_francisco) == "San Francisco, California, United States"
        geocoder.reverse.assert_called_once_with(san_francisco.as_tuple(), language="en")

    def test_location_name_falls_back_to_town(self, san_francisco):
        geocoder = MagicMock()
        geocoder.reverse.return_value.raw = {"address": {"town": "Sausalito", "country": "United States"}}

        assert LocationProvider(geocoder=geocoder).location_name(san_francisco) == "Sausalito, United States"

    def test_location_name_no_result(self, san_francisco):
        geocoder = MagicMock()
        geocoder.reverse.return_value = None
        assert LocationProvider(geocoder=geocoder).location_name(san_francisco) is None

    def test_location_name_geocoder_error(self, san_francisco):
        geocoder = MagicMock()
        geocoder.reverse.side_effect = GeocoderTimedOut("timeout")
        assert LocationProvider(geocoder=geocoder).location_name(san_francisco) is None
