"""
Geo-index helpers: grid cells and radius queries over located items.
"""

from typing import Callable, Dict, Iterable, List, Optional, TypeVar

from geopy.distance import great_circle

from lifetunes.core.models import Coordinate

T = TypeVar("T")

# x1000 truncation, roughly 100 m cells
DEFAULT_CELL_PRECISION = 1000
CELL_SEPARATOR = "_"


def cell_key(location: Coordinate, precision: int = DEFAULT_CELL_PRECISION) -> str:
    """
    Grid cell key for a coordinate.

    Latitude and longitude are scaled by `precision` and truncated toward zero,
    so (37.0001, -122.0001) and (37.0, -122.0) share the cell "37000_-122000".
    """
    lat = int(location.latitude * precision)
    lon = int(location.longitude * precision)
    return f"{lat}{CELL_SEPARATOR}{lon}"


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in meters."""
    return great_circle(a.as_tuple(), b.as_tuple()).meters


def _location_of(item) -> Optional[Coordinate]:
    if isinstance(item, Coordinate):
        return item
    return getattr(item, "location", None)


def near(items: Iterable[T], center: Coordinate, radius_meters: float,
         key: Callable[[T], Optional[Coordinate]] = _location_of) -> List[T]:
    """
    Items whose location lies within `radius_meters` of `center` (inclusive).

    Items without a location are skipped. An empty input yields an empty list.
    """
    result = []
    for item in items:
        location = key(item)
        if location is None:
            continue
        if distance_meters(center, location) <= radius_meters:
            result.append(item)
    return result


def group_by_cell(items: Iterable[T], precision: int = DEFAULT_CELL_PRECISION,
                  key: Callable[[T], Optional[Coordinate]] = _location_of) -> Dict[str, List[T]]:
    """Groups located items by cell key, preserving first-seen cell order."""
    groups: Dict[str, List[T]] = {}
    for item in items:
        location = key(item)
        if location is None:
            continue
        groups.setdefault(cell_key(location, precision), []).append(item)
    return groups
