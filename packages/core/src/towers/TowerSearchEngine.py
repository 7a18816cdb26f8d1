"""Tower search: composable equality filters plus a bounding-box proximity filter."""

import logging

from database.models import CellTower
from database.RecordStore import RecordStore
from towers.models import TowerFilter

logger = logging.getLogger("cellid")

# One degree of latitude is roughly 111.32 km. Applied to longitude as well,
# which overestimates the box away from the equator; Indonesia sits within
# about 11 degrees of it.
DEGREES_PER_METER = 1 / 111320

UNFILTERED_LIMIT = 50
FILTERED_LIMIT = 100

_EQUALITY_FIELDS = ("mcc", "mnc", "lac", "cell_id")


def bounding_box(lat: float, lon: float, radius_m: float) -> tuple[float, float, float, float]:
    """Return ``(lat_min, lat_max, lon_min, lon_max)`` around a point.

    The same degree delta is used on both axes, so the box is a square in
    degrees rather than a circle on the ground.
    """
    delta = radius_m * DEGREES_PER_METER
    return (lat - delta, lat + delta, lon - delta, lon + delta)


class TowerSearchEngine:
    """Translates a TowerFilter into store predicates and bounds the result."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def search(self, tower_filter: TowerFilter) -> list[CellTower]:
        """Return towers matching every active criterion.

        Network identifiers equal to zero are ignored, so ``mcc=0`` cannot be
        searched for. With no active criterion the first 50 records are
        returned; otherwise at most 100 matches. Results are ordered by id.
        """
        equals = {
            name: getattr(tower_filter, name)
            for name in _EQUALITY_FIELDS
            if getattr(tower_filter, name)
        }

        ranges: dict[str, tuple[float, float]] = {}
        if tower_filter.lat is not None and tower_filter.lon is not None and tower_filter.radius:
            lat_min, lat_max, lon_min, lon_max = bounding_box(
                tower_filter.lat, tower_filter.lon, tower_filter.radius
            )
            ranges["lat"] = (lat_min, lat_max)
            ranges["lon"] = (lon_min, lon_max)

        if not equals and not ranges:
            return self._store.scan_towers(limit=UNFILTERED_LIMIT)

        towers = self._store.scan_towers(equals, ranges, limit=FILTERED_LIMIT)
        logger.debug(
            "event=tower_search equals=%s box=%s results=%d", equals, ranges or "-", len(towers)
        )
        return towers
