"""Search filter for the tower engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TowerFilter:
    """Optional, independently applicable search criteria.

    A zero or missing network identifier means "not filtered". The
    bounding box applies only when ``lat``, ``lon`` and ``radius`` (meters)
    are all set.
    """

    mcc: int | None = None
    mnc: int | None = None
    lac: int | None = None
    cell_id: int | None = None
    lat: float | None = None
    lon: float | None = None
    radius: float | None = None
