"""Record types held by the store."""

from dataclasses import dataclass
from datetime import datetime

DEFAULT_RANGE_METERS = 1000

# SQLite INTEGER is a signed 64-bit value.
MAX_INTEGER = 2**63 - 1
MIN_INTEGER = -(2**63)


@dataclass(frozen=True)
class NewCellTower:
    """Insert shape of a tower record (no id, no timestamp yet).

    A missing ``range`` (None) is stored as ``DEFAULT_RANGE_METERS``.

    Raises:
        ValueError: If any administrative level is empty.
    """

    mcc: int
    mnc: int
    lac: int
    cell_id: int
    lat: float
    lon: float
    radio: str
    province: str
    district: str
    subdistrict: str
    village: str
    address: str | None = None
    range: int | None = DEFAULT_RANGE_METERS

    def __post_init__(self) -> None:
        for name in ("province", "district", "subdistrict", "village"):
            if not str(getattr(self, name) or "").strip():
                raise ValueError(f"{name} must not be empty")
        if self.range is None:
            object.__setattr__(self, "range", DEFAULT_RANGE_METERS)


@dataclass(frozen=True)
class CellTower:
    """A stored BTS record.

    Attributes:
        id: Assigned by the store, immutable.
        mcc, mnc, lac, cell_id: Network identifiers; the tuple is not unique.
        lat, lon: Position in degrees.
        radio: Technology tag, free text ("GSM", "UMTS", "LTE", "5G", ...).
        range: Coverage radius in meters.
        province, district, subdistrict, village: Administrative hierarchy.
        address: Optional free-text address.
        updated_at: Creation time; there is no update path.
    """

    id: int
    mcc: int
    mnc: int
    lac: int
    cell_id: int
    lat: float
    lon: float
    radio: str
    range: int | None
    province: str
    district: str
    subdistrict: str
    village: str
    address: str | None
    updated_at: datetime


@dataclass(frozen=True)
class ApiKey:
    """An access token record."""

    id: int
    key: str
    is_active: bool
    created_at: datetime
    last_used_at: datetime | None = None
