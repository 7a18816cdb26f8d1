"""Record store for cell towers and API keys.

Every public method is a single statement (or a single insert followed by
a read-back) run under a lock, so each write is atomic per record and the
shared connection is never used by two threads at once.
"""

import sqlite3
import threading
from collections.abc import Mapping
from datetime import datetime, timezone

from common.exceptions import DuplicateRecordError, StorageError
from database.models import MAX_INTEGER, MIN_INTEGER, ApiKey, CellTower, NewCellTower

# Filterable tower attributes mapped to their column names.
_TOWER_COLUMNS = {
    "id": "id",
    "mcc": "mcc",
    "mnc": "mnc",
    "lac": "lac",
    "cell_id": "cell_id",
    "lat": "lat",
    "lon": "lon",
    "radio": "radio",
    "province": "province",
    "district": "district",
    "subdistrict": "subdistrict",
    "village": "village",
}

_TOWER_SELECT = (
    'SELECT id, mcc, mnc, lac, cell_id, lat, lon, radio, "range", '
    "province, district, subdistrict, village, address, updated_at "
    "FROM cell_towers"
)

_KEY_SELECT = "SELECT id, key, is_active, created_at, last_used_at FROM api_keys"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_ts(value: str | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromisoformat(value)


def _row_to_tower(row: sqlite3.Row) -> CellTower:
    return CellTower(
        id=row["id"],
        mcc=row["mcc"],
        mnc=row["mnc"],
        lac=row["lac"],
        cell_id=row["cell_id"],
        lat=row["lat"],
        lon=row["lon"],
        radio=row["radio"],
        range=row["range"],
        province=row["province"],
        district=row["district"],
        subdistrict=row["subdistrict"],
        village=row["village"],
        address=row["address"],
        updated_at=_parse_ts(row["updated_at"]),
    )


def _row_to_key(row: sqlite3.Row) -> ApiKey:
    return ApiKey(
        id=row["id"],
        key=row["key"],
        is_active=bool(row["is_active"]),
        created_at=_parse_ts(row["created_at"]),
        last_used_at=_parse_ts(row["last_used_at"]),
    )


class RecordStore:
    """Insert and lookup operations over the tower and key tables."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Towers
    # ------------------------------------------------------------------

    def get_tower(self, tower_id: int) -> CellTower | None:
        """Return the tower with the given id, or None."""
        if not MIN_INTEGER <= tower_id <= MAX_INTEGER:
            return None
        rows = self._fetch(f"{_TOWER_SELECT} WHERE id = ?", (tower_id,))
        return _row_to_tower(rows[0]) if rows else None

    def create_tower(self, tower: NewCellTower) -> CellTower:
        """Insert one tower and return the stored record.

        Raises:
            StorageError: If the insert fails.
        """
        updated_at = _utcnow().isoformat()
        params = (
            tower.mcc, tower.mnc, tower.lac, tower.cell_id,
            tower.lat, tower.lon, tower.radio, tower.range,
            tower.province, tower.district, tower.subdistrict, tower.village,
            tower.address, updated_at,
        )
        with self._lock:
            try:
                with self._connection:
                    cursor = self._connection.execute(
                        "INSERT INTO cell_towers "
                        '(mcc, mnc, lac, cell_id, lat, lon, radio, "range", '
                        "province, district, subdistrict, village, address, updated_at) "
                        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                        params,
                    )
                new_id = cursor.lastrowid
            except (sqlite3.Error, OverflowError) as e:
                raise StorageError(f"Failed to insert cell tower: {e}") from e
            stored = self.get_tower(new_id)
        if stored is None:
            raise StorageError(f"Cell tower {new_id} vanished after insert")
        return stored

    def scan_towers(
        self,
        equals: Mapping[str, int] | None = None,
        ranges: Mapping[str, tuple[float, float]] | None = None,
        limit: int = 100,
    ) -> list[CellTower]:
        """Return towers matching every predicate, ordered by id.

        Args:
            equals: Attribute name to exact value.
            ranges: Attribute name to an inclusive ``(low, high)`` pair.
            limit: Maximum number of rows returned.

        Raises:
            ValueError: If a predicate names an unknown attribute.
            StorageError: If the query fails.
        """
        clauses: list[str] = []
        params: list[object] = []

        for name, value in (equals or {}).items():
            clauses.append(f"{self._column(name)} = ?")
            params.append(value)

        for name, (low, high) in (ranges or {}).items():
            clauses.append(f"{self._column(name)} BETWEEN ? AND ?")
            params.extend((low, high))

        sql = _TOWER_SELECT
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY id LIMIT ?"
        params.append(limit)

        return [_row_to_tower(row) for row in self._fetch(sql, tuple(params))]

    def count_towers(self) -> int:
        rows = self._fetch("SELECT COUNT(*) AS n FROM cell_towers", ())
        return rows[0]["n"]

    # ------------------------------------------------------------------
    # API keys
    # ------------------------------------------------------------------

    def insert_api_key(self, key: str, is_active: bool = True) -> ApiKey:
        """Insert a new key record.

        Raises:
            DuplicateRecordError: If the key value already exists.
            StorageError: On any other database failure.
        """
        created_at = _utcnow().isoformat()
        with self._lock:
            try:
                with self._connection:
                    cursor = self._connection.execute(
                        "INSERT INTO api_keys (key, is_active, created_at) VALUES (?, ?, ?)",
                        (key, int(is_active), created_at),
                    )
            except sqlite3.IntegrityError as e:
                raise DuplicateRecordError(f"API key already exists: {e}") from e
            except sqlite3.Error as e:
                raise StorageError(f"Failed to insert API key: {e}") from e
            rows = self._fetch(f"{_KEY_SELECT} WHERE id = ?", (cursor.lastrowid,))
        return _row_to_key(rows[0])

    def find_api_key(self, key: str) -> ApiKey | None:
        rows = self._fetch(f"{_KEY_SELECT} WHERE key = ?", (key,))
        return _row_to_key(rows[0]) if rows else None

    def touch_api_key(self, key_id: int, when: datetime | None = None) -> None:
        """Set ``last_used_at`` on a key record."""
        stamp = (when or _utcnow()).isoformat()
        self._write(
            "UPDATE api_keys SET last_used_at = ? WHERE id = ?", (stamp, key_id)
        )

    def set_api_key_active(self, key: str, active: bool) -> bool:
        """Enable or disable a key. Returns False if the key does not exist."""
        changed = self._write(
            "UPDATE api_keys SET is_active = ? WHERE key = ?", (int(active), key)
        )
        return changed > 0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _column(name: str) -> str:
        try:
            return _TOWER_COLUMNS[name]
        except KeyError:
            raise ValueError(f"Unknown tower attribute: {name!r}") from None

    def _fetch(self, sql: str, params: tuple) -> list[sqlite3.Row]:
        with self._lock:
            try:
                return self._connection.execute(sql, params).fetchall()
            except (sqlite3.Error, OverflowError) as e:
                raise StorageError(f"Query execution failed: {e}") from e

    def _write(self, sql: str, params: tuple) -> int:
        with self._lock:
            try:
                with self._connection:
                    return self._connection.execute(sql, params).rowcount
            except (sqlite3.Error, OverflowError) as e:
                raise StorageError(f"Write failed: {e}") from e
