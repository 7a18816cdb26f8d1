"""
Schema DDL for the cell tower lookup database.

Defines both tables and their indexes as a single SQL script. The script
is idempotent (``IF NOT EXISTS``) so it is applied every time a
DatabaseProvider opens a database, fresh or existing.

Tables:
    cell_towers  - BTS records keyed by an integer id. The network tuple
                   (mcc, mnc, lac, cell_id) is deliberately NOT unique:
                   real-world datasets contain duplicates.
    api_keys     - Opaque access tokens; `key` is globally unique.
"""

# Complete schema DDL as a single SQL script.
SCHEMA_SQL = """
-- ============================================================================
-- CELL TOWERS: one row per transceiver record
-- ============================================================================

CREATE TABLE IF NOT EXISTS cell_towers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    mcc INTEGER NOT NULL,          -- Mobile Country Code (510 for Indonesia)
    mnc INTEGER NOT NULL,          -- Mobile Network Code
    lac INTEGER NOT NULL,          -- Location Area Code
    cell_id INTEGER NOT NULL,
    lat REAL NOT NULL,
    lon REAL NOT NULL,
    radio TEXT NOT NULL,           -- GSM, UMTS, LTE, 5G, ... (open set)
    "range" INTEGER DEFAULT 1000,  -- Coverage radius in meters

    -- Administrative hierarchy
    province TEXT NOT NULL,
    district TEXT NOT NULL,        -- Kabupaten/Kota
    subdistrict TEXT NOT NULL,     -- Kecamatan
    village TEXT NOT NULL,         -- Kelurahan/Desa
    address TEXT,

    updated_at TEXT NOT NULL       -- ISO-8601, UTC
);

CREATE INDEX IF NOT EXISTS idx_towers_network ON cell_towers(mcc, mnc);
CREATE INDEX IF NOT EXISTS idx_towers_cell ON cell_towers(lac, cell_id);
CREATE INDEX IF NOT EXISTS idx_towers_position ON cell_towers(lat, lon);

-- ============================================================================
-- API KEYS: access tokens minted by the public generator
-- ============================================================================

CREATE TABLE IF NOT EXISTS api_keys (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    last_used_at TEXT
);
"""
