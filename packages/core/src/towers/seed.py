"""Sample Indonesian towers loaded into an empty store."""

import logging

from database.models import NewCellTower
from database.RecordStore import RecordStore
from towers.models import TowerFilter
from towers.TowerSearchEngine import TowerSearchEngine

logger = logging.getLogger("cellid")

SEED_TOWERS = [
    NewCellTower(
        mcc=510, mnc=10, lac=4012, cell_id=21451,
        lat=-6.2088, lon=106.8456,
        radio="LTE",
        province="DKI Jakarta",
        district="Jakarta Selatan",
        subdistrict="Setiabudi",
        village="Kuningan",
        address="Jl. HR Rasuna Said, Kuningan",
    ),
    NewCellTower(
        mcc=510, mnc=11, lac=5201, cell_id=63211,
        lat=-6.1751, lon=106.8650,
        radio="GSM",
        province="DKI Jakarta",
        district="Jakarta Pusat",
        subdistrict="Gambir",
        village="Gambir",
        address="Area Monas",
    ),
    NewCellTower(
        mcc=510, mnc=10, lac=4015, cell_id=12345,
        lat=-7.2575, lon=112.7521,
        radio="LTE",
        province="Jawa Timur",
        district="Surabaya",
        subdistrict="Gubeng",
        village="Gubeng",
        address="Jl. Gubeng Pojok",
    ),
    NewCellTower(
        mcc=510, mnc=89, lac=3021, cell_id=98765,
        lat=-8.6705, lon=115.2126,
        radio="5G",
        province="Bali",
        district="Denpasar",
        subdistrict="Denpasar Barat",
        village="Pemecutan",
        address="Jl. Gajah Mada",
    ),
    NewCellTower(
        mcc=510, mnc=1, lac=1001, cell_id=55432,
        lat=-0.0263, lon=109.3425,
        radio="UMTS",
        province="Kalimantan Barat",
        district="Pontianak",
        subdistrict="Pontianak Selatan",
        village="Bansir Laut",
        address="Jl. Ahmad Yani",
    ),
]


def seed_if_empty(engine: TowerSearchEngine, store: RecordStore) -> int:
    """Insert SEED_TOWERS when the store holds no towers.

    Returns:
        The number of towers inserted (0 if the store already had data).
    """
    if engine.search(TowerFilter()):
        return 0

    logger.info("Seeding database with Indonesian cell towers...")
    for tower in SEED_TOWERS:
        store.create_tower(tower)
    logger.info("Seeding complete. towers=%d", len(SEED_TOWERS))
    return len(SEED_TOWERS)
