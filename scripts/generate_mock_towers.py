"""
Cell tower lookup: mock data generation.

Generates a SQLite database of random but plausible Indonesian cell towers
spread around a fixed set of regions, for load tests and manual poking at
the API. Operators and radio mix follow the real Indonesian market only
loosely.

Usage:
    python scripts/generate_mock_towers.py [--output PATH] [--count N] [--seed N]
"""

import argparse
import random
import sys
from pathlib import Path

from common.exceptions import StorageError
from database.DatabaseProvider import DatabaseProvider
from database.models import NewCellTower
from database.RecordStore import RecordStore

MCC_INDONESIA = 510

# MNC -> operator
OPERATORS = {
    1: "Indosat",
    9: "Smartfren",
    10: "Telkomsel",
    11: "XL Axiata",
    89: "Tri",
}

RADIO_WEIGHTS = [("GSM", 0.15), ("UMTS", 0.15), ("LTE", 0.6), ("5G", 0.1)]

# Region centers; towers are scattered within SPREAD_DEGREES of each.
REGION_DEFINITIONS = [
    {"province": "DKI Jakarta", "district": "Jakarta Selatan", "subdistrict": "Setiabudi", "village": "Kuningan", "lat": -6.2088, "lon": 106.8456},
    {"province": "DKI Jakarta", "district": "Jakarta Pusat", "subdistrict": "Gambir", "village": "Gambir", "lat": -6.1751, "lon": 106.8650},
    {"province": "Jawa Barat", "district": "Bandung", "subdistrict": "Coblong", "village": "Dago", "lat": -6.8915, "lon": 107.6107},
    {"province": "Jawa Tengah", "district": "Semarang", "subdistrict": "Semarang Tengah", "village": "Sekayu", "lat": -6.9839, "lon": 110.4097},
    {"province": "Jawa Timur", "district": "Surabaya", "subdistrict": "Gubeng", "village": "Gubeng", "lat": -7.2575, "lon": 112.7521},
    {"province": "Bali", "district": "Denpasar", "subdistrict": "Denpasar Barat", "village": "Pemecutan", "lat": -8.6705, "lon": 115.2126},
    {"province": "Sumatera Utara", "district": "Medan", "subdistrict": "Medan Baru", "village": "Petisah Hulu", "lat": 3.5952, "lon": 98.6722},
    {"province": "Kalimantan Barat", "district": "Pontianak", "subdistrict": "Pontianak Selatan", "village": "Bansir Laut", "lat": -0.0263, "lon": 109.3425},
    {"province": "Sulawesi Selatan", "district": "Makassar", "subdistrict": "Ujung Pandang", "village": "Losari", "lat": -5.1477, "lon": 119.4327},
    {"province": "Papua", "district": "Jayapura", "subdistrict": "Jayapura Utara", "village": "Gurabesi", "lat": -2.5337, "lon": 140.7181},
]

SPREAD_DEGREES = 0.08
DEFAULT_COUNT = 5000


def parse_args(argv=None):
    """Parse command-line arguments for the mock data generator.

    Returns:
        argparse.Namespace with 'output' (Path), 'count' (int) and 'seed' (int or None).
    """
    parser = argparse.ArgumentParser(
        description="Generate mock Indonesian cell tower data (SQLite).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("data/mock_towers.db"),
        help="Output path for the SQLite database file (default: data/mock_towers.db)",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=DEFAULT_COUNT,
        help=f"Number of towers to generate (default: {DEFAULT_COUNT})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible data generation (default: random)",
    )
    return parser.parse_args(argv)


def _pick_radio(rng):
    radios, weights = zip(*RADIO_WEIGHTS)
    return rng.choices(radios, weights=weights, k=1)[0]


def generate_tower(rng):
    """Build one random NewCellTower near a random region center."""
    region = rng.choice(REGION_DEFINITIONS)
    radio = _pick_radio(rng)
    # Macro cells reach further on older radios.
    range_m = {"GSM": 3000, "UMTS": 2000, "LTE": 1000, "5G": 300}[radio]
    return NewCellTower(
        mcc=MCC_INDONESIA,
        mnc=rng.choice(list(OPERATORS)),
        lac=rng.randint(1000, 9999),
        cell_id=rng.randint(1, 268435455),
        lat=round(region["lat"] + rng.uniform(-SPREAD_DEGREES, SPREAD_DEGREES), 6),
        lon=round(region["lon"] + rng.uniform(-SPREAD_DEGREES, SPREAD_DEGREES), 6),
        radio=radio,
        range=int(range_m * rng.uniform(0.5, 1.5)),
        province=region["province"],
        district=region["district"],
        subdistrict=region["subdistrict"],
        village=region["village"],
        address=None,
    )


def generate_towers(store, count, rng):
    """Insert `count` random towers. Returns per-radio counts."""
    per_radio = {radio: 0 for radio, _ in RADIO_WEIGHTS}
    for _ in range(count):
        tower = store.create_tower(generate_tower(rng))
        per_radio[tower.radio] += 1
    return per_radio


def print_summary(output_path, seed, per_radio):
    print("Mock towers generated successfully.")
    print(f"  Output: {output_path}")
    print(f"  Seed:   {seed}")
    print(f"  Towers: {sum(per_radio.values())}")
    for radio, n in per_radio.items():
        print(f"    {radio:<5} {n}")


def main(argv=None):
    """Create a fresh database at --output and fill it with random towers."""
    args = parse_args(argv)
    output_path = args.output

    # If no seed provided, pick one and print it so the run can be reproduced.
    seed = args.seed if args.seed is not None else random.randint(0, 2**31 - 1)
    rng = random.Random(seed)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if output_path.exists():
            output_path.unlink()
    except OSError as e:
        print(f"Error: Cannot prepare output path {output_path}: {e}", file=sys.stderr)
        return 1

    provider = None
    try:
        provider = DatabaseProvider(str(output_path))
        per_radio = generate_towers(RecordStore(provider.get_connection()), args.count, rng)
    except (ConnectionError, StorageError) as e:
        print(f"Error: Database operation failed: {e}", file=sys.stderr)
        if provider:
            provider.close()
            provider = None
        if output_path.exists():
            output_path.unlink()
        return 1
    finally:
        if provider:
            provider.close()

    print_summary(output_path, seed, per_radio)
    return 0


if __name__ == "__main__":
    sys.exit(main())
