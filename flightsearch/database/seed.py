"""
Sample airport data and CSV import for the flight search database.

Passenger figures are annual totals rounded to the nearest thousand and are
only used for ranking.
"""

import csv
import logging
from pathlib import Path
from typing import Iterable, List, Set, Tuple, Union

from sqlalchemy import func

from .config import DatabaseConfig
from .models import Airport

logger = logging.getLogger(__name__)

# (iata_code, name, passengers)
SAMPLE_AIRPORTS: List[Tuple[str, str, int]] = [
    ("ATL", "Hartsfield-Jackson Atlanta International Airport", 104_653_000),
    ("DXB", "Dubai International Airport", 86_994_000),
    ("DFW", "Dallas/Fort Worth International Airport", 81_755_000),
    ("LHR", "London Heathrow Airport", 79_183_000),
    ("HND", "Tokyo Haneda Airport", 78_719_000),
    ("DEN", "Denver International Airport", 77_837_000),
    ("IST", "Istanbul Airport", 76_027_000),
    ("LAX", "Los Angeles International Airport", 75_050_000),
    ("ORD", "O'Hare International Airport", 73_894_000),
    ("CDG", "Paris Charles de Gaulle Airport", 67_421_000),
    ("JFK", "John F. Kennedy International Airport", 62_464_000),
    ("AMS", "Amsterdam Airport Schiphol", 61_890_000),
    ("FRA", "Frankfurt Airport", 59_355_000),
    ("SIN", "Singapore Changi Airport", 58_947_000),
    ("MAD", "Adolfo Suarez Madrid-Barajas Airport", 60_221_000),
    ("SFO", "San Francisco International Airport", 50_196_000),
    ("MUC", "Munich Airport", 37_036_000),
    ("FCO", "Leonardo da Vinci-Fiumicino Airport", 40_472_000),
    ("LGW", "London Gatwick Airport", 40_894_000),
    ("ZRH", "Zurich Airport", 28_858_000),
    ("VIE", "Vienna International Airport", 29_531_000),
    ("STN", "London Stansted Airport", 27_950_000),
    ("CPH", "Copenhagen Airport", 26_826_000),
    ("DUB", "Dublin Airport", 33_143_000),
    ("BER", "Berlin Brandenburg Airport", 23_065_000),
    ("LTN", "London Luton Airport", 16_391_000),
    ("HAM", "Hamburg Airport", 13_576_000),
    ("LCY", "London City Airport", 3_512_000),
]


def seed_airports(db_config: DatabaseConfig, rows: Iterable[Tuple[str, str, int]]) -> int:
    """
    Insert airports into an empty airport table.

    Args:
        db_config: Initialized database configuration
        rows: (iata_code, name, passengers) tuples

    Returns:
        int: Number of airports inserted, 0 if the table already had data
    """
    with db_config.get_session_context() as session:
        existing = session.query(func.count(Airport.id)).scalar()
        if existing:
            logger.info(f"Airport table already holds {existing} rows, skipping seed")
            return 0

        airports = [
            Airport(iata_code=code, name=name, passengers=passengers)
            for code, name, passengers in rows
        ]
        session.add_all(airports)

    logger.info(f"Seeded {len(airports)} airports")
    return len(airports)


def seed_sample_airports(db_config: DatabaseConfig) -> int:
    """Seed the bundled sample airports."""
    return seed_airports(db_config, SAMPLE_AIRPORTS)


def read_airports_csv(path: Union[str, Path]) -> List[Tuple[str, str, int]]:
    """
    Read ``iata_code,name,passengers`` rows from a CSV file with a header.

    Rows without a 3-letter code or a name are skipped, as are repeats of a
    code already read (the first row wins). A missing or malformed passenger
    count is read as 0.
    """
    rows: List[Tuple[str, str, int]] = []
    seen: Set[str] = set()
    skipped = 0

    with open(path, newline="", encoding="utf-8") as fh:
        for row in csv.DictReader(fh):
            code = (row.get("iata_code") or "").strip().upper()
            name = (row.get("name") or "").strip()
            if len(code) != 3 or not name or code in seen:
                skipped += 1
                continue
            try:
                passengers = int((row.get("passengers") or "0").strip() or 0)
            except ValueError:
                passengers = 0
            seen.add(code)
            rows.append((code, name, passengers))

    logger.info(f"Read {len(rows)} airports from {path} (skipped {skipped})")
    return rows


def import_airports_csv(db_config: DatabaseConfig, path: Union[str, Path]) -> int:
    """Seed the airport table from a CSV file."""
    return seed_airports(db_config, read_airports_csv(path))
