"""CSV record store.

Venues and discovered venues live in flat CSV files with fixed headers.
Every save rewrites the whole file, after copying the previous version to a
sibling backup file.
"""

import csv
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from dotenv import load_dotenv
from loguru import logger

# Load environment variables from .env file
load_dotenv()


VENUE_FIELDS = [
    "name",
    "location",
    "address",
    "venue_type",
    "capacity",
    "contact_email",
    "contact_phone",
    "contact_name",
    "website",
    "typical_genres",
]

DISCOVERED_FIELDS = [
    "name",
    "location",
    "address",
    "venue_type",
    "website",
    "discovered_from",
    "discovery_date",
    "status",
]

DEFAULT_VENUES_PATH = "data/venues_master.csv"
DEFAULT_DISCOVERED_PATH = "data/discovered_venues.csv"
BACKUP_SUFFIX = "_backup"


class StoreError(Exception):
    """Raised when a CSV store cannot be read or written."""


class CSVStore:
    """A CSV file with a fixed, ordered header."""

    def __init__(self, path, fieldnames: List[str], backup_suffix: str = BACKUP_SUFFIX):
        self.path = Path(path)
        self.fieldnames = list(fieldnames)
        self.backup_suffix = backup_suffix

    def __repr__(self) -> str:
        return f"CSVStore({str(self.path)!r})"

    def backup_path_for(self, suffix: Optional[str] = None) -> Path:
        """Sibling backup path, e.g. venues_master.csv -> venues_master_backup.csv."""
        suffix = suffix or self.backup_suffix
        return self.path.with_name(f"{self.path.stem}{suffix}{self.path.suffix}")

    @property
    def backup_path(self) -> Path:
        return self.backup_path_for()

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> List[Dict[str, str]]:
        """Read all rows as dicts keyed by the store's fieldnames.

        A missing or empty file is an empty collection. Unknown columns are
        dropped, missing columns come back as empty strings, and blank lines
        are skipped.
        """
        if not self.path.exists() or self.path.stat().st_size == 0:
            return []

        try:
            with open(self.path, newline="", encoding="utf-8-sig") as f:
                reader = csv.DictReader(f)
                rows = []
                for raw in reader:
                    row = {field: (raw.get(field) or "").strip() for field in self.fieldnames}
                    if any(row.values()):
                        rows.append(row)
        except (OSError, csv.Error, UnicodeDecodeError) as e:
            raise StoreError(f"Failed to read {self.path}: {e}") from e

        return rows

    def backup(self, suffix: Optional[str] = None) -> Optional[Path]:
        """Copy the current file to its backup sibling. No-op if there is no file yet."""
        if not self.path.exists():
            return None
        target = self.backup_path_for(suffix)
        try:
            shutil.copy2(self.path, target)
        except OSError as e:
            raise StoreError(f"Failed to back up {self.path} to {target}: {e}") from e
        logger.debug(f"Backed up {self.path} -> {target}")
        return target

    def save(self, rows: Iterable[Dict[str, object]], backup_suffix: Optional[str] = None) -> int:
        """Back up the previous file, then rewrite the whole store.

        The new content is written to a temp file and moved into place, so a
        failed write never leaves a half-written store behind.

        Returns:
            Number of rows written
        """
        rows = list(rows)
        self.backup(backup_suffix)

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                newline="",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.stem}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                writer = csv.DictWriter(f, fieldnames=self.fieldnames, extrasaction="ignore")
                writer.writeheader()
                for row in rows:
                    writer.writerow({k: "" if v is None else v for k, v in row.items()})
            os.replace(tmp_name, self.path)
        except (OSError, csv.Error) as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreError(f"Failed to write {self.path}: {e}") from e

        logger.debug(f"Saved {len(rows)} rows to {self.path}")
        return len(rows)


def get_venue_store() -> CSVStore:
    """Store for the master venue directory (VENUES_CSV_PATH)."""
    return CSVStore(os.getenv("VENUES_CSV_PATH", DEFAULT_VENUES_PATH), VENUE_FIELDS)


def get_discovered_store() -> CSVStore:
    """Store for search-discovered venue candidates (DISCOVERED_VENUES_CSV_PATH)."""
    return CSVStore(os.getenv("DISCOVERED_VENUES_CSV_PATH", DEFAULT_DISCOVERED_PATH), DISCOVERED_FIELDS)
