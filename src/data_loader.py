"""
Data loading module
Reads the session log, the hotspot catalog and the site correspondence table
from local CSV files and enforces their column contracts
"""
import logging
from pathlib import Path

import pandas as pd

from config import (
    SESSIONS_FILE,
    HOTSPOTS_FILE,
    CORRESPONDENCE_FILE,
    SESSION_COLUMNS,
    HOTSPOT_COLUMNS,
    CORRESPONDENCE_COLUMNS,
    NULL_TOKENS,
    FILE_ENCODING,
)

logger = logging.getLogger(__name__)


class DataSchemaError(ValueError):
    """Raised when an input file does not match its column contract"""


def _read_raw_csv(path, sep, setting_name):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(
            f"❌ Input file not found: {path}\n"
            f"Set {setting_name} in your .env or place the file in {path.parent}"
        )

    logger.info("Loading %s", path)
    # Everything is read as text; only the literal null tokens become missing
    df = pd.read_csv(
        path,
        sep=sep,
        dtype=str,
        na_values=NULL_TOKENS,
        keep_default_na=False,
        encoding=FILE_ENCODING,
    )
    logger.info("Loaded %s rows from %s", f"{len(df):,}", path.name)
    return df


def _rename_positional(df, expected, path):
    """Rename columns by position after checking the column count"""
    if len(df.columns) != len(expected):
        raise DataSchemaError(
            f"{path}: expected {len(expected)} columns {expected}, "
            f"found {len(df.columns)} {list(df.columns)}"
        )
    df = df.copy()
    df.columns = expected
    return df


def load_sessions(path=SESSIONS_FILE):
    """
    Load the raw session log

    Args:
        path: Path to the ';'-separated session export

    Returns:
        DataFrame with SESSION_COLUMNS, all values as strings or missing
    """
    df = _read_raw_csv(path, ";", "SESSIONS_FILE")
    return _rename_positional(df, SESSION_COLUMNS, path)


def load_hotspot_catalog(path=HOTSPOTS_FILE):
    """
    Load the hotspot catalog

    Args:
        path: Path to the ';'-separated catalog export

    Returns:
        DataFrame with HOTSPOT_COLUMNS
    """
    df = _read_raw_csv(path, ";", "HOTSPOTS_FILE")
    return _rename_positional(df, HOTSPOT_COLUMNS, path)


def load_correspondence(path=CORRESPONDENCE_FILE):
    """
    Load the hand-maintained site correspondence table

    Args:
        path: Path to the ','-separated correspondence file

    Returns:
        DataFrame with at least CORRESPONDENCE_COLUMNS
    """
    df = _read_raw_csv(path, ",", "CORRESPONDENCE_FILE")
    df.columns = df.columns.str.strip()

    missing = [c for c in CORRESPONDENCE_COLUMNS if c not in df.columns]
    if missing:
        raise DataSchemaError(
            f"{path}: missing required column(s) {missing}, found {list(df.columns)}"
        )
    return df


def load_all_data(sessions_path=None, hotspots_path=None, correspondence_path=None):
    """
    Load all datasets
    Returns: dict with all dataframes
    """
    return {
        'sessions': load_sessions(sessions_path or SESSIONS_FILE),
        'catalog': load_hotspot_catalog(hotspots_path or HOTSPOTS_FILE),
        'correspondence': load_correspondence(correspondence_path or CORRESPONDENCE_FILE),
    }


def validate_data():
    """
    Check that all input files are in place
    Returns: dict with validation results
    """
    return {
        'sessions': SESSIONS_FILE.exists(),
        'hotspot_catalog': HOTSPOTS_FILE.exists(),
        'correspondence': CORRESPONDENCE_FILE.exists(),
    }
