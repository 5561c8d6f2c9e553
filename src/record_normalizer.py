"""
Record normalization module
Turns raw session strings into typed values: localized timestamps,
megabyte volumes and language/country codes
"""
import logging

import numpy as np
import pandas as pd

from config import TIMEZONE
from utils.constants import BYTES_PER_MEGABYTE

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# language_COUNTRY, language alone or COUNTRY alone
LOCALE_PATTERN = r"^(?:([a-z]{2})_([A-Z]{2})|([a-z]{2})|([A-Z]{2}))$"

TEXT_COLUMNS = ["session_id", "site", "device", "os", "browser", "langue"]


def parse_timestamps(values, tz=TIMEZONE):
    """
    Parse compact ISO timestamps (YYYY-MM-DDTHH:MM:SS) as local time

    Args:
        values: Series of raw timestamp strings
        tz: Timezone the wall-clock times belong to

    Returns:
        Series of tz-aware timestamps, NaT where the value cannot be parsed
        or the wall-clock time does not exist
    """
    text = values.astype("string").str.strip().str.replace("T", " ", n=1, regex=False)
    parsed = pd.to_datetime(text, format=TIMESTAMP_FORMAT, errors="coerce")
    # Repeated hour when clocks fall back: read as summer time
    summer_time = np.ones(len(parsed), dtype=bool)
    return parsed.dt.tz_localize(tz, ambiguous=summer_time, nonexistent="NaT")


def octets_to_megabytes(values):
    """Convert byte counters to megabytes rounded to 2 decimals"""
    octets = pd.to_numeric(values, errors="coerce")
    return (octets / BYTES_PER_MEGABYTE).round(2)


def split_locale(values):
    """
    Split locale strings into language and country codes

    Args:
        values: Series of locale strings such as "fr_FR", "en" or "DE"

    Returns:
        DataFrame with 'language' and 'country' columns (missing when absent)
    """
    parts = values.astype("string").str.extract(LOCALE_PATTERN)
    return pd.DataFrame({
        'language': parts[0].fillna(parts[2]),
        'country': parts[1].fillna(parts[3]),
    }, index=values.index)


def normalize_sessions(raw_df):
    """
    Normalize raw session rows

    Args:
        raw_df: DataFrame as returned by data_loader.load_sessions

    Returns:
        New DataFrame sorted by start_time, byte counters replaced by
        input_mo/output_mo and locale split into language/country
    """
    df = raw_df.copy()

    for col in TEXT_COLUMNS:
        df[col] = df[col].astype("string")

    df['start_time'] = parse_timestamps(raw_df['start_time'])
    df['stop_time'] = parse_timestamps(raw_df['stop_time'])

    df['input_mo'] = octets_to_megabytes(raw_df['input_octets'])
    df['output_mo'] = octets_to_megabytes(raw_df['output_octets'])
    df = df.drop(columns=['input_octets', 'output_octets'])

    locale = split_locale(df['langue'])
    df['language'] = locale['language']
    df['country'] = locale['country']

    bad_start = int(df['start_time'].isna().sum() - raw_df['start_time'].isna().sum())
    if bad_start > 0:
        logger.warning("%s start timestamps could not be parsed", f"{bad_start:,}")

    df = df.sort_values('start_time', kind='stable', na_position='last').reset_index(drop=True)
    logger.info("Normalized %s session rows", f"{len(df):,}")
    return df
