"""
Data quality checks on the analysis table
Surfaces known upstream defects (chronology gaps from transposed dates,
sessions ending before they start, unresolved sites) without correcting them
"""
import logging

import pandas as pd

from config import QUALITY_CONFIG

logger = logging.getLogger(__name__)


def find_inverted_sessions(df):
    """Sessions whose stop_time is before their start_time"""
    inverted = (df['stop_time'] < df['start_time']).fillna(False).astype(bool)
    return df[inverted]


def detect_chronology_gaps(df, min_gap_days=None):
    """
    Find runs of calendar days without any session

    A block of transposed dates (e.g. early April logged as early December)
    shows up as a few isolated days separated from the bulk of the data by a
    long empty run.

    Args:
        df: Analysis table with a start_time column
        min_gap_days: Shortest empty run reported (default from config)

    Returns:
        DataFrame with gap_start, gap_end (first and last empty day) and gap_days
    """
    if min_gap_days is None:
        min_gap_days = QUALITY_CONFIG['min_gap_days']
    empty = pd.DataFrame(columns=['gap_start', 'gap_end', 'gap_days'])

    # Local calendar days, tz dropped so DST changes do not shorten the deltas
    days = pd.to_datetime(df['start_time'].dropna().dt.date).drop_duplicates().sort_values()
    if len(days) < 2:
        return empty

    previous = days.shift(1)
    delta = (days - previous).dt.days - 1
    # A gap is at least one empty day
    is_gap = delta >= max(min_gap_days, 1)
    if not is_gap.any():
        return empty

    gaps = pd.DataFrame({
        'gap_start': (previous[is_gap] + pd.Timedelta(days=1)).dt.date,
        'gap_end': (days[is_gap] - pd.Timedelta(days=1)).dt.date,
        'gap_days': delta[is_gap].astype(int),
    }).reset_index(drop=True)

    for gap in gaps.itertuples():
        logger.warning("No sessions from %s to %s (%d days)", gap.gap_start, gap.gap_end, gap.gap_days)
    return gaps


def build_quality_report(df, coordinates=None, min_gap_days=None):
    """
    Summarize data quality of the analysis table

    Args:
        df: Analysis table
        coordinates: Coordinate index (optional)
        min_gap_days: Passed on to detect_chronology_gaps

    Returns:
        dict with quality statistics
    """
    total = len(df)
    unresolved = df['site_id'].isna()
    resolved_without_coords = df['site_id'].notna() & df['site_geo_x'].isna()

    report = {
        'total_sessions': total,
        'unparsable_start_time': int(df['start_time'].isna().sum()),
        'unparsable_stop_time': int(df['stop_time'].isna().sum()),
        'inverted_sessions': len(find_inverted_sessions(df)),
        'unresolved_sessions': int(unresolved.sum()),
        'unresolved_site_share': float(unresolved.mean()) if total else 0.0,
        'sessions_without_coordinates': int(resolved_without_coords.sum()),
        'missing_locale_share': float(
            (df['language'].isna() & df['country'].isna()).mean()
        ) if total else 0.0,
        'chronology_gaps': detect_chronology_gaps(df, min_gap_days),
    }

    if coordinates is not None:
        report['located_hotspots'] = len(coordinates)

    return report
