"""
Descriptive usage analysis over the analysis table
Category shares, per-hotspot statistics and temporal patterns
"""
import pandas as pd

from config import ANALYSIS_CONFIG
from utils.constants import WEEKDAY_LABELS


def category_shares(df, column, top_n=None):
    """
    Session counts and percentages per category

    Args:
        df: Analysis table
        column: Categorical column, e.g. 'device_brand' or 'language'
        top_n: Number of categories kept before folding the rest into "Other"

    Returns:
        DataFrame with column, sessions and share_pct, largest first
    """
    if top_n is None:
        top_n = ANALYSIS_CONFIG['top_n']

    if df.empty:
        return pd.DataFrame(columns=[column, 'sessions', 'share_pct'])

    values = df[column].astype("object").where(df[column].notna(), ANALYSIS_CONFIG['unknown_label'])
    counts = values.value_counts()

    if len(counts) > top_n:
        head = counts.iloc[:top_n]
        tail = pd.Series({ANALYSIS_CONFIG['other_label']: counts.iloc[top_n:].sum()})
        counts = pd.concat([head, tail]).groupby(level=0, sort=False).sum().sort_values(ascending=False)

    shares = counts.rename_axis(column).reset_index(name='sessions')
    shares['share_pct'] = (shares['sessions'] / len(df) * 100).round(2)
    return shares


def sessions_per_site(df, coordinates):
    """
    Per-hotspot usage for sessions at located hotspots

    Args:
        df: Analysis table
        coordinates: Coordinate index

    Returns:
        DataFrame with site_id, site, x, y, sessions, total_mo, avg_mo,
        sorted by sessions
    """
    located = df[df['site_id'].notna()]
    if located.empty or coordinates.empty:
        return pd.DataFrame(columns=['site_id', 'site', 'x', 'y', 'sessions', 'total_mo', 'avg_mo'])

    volume = located['input_mo'].fillna(0) + located['output_mo'].fillna(0)
    stats = (
        located.assign(volume_mo=volume)
        .groupby('site_id')
        .agg(sessions=('session_id', 'size'), total_mo=('volume_mo', 'sum'))
        .reset_index()
    )
    stats['avg_mo'] = (stats['total_mo'] / stats['sessions']).round(2)
    stats['total_mo'] = stats['total_mo'].round(2)

    site_stats = coordinates.merge(stats, on='site_id', how='inner')
    return site_stats.sort_values('sessions', ascending=False).reset_index(drop=True)


def usage_heatmap_table(df):
    """
    Session counts by day of week and hour of day

    Returns:
        DataFrame indexed by weekday label (Monday first), columns 0..23
    """
    start = df['start_time'].dropna()
    if start.empty:
        table = pd.DataFrame(0, index=range(7), columns=range(24))
    else:
        table = pd.crosstab(start.dt.dayofweek, start.dt.hour)
    table = table.reindex(index=range(7), columns=range(24), fill_value=0)
    table.index = WEEKDAY_LABELS
    table.index.name = 'day_of_week'
    table.columns.name = 'hour'
    return table


def daily_sessions(df):
    """
    Sessions and traffic per calendar day

    Returns:
        DataFrame with date, sessions, input_mo, output_mo
    """
    timed = df.dropna(subset=['start_time'])
    if timed.empty:
        return pd.DataFrame(columns=['date', 'sessions', 'input_mo', 'output_mo'])

    daily = (
        timed.assign(date=timed['start_time'].dt.date)
        .groupby('date')
        .agg(
            sessions=('start_time', 'size'),
            input_mo=('input_mo', 'sum'),
            output_mo=('output_mo', 'sum'),
        )
        .reset_index()
    )
    return daily


def session_durations(df):
    """
    Session duration in minutes

    Returns:
        DataFrame with session_id, duration_min and is_negative
    """
    duration = (df['stop_time'] - df['start_time']).dt.total_seconds() / 60
    return pd.DataFrame({
        'session_id': df['session_id'],
        'duration_min': duration.round(1),
        'is_negative': (duration < 0).fillna(False),
    }, index=df.index)


def get_usage_summary(df):
    """
    Headline metrics of the analysis table
    Returns: dict with metrics
    """
    if df.empty:
        return {
            'total_sessions': 0,
            'located_sessions': 0,
            'distinct_sites': 0,
            'total_input_mo': 0.0,
            'total_output_mo': 0.0,
            'median_duration_min': None,
            'mobile_share_pct': 0.0,
            'earliest_session': None,
            'latest_session': None,
        }

    durations = session_durations(df)['duration_min']
    valid_durations = durations[durations >= 0]

    return {
        'total_sessions': len(df),
        'located_sessions': int(df['site_geo_x'].notna().sum()),
        'distinct_sites': int(df['site_id'].nunique()),
        'total_input_mo': round(float(df['input_mo'].sum()), 2),
        'total_output_mo': round(float(df['output_mo'].sum()), 2),
        'median_duration_min': float(valid_durations.median()) if not valid_durations.empty else None,
        'mobile_share_pct': round(float((df['device_type'] == 'Mobile/Tablet').fillna(False).mean() * 100), 2),
        'earliest_session': df['start_time'].min(),
        'latest_session': df['start_time'].max(),
    }
