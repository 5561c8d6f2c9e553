"""
Enrichment module
Builds the analysis table: normalized and classified sessions joined with
their canonical hotspot identity and coordinates
"""
import logging
from dataclasses import dataclass

import pandas as pd

from src.data_loader import load_all_data
from src.record_normalizer import normalize_sessions
from src.feature_classifier import classify_features
from src.hotspot_resolver import build_site_reference, build_coordinate_index

logger = logging.getLogger(__name__)

ENRICHED_COLUMNS = [
    'session_id',
    'site_id',
    'site',
    'site_geo_x',
    'site_geo_y',
    'start_time',
    'stop_time',
    'input_mo',
    'output_mo',
    'device',
    'os',
    'browser',
    'langue',
    'language',
    'country',
    'os_type',
    'device_brand',
    'device_type',
]


@dataclass
class AnalysisTables:
    """Everything one analysis run works from"""
    sessions: pd.DataFrame
    reference: pd.DataFrame
    coordinates: pd.DataFrame


def enrich_sessions(sessions, reference, coordinates):
    """
    Attach canonical site identity and coordinates to sessions

    Sessions whose raw site name is not in the correspondence table are kept
    with empty site_id, site and coordinates.

    Args:
        sessions: Classified sessions, 'site' holding the raw site name
        reference: DataFrame from build_site_reference
        coordinates: DataFrame from build_coordinate_index

    Returns:
        New DataFrame with ENRICHED_COLUMNS, same row count and order
    """
    keys = reference[['site_key', 'site_id', 'site']].rename(columns={'site': 'site_canonical'})
    keys = keys.dropna(subset=['site_key']).drop_duplicates(subset='site_key', keep='first')

    coords = coordinates[['site_id', 'x', 'y']].rename(columns={'x': 'site_geo_x', 'y': 'site_geo_y'})

    raw_sites = sessions['site'].astype("string")
    merged = (
        sessions.assign(site=raw_sites)
        .merge(keys, left_on='site', right_on='site_key', how='left')
        .merge(coords, on='site_id', how='left')
    )

    if len(merged) != len(sessions):
        raise RuntimeError(
            f"Enrichment join changed the row count: {len(sessions)} -> {len(merged)}"
        )

    merged['site'] = merged['site_canonical']
    merged = merged.drop(columns=['site_key', 'site_canonical'])
    merged.index = sessions.index

    unresolved = merged['site_id'].isna()
    if unresolved.any():
        logger.warning(
            "%s sessions (%d distinct raw site names) have no correspondence entry",
            f"{int(unresolved.sum()):,}",
            raw_sites[unresolved.to_numpy()].nunique(),
        )
    no_coordinates = merged['site_id'].notna() & merged['site_geo_x'].isna()
    if no_coordinates.any():
        logger.warning("%s sessions are at hotspots without coordinates", f"{int(no_coordinates.sum()):,}")

    return merged[ENRICHED_COLUMNS]


def build_analysis_table(sessions, catalog, correspondence) -> AnalysisTables:
    """
    Run the full pipeline on already loaded raw tables

    Args:
        sessions: Raw session log
        catalog: Raw hotspot catalog
        correspondence: Raw correspondence table

    Returns:
        AnalysisTables
    """
    normalized = normalize_sessions(sessions)
    classified = classify_features(normalized)

    reference = build_site_reference(catalog, correspondence)
    coordinates = build_coordinate_index(reference)

    enriched = enrich_sessions(classified, reference, coordinates)
    logger.info("Analysis table ready: %s sessions", f"{len(enriched):,}")

    return AnalysisTables(sessions=enriched, reference=reference, coordinates=coordinates)


def load_analysis_tables(sessions_path=None, hotspots_path=None,
                         correspondence_path=None) -> AnalysisTables:
    """
    Load the configured input files and run the full pipeline

    Paths default to the ones set in config.py
    """
    data = load_all_data(sessions_path, hotspots_path, correspondence_path)
    return build_analysis_table(data['sessions'], data['catalog'], data['correspondence'])
