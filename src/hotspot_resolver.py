"""
Hotspot reference resolution module
Reconciles the raw site names of the session log with the hotspot catalog
through the hand-maintained correspondence table, and builds the coordinate
index used by every map
"""
import logging

import pandas as pd

from utils.geo_utils import parse_geo_point

logger = logging.getLogger(__name__)

REFERENCE_COLUMNS = ['site_key', 'site_id', 'site', 'Nom', 'Address', 'CP', 'City', 'GeoPoint']
COORDINATE_COLUMNS = ['site_id', 'site', 'x', 'y']


def _strip_ids(ids):
    ids = ids.astype("string").str.strip()
    return ids.mask((ids == "").fillna(False).astype(bool), pd.NA)


def coerce_site_ids(*id_series):
    """
    Bring site id columns from different files to one comparable dtype

    Ids become nullable integers when every present id is numeric,
    otherwise stripped strings.

    Returns:
        List of converted Series, in the order given
    """
    stripped = [_strip_ids(s) for s in id_series]
    present = pd.concat([s.dropna() for s in stripped], ignore_index=True)

    if present.str.fullmatch(r"\d+").all():
        return [s.astype("Int64") for s in stripped]
    return stripped


def build_site_reference(catalog, correspondence):
    """
    Attach canonical names to catalog entries

    Left join of the correspondence table onto the catalog by id: a
    correspondence entry whose id is not in the catalog is kept with empty
    catalog fields.

    Args:
        catalog: DataFrame with HOTSPOT_COLUMNS
        correspondence: DataFrame with Site.1, Site.Clean and Id

    Returns:
        DataFrame with REFERENCE_COLUMNS, one row per raw site key
    """
    corr = correspondence[['Site.1', 'Site.Clean', 'Id']].rename(columns={
        'Site.1': 'site_key',
        'Site.Clean': 'site',
        'Id': 'site_id',
    })
    cat = catalog.drop_duplicates(subset='Id').rename(columns={'Id': 'site_id'})

    corr_ids, cat_ids = coerce_site_ids(corr['site_id'], cat['site_id'])
    corr = corr.assign(site_id=corr_ids, site_key=corr['site_key'].astype("string"))
    cat = cat.assign(site_id=cat_ids).dropna(subset=['site_id'])

    duplicated = corr['site_key'].duplicated(keep='first')
    if duplicated.any():
        logger.warning(
            "%d duplicate raw site keys in the correspondence table, keeping the first: %s",
            int(duplicated.sum()),
            sorted(corr.loc[duplicated, 'site_key'].dropna().unique().tolist()),
        )
        corr = corr[~duplicated]

    reference = corr.merge(cat, on='site_id', how='left')

    unmatched = reference['site_id'].notna() & reference['Nom'].isna()
    if unmatched.any():
        logger.warning("%d correspondence entries reference an unknown catalog id", int(unmatched.sum()))

    return reference[REFERENCE_COLUMNS].reset_index(drop=True)


def build_coordinate_index(reference):
    """
    Build the distinct (site_id, site, x, y) coordinate index

    x is the longitude and y the latitude of the catalog "lat, lon" geo-point.
    Hotspots without a usable geo-point are left out.

    Args:
        reference: DataFrame from build_site_reference

    Returns:
        DataFrame with COORDINATE_COLUMNS, at most one row per site_id
    """
    located = reference.dropna(subset=['site_id', 'GeoPoint'])

    points = located['GeoPoint'].map(parse_geo_point)
    index = pd.DataFrame({
        'site_id': located['site_id'],
        'site': located['site'],
        'x': points.map(lambda p: p[1]).astype(float),
        'y': points.map(lambda p: p[0]).astype(float),
    }, index=located.index)

    malformed = index['x'].isna() | index['y'].isna()
    if malformed.any():
        logger.warning("%d geo-points could not be parsed", int(malformed.sum()))
        index = index[~malformed]

    index = index.drop_duplicates(subset=COORDINATE_COLUMNS)

    conflicting = index['site_id'].duplicated(keep='first')
    if conflicting.any():
        logger.warning(
            "%d site ids carry several names or positions, keeping the first",
            int(conflicting.sum()),
        )
        index = index[~conflicting]

    logger.info("Coordinate index holds %d hotspots", len(index))
    return index.reset_index(drop=True)
