"""
Geospatial utility functions
"""
import numpy as np


def parse_geo_point(value):
    """
    Parse a catalog geo-point string "lat, lon"

    Args:
        value: Geo-point string, e.g. "48.853, 2.349"

    Returns:
        Tuple of (latitude, longitude), (nan, nan) when the value is missing
        or malformed
    """
    if not isinstance(value, str):
        return np.nan, np.nan

    parts = value.split(",")
    if len(parts) != 2:
        return np.nan, np.nan

    try:
        lat, lon = float(parts[0].strip()), float(parts[1].strip())
    except ValueError:
        return np.nan, np.nan

    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        return np.nan, np.nan

    return lat, lon


def calculate_bounding_box(points_df, lat_col='lat', lon_col='lng', buffer_pct=0.1):
    """
    Calculate bounding box for a set of points with optional buffer

    Args:
        points_df: DataFrame containing points
        lat_col: Name of latitude column
        lon_col: Name of longitude column
        buffer_pct: Percentage to expand the bounding box (0.1 = 10%)

    Returns:
        List [[south, west], [north, east]]
    """
    if points_df.empty:
        return None

    min_lat, max_lat = points_df[lat_col].min(), points_df[lat_col].max()
    min_lon, max_lon = points_df[lon_col].min(), points_df[lon_col].max()

    # Add buffer
    lat_buffer = (max_lat - min_lat) * buffer_pct
    lon_buffer = (max_lon - min_lon) * buffer_pct

    return [
        [min_lat - lat_buffer, min_lon - lon_buffer],
        [max_lat + lat_buffer, max_lon + lon_buffer]
    ]
