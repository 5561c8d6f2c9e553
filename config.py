"""
Configuration file for Paris WiFi Usage Dashboard
"""
import os
import logging
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Project paths
ROOT_DIR = Path(__file__).parent
DATA_DIR = ROOT_DIR / "data"
RAW_DATA_DIR = DATA_DIR / "raw"
REPORTS_DIR = Path(os.getenv("REPORTS_DIR", ROOT_DIR / "reports"))

# Create directory if it doesn't exist
RAW_DATA_DIR.mkdir(parents=True, exist_ok=True)

# Data file paths
SESSIONS_FILE = Path(os.getenv("SESSIONS_FILE", RAW_DATA_DIR / "utilisations_wifi.csv"))
HOTSPOTS_FILE = Path(os.getenv("HOTSPOTS_FILE", RAW_DATA_DIR / "sites_wifi.csv"))
CORRESPONDENCE_FILE = Path(os.getenv("CORRESPONDENCE_FILE", RAW_DATA_DIR / "correspondance_sites.csv"))

FILE_ENCODING = os.getenv("FILE_ENCODING", "utf-8")

# Session timestamps are local wall-clock times
TIMEZONE = "Europe/Paris"

# Literal tokens used for missing values in the raw exports
NULL_TOKENS = ["NULL", ""]

# Column contracts (order matters for the positional files)
SESSION_COLUMNS = [
    "session_id",
    "site",
    "start_time",
    "stop_time",
    "input_octets",
    "output_octets",
    "device",
    "os",
    "browser",
    "langue",
]
HOTSPOT_COLUMNS = ["Id", "Nom", "Address", "CP", "City", "GeoPoint"]
CORRESPONDENCE_COLUMNS = ["Site.1", "Site.Clean", "Id"]

# Data quality checks
QUALITY_CONFIG = {
    "min_gap_days": 3,  # Consecutive empty days flagged as a chronology gap
}

# Descriptive analysis
ANALYSIS_CONFIG = {
    "top_n": 10,  # Categories shown before folding the tail into "Other"
    "unknown_label": "Unknown",
    "other_label": "Other",
}

# Visualization Settings
VIZ_CONFIG = {
    "map_zoom_start": 12,
    "map_center": [48.8566, 2.3522],  # Paris center
    "hotspot_color": "#1f77b4",
    "gap_color": "rgba(220, 20, 60, 0.15)",
    "min_marker_radius": 4,
    "max_marker_radius": 20,
}

# Dashboard Settings
DASHBOARD_CONFIG = {
    "title": "Paris WiFi Usage Dashboard",
    "page_icon": "📶",
    "layout": "wide",
    "initial_sidebar_state": "expanded",
}

# Caching
CACHE_CONFIG = {
    "ttl": 3600,  # Cache time-to-live in seconds (1 hour)
}

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level=None):
    """Configure root logging for scripts and the dashboard"""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
