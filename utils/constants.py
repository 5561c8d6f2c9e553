"""
Constants for the Paris WiFi Usage Dashboard
"""

# Byte counters are reported in octets
BYTES_PER_MEGABYTE = 1024 ** 2

# Map configuration
MAP_TILES = {
    "CartoDB Positron": "https://{s}.basemaps.cartocdn.com/light_all/{z}/{x}/{y}{r}.png",
    "OpenStreetMap": "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
}

# Color schemes
DEVICE_TYPE_COLORS = {
    'Mobile/Tablet': '#F59E0B',  # Orange
    'Computer': '#2563EB',       # Blue
    'Unknown': '#6B7280'         # Gray
}

HEATMAP_GRADIENT = {0.2: 'blue', 0.4: 'cyan', 0.6: 'lime', 0.8: 'yellow', 1.0: 'red'}

# Calendar labels (Monday == 0, as in pandas)
WEEKDAY_LABELS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']
