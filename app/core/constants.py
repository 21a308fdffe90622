"""
Application constants shared by the map and list features.

Values that vary per deployment (map center, page size, upload directory)
live in Settings instead.
"""

# --- Marker appearance ---

SELECTED_MARKER_SCALE: float = 1.2
UNSELECTED_MARKER_SCALE: float = 1.0

# One color per SVG path of the marker pin (outer, body, shadow)
SELECTED_MARKER_COLORS: tuple[str, str, str] = ("#ef4444", "#dc2626", "#b91c1c")
UNSELECTED_MARKER_COLORS: tuple[str, str, str] = ("#3b82f6", "#2563eb", "#1d4ed8")

# --- Ratings ---

MIN_RATING: int = 0
MAX_RATING: int = 5

# --- Nearby search ---

# 1 km is roughly 1/111 degree of latitude
KM_PER_DEGREE_LATITUDE: float = 111.0
DEFAULT_NEARBY_RADIUS_KM: float = 10.0
