"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

EARTH_RADIUS_M = 6_371_000
DEFAULT_UTC_OFFSET_HOURS = 3
DEFAULT_GEOFENCE_CENTER = (-3.69019, 33.41387)
DEFAULT_GEOFENCE_RADIUS_M = 100.0
DEFAULT_HISTORY_LIMIT = 60

# Written into both time columns when a pending row is finalized as absent.
SYNTHETIC_TIME = time(0, 0, 0)

CLIENT_SKEW_WARN_SECONDS = 300
