import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_attendance"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

DEBUG = False

STORE_BACKEND = "mysql"
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = False

UTC_OFFSET_HOURS = float(os.getenv("UTC_OFFSET_HOURS", "3"))
GEOFENCE_CENTER = (
    float(os.getenv("GEOFENCE_LAT", "-3.69019")),
    float(os.getenv("GEOFENCE_LON", "33.41387")),
)
GEOFENCE_RADIUS_M = float(os.getenv("GEOFENCE_RADIUS_M", "100"))

WORKING_WEEKDAYS = ["mon", "tue", "wed", "thu", "fri", "sat"]
EXEMPT_ROLES = ["admin"]
CHECKOUT_GUARDS = []

# Run the scheduler in exactly one process (see scripts/run_scheduler.py).
ENABLE_SCHEDULER = bool(int(os.getenv("ENABLE_SCHEDULER", "0")))
SCHEDULE = {}
