import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_attendance"),
}

DEBUG = True

# "memory" runs without MySQL, using DEMO_EMPLOYEES as the directory.
STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))

UTC_OFFSET_HOURS = float(os.getenv("UTC_OFFSET_HOURS", "3"))
GEOFENCE_CENTER = (
    float(os.getenv("GEOFENCE_LAT", "-3.69019")),
    float(os.getenv("GEOFENCE_LON", "33.41387")),
)
GEOFENCE_RADIUS_M = float(os.getenv("GEOFENCE_RADIUS_M", "100"))

WORKING_WEEKDAYS = ["mon", "tue", "wed", "thu", "fri", "sat"]
EXEMPT_ROLES = ["admin"]

# Extra restrictions on checkout, e.g.
# {"action": "check_out", "weekdays": ["wed"], "roles": ["staff"], "not_before": "13:00"}
CHECKOUT_GUARDS = []

ENABLE_SCHEDULER = bool(int(os.getenv("ENABLE_SCHEDULER", "0")))
SCHEDULE = {
    "day_open": "00:05",
    "night_auto_checkout": "07:56",
    "day_auto_checkout": "19:00",
    "saturday_auto_checkout": "16:00",
    "finalize": "09:30",
}

DEMO_EMPLOYEES = [
    {"id": 1, "name": "Admin Demo", "role": "admin", "shift": "day"},
    {"id": 2, "name": "Day Staff", "role": "staff", "shift": "day"},
    {"id": 3, "name": "Night Staff", "role": "staff", "shift": "night"},
    {"id": 4, "name": "Field Worker", "role": "field", "shift": "unspecified"},
]
