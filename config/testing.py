import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "shift_attendance_test"),
}

DEBUG = False
TESTING = True

STORE_BACKEND = "memory"
AUTO_INIT_DB = False
AUTO_SEED_DB = False

UTC_OFFSET_HOURS = 3
GEOFENCE_CENTER = (-3.69019, 33.41387)
GEOFENCE_RADIUS_M = 100.0

WORKING_WEEKDAYS = ["mon", "tue", "wed", "thu", "fri", "sat"]
EXEMPT_ROLES = ["admin"]
CHECKOUT_GUARDS = []

ENABLE_SCHEDULER = False
SCHEDULE = {}

DEMO_EMPLOYEES = [
    {"id": 1, "name": "Admin Demo", "role": "admin", "shift": "day"},
    {"id": 2, "name": "Day Staff", "role": "staff", "shift": "day"},
    {"id": 3, "name": "Night Staff", "role": "staff", "shift": "night"},
    {"id": 4, "name": "Field Worker", "role": "field", "shift": "unspecified"},
]
