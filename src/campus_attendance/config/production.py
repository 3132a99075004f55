import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "campus_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

SCAN_CODE_TTL_MINUTES = int(os.getenv("SCAN_CODE_TTL_MINUTES", "15"))
UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "/var/lib/campus-attendance/uploads")
DEMO_LOGINS_ENABLED = bool(int(os.getenv("DEMO_LOGINS_ENABLED", "0")))
