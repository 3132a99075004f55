import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "campus_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Apply schema.sql on startup (idempotent: CREATE TABLE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Also load seed.sql, the demo accounts and a long-lived DEMO-QR code
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

SCAN_CODE_TTL_MINUTES = int(os.getenv("SCAN_CODE_TTL_MINUTES", "15"))
UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
DEMO_LOGINS_ENABLED = bool(int(os.getenv("DEMO_LOGINS_ENABLED", "1")))
