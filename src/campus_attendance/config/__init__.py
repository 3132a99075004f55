import os


def get_settings_module() -> str:
    """Map APP_ENV onto one of the settings modules in this package."""
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "campus_attendance.config.production"

    if env in {"test", "testing"}:
        return "campus_attendance.config.testing"

    return "campus_attendance.config.development"
