"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_SCAN_CODE_TTL_MINUTES = 15
DEFAULT_HISTORY_LIMIT = 200
MIN_PASSWORD_LENGTH = 6

ALLOWED_JUSTIFICATION_EXTENSIONS = {"pdf", "png", "jpg", "jpeg"}

# 1 = Monday ... 7 = Sunday
WEEK_DAYS = ("1", "2", "3", "4", "5", "6", "7")

TECH_ADMIN_ID = "2020234049140"
TECH_ADMIN_PASSWORD = "010218821"
TECH_ADMIN_NAME = "Technical Administrator"

DEMO_PASSWORD = "password"
DEMO_ACCOUNTS = {
    "S12345": ("student", "Ahmed Benali"),
    "T12345": ("teacher", "Dr. Mohammed Alaoui"),
    "A12345": ("admin", "Amina Tazi"),
}
