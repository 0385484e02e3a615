"""Default settings for the rental tracker.

These are applied to ``app.config`` by :func:`rental_tracker.app.create_app`
before any overrides passed to the factory.
"""

# ---------------------------------------------------------------------------
# Flask / database
SECRET_KEY = 'change-me'
SQLALCHEMY_DATABASE_URI = 'sqlite:///rental_tracker.db'
SQLALCHEMY_TRACK_MODIFICATIONS = False

# ---------------------------------------------------------------------------
# Record storage
RECORDS_STORAGE_KEY = 'rentalRecords'  # name of the key-value slot

# ---------------------------------------------------------------------------
# Display and reminders
DATE_DISPLAY_FORMAT = '%d/%m/%Y'  # European format, as on the rental forms
DUE_SOON_DAYS = 7
URGENT_DAYS = 2

# ---------------------------------------------------------------------------
# Miscellaneous
LOG_LEVEL = 'INFO'

DEFAULTS = {
    'SECRET_KEY': SECRET_KEY,
    'SQLALCHEMY_DATABASE_URI': SQLALCHEMY_DATABASE_URI,
    'SQLALCHEMY_TRACK_MODIFICATIONS': SQLALCHEMY_TRACK_MODIFICATIONS,
    'RECORDS_STORAGE_KEY': RECORDS_STORAGE_KEY,
    'DATE_DISPLAY_FORMAT': DATE_DISPLAY_FORMAT,
    'DUE_SOON_DAYS': DUE_SOON_DAYS,
    'URGENT_DAYS': URGENT_DAYS,
    'LOG_LEVEL': LOG_LEVEL,
}
