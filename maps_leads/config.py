"""
Configuration and constants for the Google Maps Leads app.
"""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Configuration
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY")

# Access gate - a convenience gate, not a security boundary
ACCESS_KEY = os.getenv("ACCESS_KEY")
ACCESS_STORAGE_KEY = "gmaps_leads_access"
SESSION_DURATION_HOURS = 24

# App Settings
PAGE_TITLE = "Extract Google Maps Leads"
PAGE_ICON = "🔍"
PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/400x200?text=No+Image"
PHOTO_MAX_WIDTH = 400


def _env_number(name: str, default, cast=float):
    """Read a numeric env var, falling back to the default on bad input."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return cast(value)
    except ValueError:
        return default


# API Rate Limiting
API_REQUEST_DELAY = 2  # seconds before a next_page_token may be used

# Place details
DETAIL_FIELDS = [
    'name',
    'formatted_address',
    'formatted_phone_number',
    'website',
    'rating',
    'user_ratings_total',
    'photo',
]
DETAIL_WORKERS = _env_number("DETAIL_WORKERS", 5, int)
REQUEST_TIMEOUT = _env_number("REQUEST_TIMEOUT", 10.0)

# UI polling while detail lookups are still in flight
REFRESH_INTERVAL = _env_number("REFRESH_INTERVAL", 0.5)

# Export
EXPORT_SHEET_NAME = "Google Leads"
EXCEL_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

if not ACCESS_KEY:
    logging.getLogger(__name__).warning("ACCESS_KEY is not set; the access gate is disabled")
