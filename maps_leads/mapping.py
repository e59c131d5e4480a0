"""
Links and media for place result cards.
"""
from typing import Optional
from urllib.parse import quote, urlencode, urlparse

from .config import PHOTO_MAX_WIDTH, PLACEHOLDER_IMAGE_URL

PHOTO_ENDPOINT = "https://maps.googleapis.com/maps/api/place/photo"


def generate_place_link(place: dict) -> str:
    """
    Generate a Google Maps link for a single place.

    Uses the place ID when available (exact match), otherwise falls back to
    searching by name and address.

    Args:
        place: Place dictionary

    Returns:
        Google Maps URL, or "" if the place has nothing to search by
    """
    text = ', '.join(
        part for part in (place.get('name'), place.get('formatted_address')) if part
    )
    place_id = place.get('place_id')

    if place_id:
        return (
            f"https://www.google.com/maps/search/?api=1"
            f"&query={quote(text or place_id)}&query_place_id={quote(place_id)}"
        )

    if not text:
        return ""

    return f"https://www.google.com/maps/search/?api=1&query={quote(text)}"


def photo_url(place: dict, api_key: Optional[str], max_width: int = PHOTO_MAX_WIDTH) -> str:
    """
    Build the image URL for the first photo of a place.

    Returns the placeholder image when the place has no photo or no API key
    is available.
    """
    photos = place.get('photos') or []
    reference = photos[0].get('photo_reference') if photos else None

    if not reference or not api_key:
        return PLACEHOLDER_IMAGE_URL

    params = urlencode({
        'maxwidth': max_width,
        'photo_reference': reference,
        'key': api_key,
    })
    return f"{PHOTO_ENDPOINT}?{params}"


def website_hostname(url: Optional[str]) -> str:
    """Short display text for a website URL."""
    if not url:
        return ""
    return urlparse(url).hostname or url
