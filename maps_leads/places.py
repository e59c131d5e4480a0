"""
Core module for searching and retrieving place data from the Google Places API.

Every call returns a ``Success`` or ``Failure`` value instead of raising, so
callers branch on the outcome the same way for searches, next pages and
detail lookups.
"""
import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Optional

import googlemaps
from googlemaps.exceptions import ApiError, HTTPError, Timeout, TransportError

from .config import DETAIL_FIELDS, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

STATUS_OK = "OK"


@dataclass
class Success:
    """A completed provider call."""
    value: Any
    status: str = STATUS_OK


@dataclass
class Failure:
    """A provider call that failed with a provider-defined status."""
    status: str
    message: str = ""


@dataclass
class SearchPage:
    """
    One page of text search results.

    ``continuation`` is a zero-argument callable fetching the next page, or
    None when the provider reports no further pages.
    """
    places: list = field(default_factory=list)
    continuation: Optional[Callable[[], Any]] = None

    @property
    def has_more(self) -> bool:
        return self.continuation is not None


def failure_from_exception(exc: Exception) -> Failure:
    """
    Map a googlemaps exception to a Failure carrying the provider status.

    Args:
        exc: Exception raised by the googlemaps client

    Returns:
        Failure with the status string to surface to the user
    """
    if isinstance(exc, ApiError):
        return Failure(status=exc.status, message=exc.message or "")
    if isinstance(exc, Timeout):
        return Failure(status="TIMEOUT", message=str(exc))
    if isinstance(exc, HTTPError):
        return Failure(status=f"HTTP_{exc.status_code}", message=str(exc))
    if isinstance(exc, TransportError):
        return Failure(status="TRANSPORT_ERROR", message=str(exc))
    return Failure(status="UNKNOWN_ERROR", message=str(exc))


class PlacesProvider:
    """
    Search and details capability backed by a googlemaps client.
    """

    def __init__(self, client: googlemaps.Client):
        self.client = client

    @classmethod
    def from_api_key(cls, api_key: str) -> "PlacesProvider":
        """
        Build a provider for an API key.

        Raises:
            ValueError: If the key is missing or rejected by the client
        """
        if not api_key:
            raise ValueError("Google Maps API key is required")
        client = googlemaps.Client(
            key=api_key,
            timeout=REQUEST_TIMEOUT,
            retry_over_query_limit=False
        )
        return cls(client)

    def search(self, query: str) -> Any:
        """
        Run a text search for a query.

        Args:
            query: Free text such as "Restaurant in Karachi"

        Returns:
            Success(SearchPage) or Failure
        """
        return self._fetch_page(query=query)

    def next_page(self, page_token: str) -> Any:
        """Fetch the page behind a next_page_token."""
        return self._fetch_page(page_token=page_token)

    def _fetch_page(self, query: str = None, page_token: str = None) -> Any:
        try:
            response = self.client.places(query=query, page_token=page_token)
        except (ApiError, Timeout, TransportError) as e:
            return failure_from_exception(e)

        token = response.get('next_page_token')
        continuation = partial(self.next_page, token) if token else None
        page = SearchPage(places=response.get('results', []), continuation=continuation)
        return Success(page, status=response.get('status', STATUS_OK))

    def get_details(self, place_id: str, fields: Optional[list] = None) -> Any:
        """
        Get detailed information for a specific place.

        Args:
            place_id: The Google Place ID
            fields: Fields to retrieve (defaults to DETAIL_FIELDS)

        Returns:
            Success(detail dict) or Failure
        """
        if fields is None:
            fields = DETAIL_FIELDS

        try:
            response = self.client.place(place_id=place_id, fields=fields)
        except Exception as e:
            logger.warning(f"Error fetching details for place {place_id}: {e}")
            return failure_from_exception(e)

        result = response.get('result')
        if not result:
            return Failure(status=response.get('status', 'NOT_FOUND'))
        return Success(result, status=response.get('status', STATUS_OK))
