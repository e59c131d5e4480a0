"""
Google Maps Leads - Search Google Maps for businesses and export their
contact details.

This package provides tools for:
- Searching places with the Google Places API and paginating results
- Fetching phone numbers, websites and ratings for every result
- Exporting results to Excel
- Gating the app behind a shared access key
"""

from .config import (
    GOOGLE_MAPS_API_KEY,
    ACCESS_KEY,
    API_REQUEST_DELAY,
    DETAIL_FIELDS,
)

from .places import (
    PlacesProvider,
    SearchPage,
    Success,
    Failure,
)

from .access_gate import (
    AccessGate,
    SessionStore,
    CookieSessionStore,
    FileSessionStore,
)

from .controller import (
    SearchController,
    QuerySessionState,
    VIEW_SEARCH,
    VIEW_RESULTS,
)

from .data_utils import (
    results_to_rows,
    results_to_dataframe,
    export_to_excel,
    export_results,
    build_export_filename,
    get_summary_stats,
)

from .mapping import (
    generate_place_link,
    photo_url,
    website_hostname,
)

__version__ = '1.0.0'

__all__ = [
    # Config
    'GOOGLE_MAPS_API_KEY',
    'ACCESS_KEY',
    'API_REQUEST_DELAY',
    'DETAIL_FIELDS',
    # Places
    'PlacesProvider',
    'SearchPage',
    'Success',
    'Failure',
    # Access gate
    'AccessGate',
    'SessionStore',
    'CookieSessionStore',
    'FileSessionStore',
    # Controller
    'SearchController',
    'QuerySessionState',
    'VIEW_SEARCH',
    'VIEW_RESULTS',
    # Data
    'results_to_rows',
    'results_to_dataframe',
    'export_to_excel',
    'export_results',
    'build_export_filename',
    'get_summary_stats',
    # Links
    'generate_place_link',
    'photo_url',
    'website_hostname',
]
