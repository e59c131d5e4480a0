"""
Shared fixtures for the Google Maps Leads tests.
"""
from concurrent.futures import Executor, Future

import pytest

from maps_leads.places import Failure, SearchPage, Success


class InlineExecutor(Executor):
    """Run submitted work immediately on the calling thread."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        future.set_result(fn(*args, **kwargs))
        return future


class ManualExecutor(Executor):
    """Queue submitted work until a test runs it, in any order."""

    def __init__(self):
        self.calls = []

    def submit(self, fn, *args, **kwargs):
        self.calls.append((fn, args, kwargs))
        return Future()

    def run(self, index):
        fn, args, kwargs = self.calls.pop(index)
        fn(*args, **kwargs)

    def run_all(self):
        while self.calls:
            self.run(0)


class RecordingScheduler:
    """Capture delayed callbacks instead of starting timers."""

    def __init__(self):
        self.scheduled = []

    def __call__(self, delay, callback, *args):
        self.scheduled.append((delay, callback, args))

    def fire(self):
        delay, callback, args = self.scheduled.pop(0)
        callback(*args)


class FakeProvider:
    """
    Places provider double.

    ``pages`` are returned by successive ``search``/continuation calls, each
    a list of summaries; ``details`` maps place_id to a detail dict or a
    Failure.
    """

    def __init__(self, pages=None, details=None, search_failure=None):
        self.pages = list(pages or [])
        self.details = details or {}
        self.search_failure = search_failure
        self.search_calls = []
        self.detail_calls = []
        self.page_calls = 0

    def search(self, query):
        self.search_calls.append(query)
        if self.search_failure:
            return self.search_failure
        return self._next()

    def _next(self):
        self.page_calls += 1
        places = self.pages.pop(0) if self.pages else []
        continuation = self._next if self.pages else None
        return Success(SearchPage(places=places, continuation=continuation))

    def get_details(self, place_id, fields=None):
        self.detail_calls.append((place_id, fields))
        detail = self.details.get(place_id)
        if detail is None:
            return Failure(status="NOT_FOUND")
        if isinstance(detail, Failure):
            return detail
        return Success(detail)


@pytest.fixture
def summaries():
    return [
        {'place_id': 'p1', 'name': 'Coffee Wagera', 'formatted_address': 'Clifton, Karachi'},
        {'place_id': 'p2', 'name': 'Espresso', 'formatted_address': 'DHA, Karachi'},
    ]


@pytest.fixture
def details():
    return {
        'p1': {
            'name': 'Coffee Wagera',
            'formatted_address': 'Block 5, Clifton, Karachi',
            'formatted_phone_number': '021 1234567',
            'website': 'https://coffeewagera.pk/',
            'rating': 4.5,
            'user_ratings_total': 812,
        },
        'p2': {
            'name': 'Espresso',
            'formatted_address': 'Phase 6, DHA, Karachi',
            'formatted_phone_number': '021 7654321',
            'website': 'https://espresso.pk/menu',
            'rating': 4.2,
            'user_ratings_total': 301,
        },
    }


@pytest.fixture
def scheduler():
    return RecordingScheduler()


@pytest.fixture
def inline_executor():
    return InlineExecutor()


@pytest.fixture
def manual_executor():
    return ManualExecutor()


class FakeCookieManager:
    """
    Stand-in for ``extra_streamlit_components.CookieManager``: one browser's
    cookie jar.
    """

    def __init__(self, jar=None):
        self.jar = jar if jar is not None else {}
        self.expires = {}

    def get(self, cookie):
        return self.jar.get(cookie)

    def set(self, cookie, val, expires_at=None, key="set", **kwargs):
        self.jar[cookie] = val
        self.expires[cookie] = expires_at

    def delete(self, cookie, key="delete"):
        self.jar.pop(cookie, None)
