"""
Unit tests for the Google Places provider.
"""
import pytest
from unittest.mock import Mock, patch

from googlemaps.exceptions import ApiError, HTTPError, Timeout, TransportError

from maps_leads.config import DETAIL_FIELDS, REQUEST_TIMEOUT
from maps_leads.places import (
    Failure,
    PlacesProvider,
    SearchPage,
    Success,
    failure_from_exception,
)


@pytest.fixture
def client():
    """Mock googlemaps client."""
    return Mock()


@pytest.fixture
def provider(client):
    return PlacesProvider(client)


class TestSearch:
    """Tests for text search pages."""

    def test_single_page(self, provider, client):
        """A response without next_page_token has no continuation."""
        client.places.return_value = {
            'status': 'OK',
            'results': [{'place_id': 'p1', 'name': 'Coffee Wagera'}],
        }

        outcome = provider.search("Coffee Karachi")

        assert isinstance(outcome, Success)
        assert isinstance(outcome.value, SearchPage)
        assert outcome.value.places == [{'place_id': 'p1', 'name': 'Coffee Wagera'}]
        assert outcome.value.has_more is False
        client.places.assert_called_once_with(query="Coffee Karachi", page_token=None)

    def test_continuation_fetches_next_page(self, provider, client):
        client.places.side_effect = [
            {'status': 'OK', 'results': [{'place_id': 'p1'}], 'next_page_token': 'token-2'},
            {'status': 'OK', 'results': [{'place_id': 'p2'}]},
        ]

        first = provider.search("Coffee Karachi")
        assert first.value.has_more is True

        second = first.value.continuation()

        assert second.value.places == [{'place_id': 'p2'}]
        assert second.value.continuation is None
        client.places.assert_called_with(query=None, page_token='token-2')

    def test_zero_results(self, provider, client):
        client.places.return_value = {'status': 'ZERO_RESULTS', 'results': []}

        outcome = provider.search("Zzzzz Nonexistent Place")

        assert isinstance(outcome, Success)
        assert outcome.status == 'ZERO_RESULTS'
        assert outcome.value.places == []
        assert outcome.value.has_more is False

    def test_api_error_becomes_failure(self, provider, client):
        client.places.side_effect = ApiError('REQUEST_DENIED', 'The provided API key is invalid.')

        outcome = provider.search("Coffee Karachi")

        assert outcome == Failure(status='REQUEST_DENIED', message='The provided API key is invalid.')

    def test_unexpected_errors_propagate(self, provider, client):
        client.places.side_effect = KeyError('results')

        with pytest.raises(KeyError):
            provider.search("Coffee Karachi")


class TestGetDetails:
    """Tests for per-place detail lookups."""

    def test_default_fields(self, provider, client):
        client.place.return_value = {
            'status': 'OK',
            'result': {'name': 'Coffee Wagera', 'website': 'https://coffeewagera.pk/'},
        }

        outcome = provider.get_details('p1')

        assert outcome == Success({'name': 'Coffee Wagera', 'website': 'https://coffeewagera.pk/'})
        client.place.assert_called_once_with(place_id='p1', fields=DETAIL_FIELDS)

    def test_custom_fields(self, provider, client):
        client.place.return_value = {'status': 'OK', 'result': {'name': 'Espresso'}}

        provider.get_details('p2', fields=['name'])

        client.place.assert_called_once_with(place_id='p2', fields=['name'])

    def test_api_error(self, provider, client):
        client.place.side_effect = ApiError('NOT_FOUND')

        outcome = provider.get_details('missing')

        assert isinstance(outcome, Failure)
        assert outcome.status == 'NOT_FOUND'

    def test_empty_result(self, provider, client):
        client.place.return_value = {'status': 'OK', 'result': {}}

        outcome = provider.get_details('p1')

        assert isinstance(outcome, Failure)

    def test_invalid_field_becomes_failure(self, provider, client):
        client.place.side_effect = ValueError("Valid values for the `fields` param ...")

        outcome = provider.get_details('p1', fields=['bogus'])

        assert outcome.status == 'UNKNOWN_ERROR'


class TestFailureMapping:
    """Tests for mapping client exceptions to statuses."""

    def test_api_error(self):
        assert failure_from_exception(ApiError('OVER_QUERY_LIMIT')).status == 'OVER_QUERY_LIMIT'

    def test_timeout(self):
        assert failure_from_exception(Timeout()).status == 'TIMEOUT'

    def test_http_error(self):
        assert failure_from_exception(HTTPError(503)).status == 'HTTP_503'

    def test_transport_error(self):
        failure = failure_from_exception(TransportError(ConnectionError("reset")))
        assert failure.status == 'TRANSPORT_ERROR'


class TestFromApiKey:
    """Tests for building a provider from configuration."""

    def test_missing_key(self):
        with pytest.raises(ValueError):
            PlacesProvider.from_api_key("")

    def test_client_options(self):
        with patch('maps_leads.places.googlemaps.Client') as client_cls:
            provider = PlacesProvider.from_api_key("AIza-test-key")

        client_cls.assert_called_once_with(
            key="AIza-test-key",
            timeout=REQUEST_TIMEOUT,
            retry_over_query_limit=False
        )
        assert provider.client is client_cls.return_value

    def test_malformed_key_rejected_by_client(self):
        with pytest.raises(ValueError):
            PlacesProvider.from_api_key("not-a-google-key")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
