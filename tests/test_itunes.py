"""
Tests for ITunesSearchClient - request construction and response handling.
"""
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import requests

from musik.api.itunes import ITunesSearchClient
from musik.models import SearchQuery


def make_client(response=None, error=None):
    session = MagicMock()
    session.headers = {}
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return ITunesSearchClient(base_url='https://itunes.apple.com/search', session=session), session


def make_response(status=200, payload=None, json_error=None):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = payload
    return resp


class TestRequestConstruction:
    """Tests for the search URL and parameters."""

    def test_params_without_explicit(self):
        """explicit=all omits the parameter entirely."""
        params = ITunesSearchClient.build_params(SearchQuery(keyword='abba', limit=25))
        assert params == [('term', 'abba'), ('media', 'music'), ('country', 'US'), ('limit', '25')]

    @pytest.mark.parametrize('explicit,value', [('yes', 'Yes'), ('no', 'No')])
    def test_params_with_explicit(self, explicit, value):
        params = ITunesSearchClient.build_params(SearchQuery(keyword='abba', explicit=explicit))
        assert params[-1] == ('explicit', value)

    def test_url_percent_encodes_term(self):
        client, _ = make_client()
        url = client.build_url(SearchQuery(keyword='AC/DC & friends', media_type='musicVideo',
                                           country='GB', limit=10))
        assert url == ('https://itunes.apple.com/search?term=AC%2FDC%20%26%20friends'
                       '&media=musicVideo&country=GB&limit=10')

    def test_user_agent_set(self):
        _, session = make_client()
        assert 'musik' in session.headers['User-Agent']


class TestResponseHandling:
    """Tests for normalizing responses and failures."""

    def test_results_normalized(self, sample_results):
        client, session = make_client(make_response(payload={
            'resultCount': 3, 'results': sample_results,
        }))
        outcome = client.search(SearchQuery(keyword='daft punk'))

        assert outcome.ok
        assert [t.id for t in outcome.tracks] == [1440857781, 1440857790, 555]
        first = outcome.tracks[0]
        assert first.title == 'One More Time'
        assert first.price == Decimal('1.29')
        assert first.artwork_url.endswith('100x100bb.jpg')
        assert first.release_date.year == 2001
        session.get.assert_called_once()

    def test_missing_fields_become_none(self, sample_results):
        client, _ = make_client(make_response(payload={'results': sample_results}))
        second = client.search(SearchQuery(keyword='daft punk')).tracks[1]

        assert second.preview_url is None
        assert second.track_price is None
        assert second.price == Decimal('9.99')
        assert second.duration_millis is None
        assert second.genre is None

    def test_items_without_id_skipped(self):
        client, _ = make_client(make_response(payload={'results': [
            {'trackName': 'No id here'},
            {'trackId': 7, 'trackName': 'Seven'},
        ]}))
        outcome = client.search(SearchQuery(keyword='seven'))
        assert [t.id for t in outcome.tracks] == [7]

    def test_zero_results_is_empty_success(self):
        client, _ = make_client(make_response(payload={'resultCount': 0, 'results': []}))
        outcome = client.search(SearchQuery(keyword='abc'))
        assert outcome.ok
        assert outcome.empty
        assert outcome.tracks == []

    def test_missing_results_key_is_empty(self):
        client, _ = make_client(make_response(payload={'resultCount': 0}))
        assert client.search(SearchQuery(keyword='abc')).empty

    @pytest.mark.parametrize('results', [5, 'tracks', {'trackId': 1}])
    def test_non_list_results_is_network_error(self, results):
        client, _ = make_client(make_response(payload={'resultCount': 1, 'results': results}))
        outcome = client.search(SearchQuery(keyword='abc'))

        assert not outcome.ok
        assert outcome.error.kind == 'network'
        assert outcome.tracks == []

    def test_http_error(self):
        client, _ = make_client(make_response(status=503))
        outcome = client.search(SearchQuery(keyword='abc'))

        assert not outcome.ok
        assert outcome.error.kind == 'http'
        assert outcome.error.status == 503
        assert outcome.error.user_message == 'Failed to fetch data: HTTP error! status: 503'
        assert outcome.tracks == []

    def test_network_error(self):
        client, _ = make_client(error=requests.ConnectionError('connection refused'))
        outcome = client.search(SearchQuery(keyword='abc'))

        assert outcome.error.kind == 'network'
        assert outcome.error.status is None
        assert 'connection refused' in outcome.error.message

    def test_invalid_json_is_network_error(self):
        client, _ = make_client(make_response(json_error=ValueError('Expecting value')))
        outcome = client.search(SearchQuery(keyword='abc'))
        assert outcome.error.kind == 'network'

    def test_no_timeout_by_default(self):
        client, session = make_client(make_response(payload={'results': []}))
        client.search(SearchQuery(keyword='abc'))
        assert session.get.call_args.kwargs['timeout'] is None
