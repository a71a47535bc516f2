"""
Tests for the Nominatim geocoding enricher.
"""

from unittest.mock import MagicMock

import pytest
import requests

from src.config import GeocodingConfig
from src.exceptions import GeocodingError
from src.geocoding.nominatim import GeocodingEnricher


def make_response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def enricher(session):
    config = GeocodingConfig(base_url="https://geo.example.com/search", user_agent="test-agent", timeout=3)
    return GeocodingEnricher(config, session=session)


class TestLookup:
    def test_best_match(self, enricher, session):
        session.get.return_value = make_response(payload=[
            {"lat": "37.7459", "lon": "-119.5936", "display_name": "Yosemite Valley, California, USA"},
            {"lat": "0", "lon": "0", "display_name": "ignored"},
        ])

        result = enricher.lookup("Yosemite")

        assert result.lat == pytest.approx(37.7459)
        assert result.lng == pytest.approx(-119.5936)
        assert result.formatted_address == "Yosemite Valley, California, USA"

    def test_request_uses_injected_config(self, enricher, session):
        session.get.return_value = make_response(payload=[{"lat": "1", "lon": "2", "display_name": "x"}])

        enricher.lookup("Yosemite")

        args, kwargs = session.get.call_args
        assert args[0] == "https://geo.example.com/search"
        assert kwargs["params"]["q"] == "Yosemite"
        assert kwargs["params"]["limit"] == 1
        assert kwargs["headers"]["User-Agent"] == "test-agent"
        assert kwargs["timeout"] == 3

    def test_zero_results(self, enricher, session):
        session.get.return_value = make_response(payload=[])
        with pytest.raises(GeocodingError):
            enricher.lookup("Atlantis")

    def test_http_error(self, enricher, session):
        session.get.return_value = make_response(status_code=503)
        with pytest.raises(GeocodingError) as exc_info:
            enricher.lookup("Yosemite")
        assert "503" in str(exc_info.value)

    def test_network_error_is_not_retried(self, enricher, session):
        session.get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(GeocodingError):
            enricher.lookup("Yosemite")
        assert session.get.call_count == 1

    def test_malformed_result(self, enricher, session):
        session.get.return_value = make_response(payload=[{"lat": "north", "lon": "2", "display_name": "x"}])
        with pytest.raises(GeocodingError):
            enricher.lookup("Yosemite")

    @pytest.mark.parametrize("payload", [{"error": "Unable to geocode"}, "Yosemite", None])
    def test_non_list_payload(self, enricher, session, payload):
        session.get.return_value = make_response(payload=payload)
        with pytest.raises(GeocodingError):
            enricher.lookup("Yosemite")

    def test_invalid_json(self, enricher, session):
        response = make_response()
        response.json.side_effect = ValueError("not json")
        session.get.return_value = response
        with pytest.raises(GeocodingError):
            enricher.lookup("Yosemite")


class TestGeocode:
    @pytest.mark.asyncio
    async def test_awaits_lookup(self, enricher, session):
        session.get.return_value = make_response(payload=[{"lat": "1.5", "lon": "2.5", "display_name": "Somewhere"}])

        result = await enricher.geocode("Somewhere")

        assert (result.lat, result.lng) == (1.5, 2.5)

    @pytest.mark.asyncio
    async def test_propagates_failure(self, enricher, session):
        session.get.return_value = make_response(payload=[])
        with pytest.raises(GeocodingError):
            await enricher.geocode("Atlantis")
