import requests
import asyncio
import logging
from typing import Optional

from pydantic import BaseModel

from src.config import GeocodingConfig
from src.exceptions import GeocodingError

# Get logger
logger = logging.getLogger(__name__)


class GeocodeResult(BaseModel):
    lat: float
    lng: float
    formatted_address: str


class GeocodingEnricher:
    """Resolves a free-text location to its single best match."""

    def __init__(self, config: Optional[GeocodingConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or GeocodingConfig()
        self.session = session or requests.Session()

    def lookup(self, location_text):
        params = {
            "q": location_text,
            "format": "json",
            "limit": 1,
            "addressdetails": 0
        }

        headers = {
            "User-Agent": self.config.user_agent
        }

        try:
            response = self.session.get(
                self.config.base_url,
                params=params,
                headers=headers,
                timeout=self.config.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Network error while geocoding '{location_text}': {e}")
            raise GeocodingError(location_text, str(e))

        if response.status_code != 200:
            logger.error(f"Geocoding HTTP error ({response.status_code}) for '{location_text}'")
            raise GeocodingError(location_text, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError:
            raise GeocodingError(location_text, "malformed response")

        # Nominatim answers a search with a list; errors come back as an object
        if not isinstance(data, list):
            logger.error(f"Unexpected geocoding response for '{location_text}': {data!r}")
            raise GeocodingError(location_text, "malformed response")

        if not data:
            logger.warning(f"No geocoding results for '{location_text}'")
            raise GeocodingError(location_text, "no results")

        best = data[0]
        try:
            result = GeocodeResult(
                lat=float(best["lat"]),
                lng=float(best["lon"]),
                formatted_address=best["display_name"]
            )
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingError(location_text, f"malformed result: {e}")

        logger.info(f"Successfully geocoded '{location_text}' to ({result.lat}, {result.lng})")
        return result

    async def geocode(self, location_text: str) -> GeocodeResult:
        return await asyncio.to_thread(self.lookup, location_text)
