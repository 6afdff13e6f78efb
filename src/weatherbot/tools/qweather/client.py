import logging
from typing import Any, Optional

import requests

from weatherbot.errors import WeatherProviderError
from .decoder import decode_gzip_json
from .models import SUCCESS_CODE, GeoLookup

logger = logging.getLogger(__name__)

DEFAULT_GEO_URL = "https://geoapi.qweather.com"
DEFAULT_API_URL = "https://api.qweather.com"
# requests waits indefinitely unless a timeout is configured.
DEFAULT_TIMEOUT = None

CITY_LOOKUP_PATH = "/v2/city/lookup"
WEATHER_NOW_PATH = "/v7/weather/now"
WARNING_NOW_PATH = "/v7/warning/now"

REQUEST_HEADERS = {
    "Accept": "application/json",
    "Accept-Charset": "UTF-8",
    "Accept-Encoding": "gzip",
    "Content-Type": "application/json;charset=UTF-8",
}


def ensure_ok(document: dict, endpoint: str = "") -> dict:
    """Raise WeatherProviderError unless the status sentinel is "200"."""
    code = str(document.get("code", "")) if isinstance(document, dict) else ""
    if code != SUCCESS_CODE:
        raise WeatherProviderError(code, endpoint)
    return document


class QWeatherClient:
    """Shared plumbing for QWeather GET requests.

    Bodies are read with ``decode_content=False`` so the gzip stream reaches
    :func:`decode_gzip_json` untouched, whether or not the server sets a
    ``Content-Encoding`` header.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def get_json(self, path: str, location: str) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s location=%s", url, location)
        params = {"key": self.api_key, "location": location}
        with self.session.get(
            url,
            params=params,
            headers=REQUEST_HEADERS,
            timeout=self.timeout,
            stream=True,
        ) as response:
            response.raise_for_status()
            body = response.raw.read(decode_content=False)
        return decode_gzip_json(body)


class LocationResolver(QWeatherClient):
    """Resolves a free text city name to a QWeather location id."""

    def __init__(self, api_key: str, base_url: str = DEFAULT_GEO_URL, **kwargs):
        super().__init__(api_key, base_url, **kwargs)

    def lookup(self, city: str) -> GeoLookup:
        """Query the geocoding endpoint. Exceptions propagate."""
        return GeoLookup.model_validate(self.get_json(CITY_LOOKUP_PATH, city))

    def resolve(self, city: str) -> Optional[str]:
        """Return the first matching location id, or None.

        None covers both "no such city" and "lookup failed"; the two are
        told apart only in the log.
        """
        try:
            result = self.lookup(city)
        except Exception as e:
            logger.warning("Geocoding request for %r failed: %s", city, e)
            return None

        if result.code != SUCCESS_CODE:
            logger.warning("Geocoding for %r returned code %r", city, result.code)
            return None
        if result.location_id is None:
            logger.info("Geocoding found no location for %r", city)
        return result.location_id


class WeatherFetcher(QWeatherClient):
    """Fetches current conditions and active alerts for a location id."""

    def __init__(self, api_key: str, base_url: str = DEFAULT_API_URL, **kwargs):
        super().__init__(api_key, base_url, **kwargs)

    def fetch_current(self, location_id: str) -> dict:
        return self.get_json(WEATHER_NOW_PATH, location_id)

    def fetch_alerts(self, location_id: str) -> dict:
        return self.get_json(WARNING_NOW_PATH, location_id)
