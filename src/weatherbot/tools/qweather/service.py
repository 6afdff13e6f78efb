import logging
from typing import Callable, Optional, Protocol

from weatherbot.errors import WeatherProviderError
from .client import ensure_ok, WARNING_NOW_PATH, WEATHER_NOW_PATH
from .formatter import format_now, format_warnings
from .models import (
    NowResponse,
    OutcomeKind,
    Topic,
    WarningResponse,
    WeatherOutcome,
)

logger = logging.getLogger(__name__)


class Resolver(Protocol):
    def resolve(self, city: str) -> Optional[str]: ...


class Fetcher(Protocol):
    def fetch_current(self, location_id: str) -> dict: ...

    def fetch_alerts(self, location_id: str) -> dict: ...


class WeatherService:
    """Validate, resolve, fetch and format QWeather lookups.

    Both public operations return a :class:`WeatherOutcome` and never raise;
    callers turn outcomes into text with ``outcome.render()``.
    """

    def __init__(self, resolver: Resolver, fetcher: Fetcher):
        self.resolver = resolver
        self.fetcher = fetcher

    def current_weather(self, city: str) -> WeatherOutcome:
        return self._run(city, Topic.CURRENT, self._current_report)

    def active_alerts(self, city: str) -> WeatherOutcome:
        return self._run(city, Topic.ALERTS, self._alerts_report)

    def _run(
        self,
        city: str,
        topic: Topic,
        report: Callable[[str, str], WeatherOutcome],
    ) -> WeatherOutcome:
        if city is None or not city.strip():
            return WeatherOutcome(OutcomeKind.VALIDATION, topic, city or "")

        location_id = self.resolver.resolve(city.strip())
        if location_id is None:
            return WeatherOutcome(OutcomeKind.NOT_FOUND, topic, city)

        try:
            return report(city, location_id)
        except WeatherProviderError as e:
            logger.warning("%s lookup for %r failed: %s", topic.name, city, e)
            return WeatherOutcome(
                OutcomeKind.PROVIDER_ERROR, topic, city, detail=e.code
            )
        except Exception as e:
            logger.exception("%s lookup for %r raised", topic.name, city)
            return WeatherOutcome(
                OutcomeKind.TRANSPORT_ERROR, topic, city, detail=str(e)
            )

    def _current_report(self, city: str, location_id: str) -> WeatherOutcome:
        document = ensure_ok(self.fetcher.fetch_current(location_id), WEATHER_NOW_PATH)
        now = NowResponse.model_validate(document).now
        return WeatherOutcome(
            OutcomeKind.OK, Topic.CURRENT, city, text=format_now(city, now)
        )

    def _alerts_report(self, city: str, location_id: str) -> WeatherOutcome:
        document = ensure_ok(self.fetcher.fetch_alerts(location_id), WARNING_NOW_PATH)
        alerts = WarningResponse.model_validate(document).warning
        if not alerts:
            return WeatherOutcome(OutcomeKind.NO_ALERTS, Topic.ALERTS, city)
        return WeatherOutcome(
            OutcomeKind.OK, Topic.ALERTS, city, text=format_warnings(city, alerts)
        )
