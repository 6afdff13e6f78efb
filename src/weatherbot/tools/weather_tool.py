from typing import Callable, Optional

import requests

from weatherbot.settings import settings
from weatherbot.weather_secrets import weather_secrets
from weatherbot.tools.base import BaseTool
from weatherbot.tools.qweather import (
    LocationResolver,
    WeatherFetcher,
    WeatherOutcome,
    WeatherService,
)
from weatherbot.tools.qweather.client import (
    DEFAULT_API_URL,
    DEFAULT_GEO_URL,
    DEFAULT_TIMEOUT,
)
from weatherbot.tools.utils.registry import tool_registry, ConfigRequirement

API_KEY_NAME = "QWEATHER_API_KEY"


def build_weather_service(
    api_key: Optional[str] = None, session: Optional[requests.Session] = None
) -> WeatherService:
    """Wire a WeatherService from secrets and settings.

    Raises ConfigurationError when no QWeather key is configured.
    """
    api_key = api_key or weather_secrets.get_required_secret(API_KEY_NAME)
    session = session or requests.Session()
    timeout = settings.get_float("QWEATHER_TIMEOUT", DEFAULT_TIMEOUT)
    resolver = LocationResolver(
        api_key,
        settings.get("QWEATHER_GEO_URL", DEFAULT_GEO_URL),
        session=session,
        timeout=timeout,
    )
    fetcher = WeatherFetcher(
        api_key,
        settings.get("QWEATHER_API_URL", DEFAULT_API_URL),
        session=session,
        timeout=timeout,
    )
    return WeatherService(resolver, fetcher)


@tool_registry.register(
    name="QWeatherTool",
    description="Current weather and weather alerts for Chinese cities (QWeather)",
    config_requirements=[
        ConfigRequirement(key=API_KEY_NAME, description="QWeather API key"),
    ],
)
class QWeatherTool(BaseTool):
    """Chinese city weather lookups backed by the QWeather API."""

    def __init__(self, api_key: str = None, service: WeatherService = None):
        self.service = service or build_weather_service(api_key)

    def get_tools(self) -> list[Callable]:
        return [self.get_weather, self.get_weather_warning]

    def current(self, city: str) -> WeatherOutcome:
        return self.service.current_weather(city)

    def alerts(self, city: str) -> WeatherOutcome:
        return self.service.active_alerts(city)

    def get_weather(self, city: str) -> str:
        """获取中国城市的实时天气信息。输入城市名称，如：北京、上海、广州等"""
        return self.current(city).render()

    def get_weather_warning(self, city: str) -> str:
        """获取中国城市的天气预警信息。输入城市名称，如：北京、上海、广州等"""
        return self.alerts(city).render()
