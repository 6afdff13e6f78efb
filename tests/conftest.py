import copy
import os
import tempfile

# Settings and secrets open sqlite files under ~ at import time; point them
# at a throwaway home before any weatherbot module is imported.
os.environ["HOME"] = tempfile.mkdtemp(prefix="weatherbot-tests-")

from unittest.mock import MagicMock

import pytest
import requests

from weatherbot.tools.qweather import encode_gzip_json

GEO_OK = {
    "code": "200",
    "location": [
        {"name": "北京", "id": "101010100", "lat": "39.90", "lon": "116.40"},
        {"name": "北京南", "id": "101010200"},
    ],
}

NOW_OK = {
    "code": "200",
    "updateTime": "2024-05-01T12:10+08:00",
    "now": {
        "obsTime": "2024-05-01T12:00+08:00",
        "temp": "25",
        "feelsLike": "27",
        "text": "晴",
        "windDir": "东南风",
        "windScale": "3",
        "humidity": "40",
    },
}

WARNING_OK = {
    "code": "200",
    "warning": [
        {
            "typeName": "大风",
            "level": "蓝色",
            "text": "北京市气象台发布大风蓝色预警",
            "pubTime": "2024-05-01T08:00+08:00",
        },
        {
            "typeName": "高温",
            "level": "黄色",
            "text": "北京市气象台发布高温黄色预警",
            "pubTime": "2024-05-01T09:30+08:00",
        },
    ],
}


class FakeResponse:
    def __init__(self, body: bytes, status_code: int = 200):
        self.status_code = status_code
        self.raw = MagicMock()
        self.raw.read.return_value = body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeSession:
    """Stands in for requests.Session, routing on the URL path suffix.

    A route value is a JSON document (gzipped on the way out), raw bytes,
    a FakeResponse, or an exception to raise.
    """

    def __init__(self, routes: dict):
        self.routes = routes
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None, stream=False):
        self.calls.append(
            {"url": url, "params": params, "headers": headers, "timeout": timeout, "stream": stream}
        )
        for suffix, value in self.routes.items():
            if url.endswith(suffix):
                break
        else:
            raise AssertionError(f"Unexpected request to {url}")

        if isinstance(value, Exception):
            raise value
        if isinstance(value, FakeResponse):
            return value
        if isinstance(value, bytes):
            return FakeResponse(value)
        return FakeResponse(encode_gzip_json(value))


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def geo_ok():
    return copy.deepcopy(GEO_OK)


@pytest.fixture
def now_ok():
    return copy.deepcopy(NOW_OK)


@pytest.fixture
def warning_ok():
    return copy.deepcopy(WARNING_OK)


@pytest.fixture
def ok_routes(geo_ok, now_ok, warning_ok):
    return {
        "/v2/city/lookup": geo_ok,
        "/v7/weather/now": now_ok,
        "/v7/warning/now": warning_ok,
    }


@pytest.fixture
def isolated_store(tmp_path, monkeypatch):
    """Fresh settings and secrets databases, patched into every module."""
    from weatherbot.settings import Settings
    from weatherbot.weather_secrets import SecretManager

    store_settings = Settings(cache_dir=str(tmp_path))
    store_secrets = SecretManager(cache_dir=str(tmp_path), key=b"0" * 32)
    for module in ("weatherbot.tools.weather_tool", "weatherbot.llm", "weatherbot.cli"):
        monkeypatch.setattr(f"{module}.settings", store_settings)
    for module, attr in (
        ("weatherbot.tools.weather_tool", "weather_secrets"),
        ("weatherbot.tools.tavily_search_tool", "weather_secrets"),
        ("weatherbot.llm", "weather_secrets"),
        ("weatherbot.chat", "weather_secrets"),
        ("weatherbot.cli", "secrets"),
    ):
        monkeypatch.setattr(f"{module}.{attr}", store_secrets)
    for name in ("QWEATHER_API_KEY", "TAVILY_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    return store_settings, store_secrets
