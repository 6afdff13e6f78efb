import pytest

from weatherbot.errors import ConfigurationError
from weatherbot.tools import QWeatherTool
from weatherbot.tools.qweather import OutcomeKind
from weatherbot.tools.utils.registry import tool_registry
from weatherbot.tools.utils.schema import function_to_json
from weatherbot.tools.weather_tool import build_weather_service


def test_missing_api_key_fails_at_construction(isolated_store):
    with pytest.raises(ConfigurationError, match="QWEATHER_API_KEY"):
        QWeatherTool()


def test_api_key_from_environment(isolated_store, monkeypatch):
    monkeypatch.setenv("QWEATHER_API_KEY", "env-key")
    tool = QWeatherTool()
    assert tool.service.resolver.api_key == "env-key"
    assert tool.service.fetcher.api_key == "env-key"


def test_settings_override_endpoints(isolated_store, make_session, ok_routes):
    settings, secrets = isolated_store
    secrets.set_secret("QWEATHER_API_KEY", "stored-key")
    settings.set("QWEATHER_API_URL", "https://devapi.qweather.com")
    settings.set("QWEATHER_TIMEOUT", "3.5")
    session = make_session(ok_routes)

    service = build_weather_service(session=session)
    service.current_weather("北京")

    assert session.calls[0]["url"] == "https://geoapi.qweather.com/v2/city/lookup"
    assert session.calls[1]["url"] == "https://devapi.qweather.com/v7/weather/now"
    assert session.calls[1]["params"]["key"] == "stored-key"
    assert session.calls[1]["timeout"] == 3.5


def test_no_timeout_by_default(isolated_store, make_session, ok_routes):
    session = make_session(ok_routes)
    build_weather_service(api_key="k", session=session).active_alerts("北京")

    assert [call["timeout"] for call in session.calls] == [None, None]


def test_bad_timeout_setting(isolated_store):
    settings, _ = isolated_store
    settings.set("QWEATHER_TIMEOUT", "soon")
    with pytest.raises(ConfigurationError, match="QWEATHER_TIMEOUT"):
        build_weather_service(api_key="k")


def test_tool_functions_render_text(make_session, ok_routes):
    service = build_weather_service(api_key="k", session=make_session(ok_routes))
    tool = QWeatherTool(service=service)

    assert tool.get_weather("北京").startswith("北京实时天气：\n• 天气：晴")
    assert tool.get_weather_warning("北京").startswith("北京天气预警信息：")
    assert tool.get_weather("  ") == "请输入有效的城市名称"
    assert tool.alerts("北京").kind is OutcomeKind.OK


def test_tool_is_registered():
    spec = tool_registry.get_tool("QWeatherTool")
    assert spec is not None
    assert spec.target is QWeatherTool


def test_tool_schemas(make_session, ok_routes):
    tool = QWeatherTool(service=build_weather_service("k", make_session(ok_routes)))
    schemas = [function_to_json(f) for f in tool.get_tools()]

    assert [s["function"]["name"] for s in schemas] == ["get_weather", "get_weather_warning"]
    params = schemas[0]["function"]["parameters"]
    assert params["properties"] == {"city": {"type": "string"}}
    assert params["required"] == ["city"]
    assert "实时天气" in schemas[0]["function"]["description"]
