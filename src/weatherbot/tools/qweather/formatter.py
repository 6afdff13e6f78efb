"""Fixed Chinese text templates for weather reports and failures."""
from typing import Iterable

from .models import NowConditions, OutcomeKind, WarningRecord, WeatherOutcome

INVALID_CITY = "请输入有效的城市名称"
CITY_NOT_FOUND = '找不到城市"{city}"的{topic}，请确保输入正确的中国城市名称'
PROVIDER_FAILED = "获取{topic}失败，请稍后重试"
TRANSPORT_FAILED = "获取{topic}时发生错误：{message}"
NO_ALERTS = "{city}目前无天气预警信息"

NOW_TEMPLATE = (
    "{city}实时天气：\n"
    "• 天气：{now.text}\n"
    "• 温度：{now.temp}°C\n"
    "• 体感温度：{now.feels_like}°C\n"
    "• 相对湿度：{now.humidity}%\n"
    "• {now.wind_dir} {now.wind_scale}级\n"
    "• 更新时间：{now.obs_time}\n"
)

ALERTS_HEADER = "{city}天气预警信息：\n"
ALERT_TEMPLATE = (
    "• 预警类型：{alert.type_name}\n"
    "• 预警级别：{alert.level}\n"
    "• 预警详情：{alert.text}\n"
    "• 发布时间：{alert.pub_time}\n"
    "\n"
)


def format_now(city: str, now: NowConditions) -> str:
    return NOW_TEMPLATE.format(city=city, now=now)


def format_warnings(city: str, alerts: Iterable[WarningRecord]) -> str:
    blocks = [ALERT_TEMPLATE.format(alert=alert) for alert in alerts]
    return ALERTS_HEADER.format(city=city) + "".join(blocks)


def render_outcome(outcome: WeatherOutcome) -> str:
    """Turn an outcome into the text shown to users or returned to a model."""
    topic = outcome.topic.value
    match outcome.kind:
        case OutcomeKind.OK:
            return outcome.text
        case OutcomeKind.NO_ALERTS:
            return NO_ALERTS.format(city=outcome.city)
        case OutcomeKind.VALIDATION:
            return INVALID_CITY
        case OutcomeKind.NOT_FOUND:
            return CITY_NOT_FOUND.format(city=outcome.city, topic=topic)
        case OutcomeKind.PROVIDER_ERROR:
            return PROVIDER_FAILED.format(topic=topic)
        case OutcomeKind.TRANSPORT_ERROR:
            return TRANSPORT_FAILED.format(topic=topic, message=outcome.detail)
    raise ValueError(f"Unknown outcome kind {outcome.kind}")
