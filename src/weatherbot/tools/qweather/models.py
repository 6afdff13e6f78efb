"""Payload and outcome models for QWeather lookups."""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SUCCESS_CODE = "200"


class QWeatherModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        # JSON null is treated like a missing field, so defaults apply.
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class GeoLocation(QWeatherModel):
    """One entry of the geocoding ``location`` array."""
    id: str
    name: str = ""


class GeoLookup(QWeatherModel):
    code: str = ""
    location: List[GeoLocation] = Field(default_factory=list)

    @property
    def location_id(self) -> Optional[str]:
        if self.code != SUCCESS_CODE or not self.location:
            return None
        return self.location[0].id


class NowConditions(QWeatherModel):
    """Current conditions, the ``now`` object of ``/v7/weather/now``."""
    text: str = ""
    temp: str = ""
    feels_like: str = Field("", alias="feelsLike")
    humidity: str = ""
    wind_dir: str = Field("", alias="windDir")
    wind_scale: str = Field("", alias="windScale")
    obs_time: str = Field("", alias="obsTime")


class WarningRecord(QWeatherModel):
    """One active alert from ``/v7/warning/now``."""
    type_name: str = Field("", alias="typeName")
    level: str = ""
    text: str = ""
    pub_time: str = Field("", alias="pubTime")


class NowResponse(QWeatherModel):
    code: str = ""
    now: NowConditions = Field(default_factory=NowConditions)

    @field_validator("now", mode="before")
    @classmethod
    def _object_or_empty(cls, value):
        return value if isinstance(value, dict) else {}


class WarningResponse(QWeatherModel):
    code: str = ""
    warning: List[WarningRecord] = Field(default_factory=list)

    @field_validator("warning", mode="before")
    @classmethod
    def _array_or_empty(cls, value):
        # anything but a JSON array means no alerts
        return value if isinstance(value, list) else []


class Topic(str, Enum):
    CURRENT = "天气信息"
    ALERTS = "天气预警信息"


class OutcomeKind(str, Enum):
    OK = "ok"
    NO_ALERTS = "no_alerts"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PROVIDER_ERROR = "provider_error"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class WeatherOutcome:
    """Result of a weather operation.

    ``text`` carries the formatted report for ``OK`` outcomes. ``detail``
    carries the internal cause (status code, exception message) and is only
    shown to users for transport errors.
    """
    kind: OutcomeKind
    topic: Topic
    city: str = ""
    text: str = ""
    detail: str = ""

    def render(self) -> str:
        from .formatter import render_outcome

        return render_outcome(self)
