from .client import LocationResolver, WeatherFetcher, ensure_ok
from .decoder import decode_gzip_json, encode_gzip_json
from .models import OutcomeKind, Topic, WeatherOutcome
from .service import WeatherService

__all__ = [
    "LocationResolver",
    "WeatherFetcher",
    "WeatherService",
    "WeatherOutcome",
    "OutcomeKind",
    "Topic",
    "decode_gzip_json",
    "encode_gzip_json",
    "ensure_ok",
]
