class WeatherbotError(Exception):
    """Base class for weatherbot errors."""


class ConfigurationError(WeatherbotError):
    """A required secret or setting is missing or invalid.

    Raised while tools and commands are being set up, never per request.
    """


class WeatherProviderError(WeatherbotError):
    """QWeather answered, but its status sentinel was not "200"."""

    def __init__(self, code: str, endpoint: str = ""):
        self.code = code
        self.endpoint = endpoint
        super().__init__(f"QWeather {endpoint or 'request'} returned code {code!r}")
