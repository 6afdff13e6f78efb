__version__ = "0.1.0"

from .errors import ConfigurationError, WeatherbotError, WeatherProviderError

__all__ = ["ConfigurationError", "WeatherbotError", "WeatherProviderError"]
