# Tools are imported lazily: each one pulls in its own HTTP stack and
# secrets lookups.
_TOOL_MAPPING = {
    "BaseTool": "base",
    "QWeatherTool": "weather_tool",
    "TavilySearchTool": "tavily_search_tool",
}

__all__ = list(_TOOL_MAPPING)

_tool_cache = {}


def __getattr__(name):
    if name in _TOOL_MAPPING:
        if name in _tool_cache:
            return _tool_cache[name]

        module_name = _TOOL_MAPPING[name]
        try:
            module = __import__(f"weatherbot.tools.{module_name}", fromlist=[name])
            tool = getattr(module, name)
        except (ImportError, AttributeError) as e:
            raise AttributeError(f"Failed to import {name} from module {module_name}: {e}")
        _tool_cache[name] = tool
        return tool

    raise AttributeError(f"module 'weatherbot.tools' has no attribute '{name}'")


def __dir__():
    return sorted(__all__)
