import logging
from typing import Callable, List

import httpx

from weatherbot.weather_secrets import weather_secrets
from weatherbot.tools.base import BaseTool
from weatherbot.tools.utils.registry import tool_registry, ConfigRequirement

logger = logging.getLogger(__name__)

TAVILY_API_URL = "https://api.tavily.com"
API_KEY_NAME = "TAVILY_API_KEY"


@tool_registry.register(
    name="TavilySearchTool",
    description="Search the web using Tavily",
    config_requirements=[
        ConfigRequirement(key=API_KEY_NAME, description="Tavily API key"),
    ],
)
class TavilySearchTool(BaseTool):
    def __init__(self, api_key: str = None):
        self.api_key = api_key or weather_secrets.get_required_secret(API_KEY_NAME)

    def get_tools(self) -> list[Callable]:
        return [self.perform_web_search, self.query_for_news]

    async def _search(self, params: dict) -> dict:
        logger.debug("Tavily search: %s", params.get("query"))
        async with httpx.AsyncClient() as client:
            response = await client.post(
                f"{TAVILY_API_URL}/search",
                json={"api_key": self.api_key, **params},
                timeout=90,
            )
        response.raise_for_status()
        return response.json()

    async def query_for_news(self, query: str, days_back: int = 1) -> List[dict]:
        """Returns the latest headlines on the given topic."""
        results = await self._search(
            {
                "query": query,
                "topic": "news",
                "days": days_back,
                "max_results": 10,
                "include_images": False,
                "include_answer": "advanced",
            }
        )
        return results["results"]

    async def perform_web_search(
        self, query: str, include_images: bool = False
    ) -> List[dict]:
        """Returns web search result pages and images using the Tavily search engine.
        Anything related to news should use the query_for_news function.
        Don't use the "site:" filter unless requested explicitly to do so.
        """
        results = await self._search(
            {
                "query": query,
                "max_results": 8,
                "search_depth": "advanced",
                "include_answer": True,
                "include_raw_content": False,
                "include_images": include_images,
            }
        )
        return results["results"] + results.get("images", [])
