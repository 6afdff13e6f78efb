from abc import ABC, abstractmethod
from typing import Callable


class BaseTool(ABC):
    """Base class for tools handed to the chatbot."""

    @abstractmethod
    def __init__(self):
        pass

    @abstractmethod
    def get_tools(self) -> list[Callable]:
        """Return the callables exposed to the model."""
        pass
