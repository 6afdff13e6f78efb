from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ConfigRequirement:
    key: str
    description: str
    required: bool = True
    default: Any = None


@dataclass
class ToolSpec:
    name: str
    description: str
    target: Any
    config_requirements: List[ConfigRequirement] = field(default_factory=list)


class ToolRegistry:
    def __init__(self):
        self._tools: Dict[str, ToolSpec] = {}

    def register(
        self,
        name: str,
        description: str,
        config_requirements: List[ConfigRequirement] = None,
    ):
        """Decorator to register a tool class (or function) by name."""

        def decorator(target):
            self._tools[name] = ToolSpec(
                name=name,
                description=description,
                target=target,
                config_requirements=config_requirements or [],
            )
            return target

        return decorator

    def get_tool(self, name: str) -> Optional[ToolSpec]:
        return self._tools.get(name)

    def get_tools(self) -> Dict[str, ToolSpec]:
        return self._tools.copy()

    def validate_config(
        self, name: str, config: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Check ``config`` against the tool's requirements and fill in defaults.

        Raises:
            ValueError: if the tool is unknown or required keys are missing
        """
        tool_spec = self.get_tool(name)
        if not tool_spec:
            raise ValueError(f"Tool '{name}' not found")

        processed_config = config.copy()
        missing_required = []
        for req in tool_spec.config_requirements:
            if config.get(req.key) is None:
                if req.default is not None:
                    processed_config[req.key] = req.default
                elif req.required:
                    missing_required.append(req.key)

        if missing_required:
            raise ValueError(
                f"Tool '{tool_spec.name}' is missing required configuration: {', '.join(missing_required)}"
            )
        return processed_config


tool_registry = ToolRegistry()
