import inspect
from typing import Callable

TYPE_MAP = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    list: "array",
    dict: "object",
    type(None): "null",
}


def function_to_json(func: Callable) -> dict:
    """
    Describe a Python callable as an OpenAI style function tool.

    Bound methods lose ``self`` automatically; unknown annotations become
    "string". The docstring is the tool description.
    """
    if isinstance(func, dict):
        return func

    try:
        signature = inspect.signature(func)
    except ValueError as e:
        raise ValueError(
            f"Failed to get signature for function {func.__name__}: {str(e)}"
        )

    parameters = {}
    for param in signature.parameters.values():
        if param.name == "self":
            continue
        parameters[param.name] = {"type": TYPE_MAP.get(param.annotation, "string")}

    required = [
        param.name
        for param in signature.parameters.values()
        if param.default is inspect.Parameter.empty and param.name != "self"
    ]

    return {
        "type": "function",
        "function": {
            "name": func.__name__,
            "description": inspect.cleandoc(func.__doc__ or ""),
            "parameters": {
                "type": "object",
                "properties": parameters,
                "required": required,
            },
        },
    }
