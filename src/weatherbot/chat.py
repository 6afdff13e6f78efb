import asyncio
import json
import logging
import os
import readline
from datetime import date
from typing import Any, Callable, List, Optional, Union

import litellm
from jinja2 import Template, DebugUndefined

from .fix_console import ConsoleWithInputBackspaceFixed
from .errors import ConfigurationError
from .llm import LLMUsage, default_chat_model, setup_model_key
from .tools.base import BaseTool
from .tools.utils.registry import tool_registry
from .tools.utils.schema import function_to_json
from .weather_secrets import weather_secrets

logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTIONS = (
    "You are useful assistant and can perform web searches and look up "
    "Chinese city weather to reply to your questions. Today is {{ today }}."
)

HISTORY_FILE = "~/.weatherbot_history"

STOPPED_TEXT = "(Stopped after {turns} tool rounds without a final answer. Try rephrasing the question.)"

HELP_TEXT = """
    .reset - Clear the conversation
    .help - Show this help
    .quit - Quit the chat
"""


def collect_functions(tools: List[Union[BaseTool, Callable]]) -> List[Callable]:
    functions = []
    for tool in tools:
        if isinstance(tool, BaseTool):
            functions.extend(tool.get_tools())
        else:
            functions.append(tool)
    return functions


def stringify_result(result: Any) -> str:
    if isinstance(result, str):
        return result
    try:
        return json.dumps(result, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(result)


class ChatBot:
    """A language model wired to tool functions, driven one prompt at a time.

    The message list lives for the session only. Tool calls returned by the
    model are executed and their results fed back until the model answers
    in plain text or ``max_turns`` completions have been made.
    """

    def __init__(
        self,
        tools: List[Union[BaseTool, Callable]],
        model: Optional[str] = None,
        instructions: str = DEFAULT_INSTRUCTIONS,
        max_turns: int = 5,
        **prompt_variables,
    ):
        self.model = model or default_chat_model()
        self.functions = collect_functions(tools)
        self.function_map = {f.__name__: f for f in self.functions}
        self.tool_schemas = [function_to_json(f) for f in self.functions]
        self.max_turns = max_turns
        self.usage = LLMUsage(model=self.model)
        variables = {"today": date.today().isoformat(), **prompt_variables}
        self.instructions = Template(instructions, undefined=DebugUndefined).render(
            **variables
        )
        self.history: list = []

    def reset(self):
        self.history = []

    def _complete(self):
        params = {
            "model": self.model,
            "temperature": 0.0,
            "messages": [{"role": "system", "content": self.instructions}]
            + self.history,
        }
        if self.tool_schemas:
            params["tools"] = self.tool_schemas
        logger.debug("Calling %s with %d messages", self.model, len(params["messages"]))
        response = litellm.completion(**params)
        self.usage.add(response)
        return response.choices[0].message

    def _call_tool(self, tool_call) -> dict:
        name = tool_call.function.name
        if name not in self.function_map:
            logger.warning("Model asked for unknown tool %s", name)
            return {
                "role": "tool",
                "tool_call_id": tool_call.id,
                "name": name,
                "content": f"Error: Tool {name} not found.",
            }

        func = self.function_map[name]
        try:
            args = json.loads(tool_call.function.arguments or "{}")
            logger.info("Calling tool %s with %s", name, args)
            if asyncio.iscoroutinefunction(func):
                result = asyncio.run(func(**args))
            else:
                result = func(**args)
            content = stringify_result(result)
        except Exception as e:
            logger.warning("Tool %s failed: %s", name, e)
            content = f"{name} - Error: {e}"

        return {
            "role": "tool",
            "tool_call_id": tool_call.id,
            "name": name,
            "content": content,
        }

    def ask(self, prompt: str) -> str:
        """Send one user prompt and return the assistant's final text."""
        self.history.append({"role": "user", "content": prompt})
        message = None
        for _ in range(self.max_turns):
            message = self._complete()
            self.history.append(message)
            if not message.tool_calls:
                break
            for tool_call in message.tool_calls:
                self.history.append(self._call_tool(tool_call))
        else:
            logger.warning("Stopped after %d completions with tools pending", self.max_turns)
            return STOPPED_TEXT.format(turns=self.max_turns)

        return (message.content if message else None) or ""

    def repl(self, console: Optional[ConsoleWithInputBackspaceFixed] = None, stream=None):
        console = console or ConsoleWithInputBackspaceFixed()
        hist = os.path.expanduser(HISTORY_FILE)
        if stream is None and os.path.exists(hist):
            readline.read_history_file(hist)

        console.print("\nI am your AI assistant.\n")
        while True:
            try:
                line = console.input("\nUSER: ", stream=stream).strip()
                if stream is None:
                    readline.write_history_file(hist)

                if line in ("", ".quit"):
                    break
                if line == ".help":
                    console.print(HELP_TEXT)
                    continue
                if line == ".reset":
                    self.reset()
                    console.print("Conversation cleared.")
                    continue

                text = self.ask(line)
                console.print(f"\nASSISTANT: {text}", markup=False)
            except EOFError:
                console.print("\nExiting chat.")
                break
            except KeyboardInterrupt:
                console.print("\nKeyboardInterrupt. Type .quit to exit.")
            except Exception as e:
                logger.exception("Chat turn failed")
                console.print(f"Error: {e}", markup=False)

        console.print(str(self.usage), style="dim", markup=False)


def load_registered_tools() -> List[BaseTool]:
    """Instantiate every registered tool.

    All missing secrets are collected first and reported in a single
    ConfigurationError, so nothing is constructed half way.
    """
    from . import tools

    # Importing each tool module runs its registry decorator.
    for name in tools.__all__:
        getattr(tools, name)

    specs = tool_registry.get_tools()
    problems = []
    for spec in specs.values():
        config = {
            req.key: weather_secrets.get_secret(req.key)
            for req in spec.config_requirements
        }
        try:
            tool_registry.validate_config(spec.name, config)
        except ValueError as e:
            problems.append(str(e))
    if problems:
        problems.append("Set them with: weatherbot secrets set NAME VALUE")
        raise ConfigurationError("\n".join(problems))

    return [spec.target() for spec in specs.values()]


def start_chat(model: Optional[str] = None, tools: Optional[list] = None):
    """Build the chatbot with every registered tool and run the REPL."""
    bot = ChatBot(
        tools=tools if tools is not None else load_registered_tools(),
        model=model,
    )
    setup_model_key(bot.model)
    bot.repl()
