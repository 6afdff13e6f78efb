from getpass import getpass
from typing import Optional, TextIO

from rich.console import Console
from rich.text import TextType


class ConsoleWithInputBackspaceFixed(Console):
    """rich Console whose ``input`` lets readline own the prompt.

    Printing the prompt separately breaks backspace over it, so the prompt
    is rendered to a string and handed to ``input`` instead.
    """

    def input(
        self,
        prompt: TextType = "",
        *,
        markup: bool = True,
        emoji: bool = True,
        password: bool = False,
        stream: Optional[TextIO] = None,
    ) -> str:
        prompt_str = ""
        if prompt:
            with self.capture() as capture:
                self.print(prompt, markup=markup, emoji=emoji, end="")
            prompt_str = capture.get()
        if self.legacy_windows:
            self.file.write(prompt_str)
            prompt_str = ""
        if password:
            return getpass(prompt_str, stream=stream)
        if stream:
            self.file.write(prompt_str)
            line = stream.readline()
            if not line:
                raise EOFError
            return line.rstrip("\n")
        return input(prompt_str)
