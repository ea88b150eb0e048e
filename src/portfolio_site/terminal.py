"""State machine behind the project-browsing terminal widget."""

from dataclasses import dataclass, field
from typing import Literal

WELCOME_MESSAGE = 'Welcome to the project terminal! Type "help" for commands.'
HELP_TEXT = (
    "Available commands:\n"
    "  ls         - list projects\n"
    "  open <slug> - open project\n"
    "  kill <slug> - close project\n"
    "  help       - show this help"
)


@dataclass
class TerminalEntry:
    type: Literal["prompt", "output"]
    content: str


@dataclass(frozen=True)
class TerminalAction:
    """Project the UI should open and/or close after a command."""

    open: str | None = None
    close: str | None = None


@dataclass
class TerminalState:
    project_slugs: list[str]
    buffer: list[TerminalEntry] = field(
        default_factory=lambda: [
            TerminalEntry("output", WELCOME_MESSAGE),
            TerminalEntry("prompt", ""),
        ]
    )
    current_input: str = ""
    cursor_position: int = 0
    current_project: str | None = None

    def move_cursor_left(self) -> None:
        self.cursor_position = max(0, self.cursor_position - 1)

    def move_cursor_right(self) -> None:
        self.cursor_position = min(len(self.current_input), self.cursor_position + 1)

    def insert_character(self, char: str) -> None:
        before = self.current_input[: self.cursor_position]
        after = self.current_input[self.cursor_position :]
        self.current_input = before + char + after
        self.cursor_position += 1

    def delete_character(self) -> None:
        """Backspace: remove the character before the cursor."""
        if self.cursor_position > 0:
            before = self.current_input[: self.cursor_position - 1]
            after = self.current_input[self.cursor_position :]
            self.current_input = before + after
            self.cursor_position -= 1

    def close_project(self) -> None:
        self.current_project = None

    def _output(self, content: str) -> None:
        self.buffer.append(TerminalEntry("output", content))

    def _new_prompt(self) -> None:
        self.buffer.append(TerminalEntry("prompt", ""))
        self.current_input = ""
        self.cursor_position = 0

    def execute_command(self, cmd: str) -> TerminalAction:
        """Run a command, append its output and start a fresh prompt."""
        self.buffer[-1] = TerminalEntry("prompt", cmd)
        to_open = None
        to_close = None

        if cmd == "ls":
            self._output("  ".join(self.project_slugs))
        elif cmd == "help":
            self._output(HELP_TEXT)
        elif cmd.startswith("open "):
            slug = cmd[5:].strip()
            if slug in self.project_slugs:
                if self.current_project:
                    to_close = self.current_project
                    self._output(f"Closing {self.current_project}...")
                self._output(f"Opening {slug}...")
                self.current_project = slug
                to_open = slug
            else:
                self._output(f"Project '{slug}' not found. Use 'ls' to see available projects.")
        elif cmd.startswith("kill "):
            slug = cmd[5:].strip()
            if self.current_project == slug:
                self._output(f"Closing {slug}...")
                to_close = slug
                self.current_project = None
            elif self.current_project:
                self._output(
                    f"Project '{slug}' is not currently open. Currently open: {self.current_project}"
                )
            else:
                self._output("No project is currently open.")
        elif cmd.strip() == "":
            pass
        else:
            self._output(f"Command not found: {cmd}. Type 'help' for available commands.")

        self._new_prompt()
        return TerminalAction(open=to_open, close=to_close)

    def handle_tab_completion(self) -> None:
        for verb in ("open ", "kill "):
            if self.current_input.startswith(verb):
                partial = self.current_input[len(verb) :].lower()
                matches = [s for s in self.project_slugs if s.lower().startswith(partial)]
                if len(matches) == 1:
                    self.current_input = verb + matches[0]
                    self.cursor_position = len(self.current_input)
                elif len(matches) > 1:
                    self.buffer[-1] = TerminalEntry("prompt", self.current_input)
                    self._output("  ".join(matches))
                    self._new_prompt()
                return

        # any prefix of "ls", including the empty input
        if "ls".startswith(self.current_input):
            self.current_input = "ls"
            self.cursor_position = len(self.current_input)

    @property
    def current_prompt_index(self) -> int:
        return len(self.buffer) - 1

    @property
    def is_current_prompt_active(self) -> bool:
        prompt = self.buffer[-1] if self.buffer else None
        return prompt is not None and prompt.type == "prompt" and prompt.content == ""
