"""Interpreters used to run scripts."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Interpreter:
    """A command, with arguments, that runs a script."""

    command: str = ""
    args: list[str] = field(default_factory=list)

    def none(self) -> bool:
        """Return whether this represents no interpreter."""
        return not self.command

    def exec_command(self, name: str) -> list[str]:
        """Return the argument vector that runs the script name."""
        if self.none():
            return [name]
        return [self.command, *self.args, name]