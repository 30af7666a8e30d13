"""Errors raised when a message log breaks the data contract."""

from typing import Any


class ConvoPrepError(Exception):
    """Base class for convoprep errors."""


class InvalidMessageRole(ConvoPrepError, ValueError):
    """A message carries a role outside system/user/assistant/tool."""

    def __init__(self, role: Any) -> None:
        self.role = role
        super().__init__(f"Invalid message role: {role}")


class InvalidToolOutput(ConvoPrepError, ValueError):
    """A tool result output carries a kind outside json/media."""

    def __init__(self, output_type: Any) -> None:
        self.output_type = output_type
        super().__init__(f"Invalid tool output type: {output_type}")
