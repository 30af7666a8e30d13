"""Normalization of a message log into provider-ready messages.

Each log message becomes one or more model messages:

- system messages pass through with their string content;
- user/assistant string content is wrapped in a single text part;
- assistant tool calls are rendered to text parts;
- tool messages fan out into one synthetic user message per output.

Outputs never share nested structures with the input.
"""

import copy
import json
import logging
from collections.abc import Iterable
from typing import Any

from convoprep_core.errors import InvalidMessageRole, InvalidToolOutput
from convoprep_core.messages import (
    AssistantMessage,
    FilePart,
    JsonToolOutput,
    MediaToolOutput,
    Message,
    SystemMessage,
    TextPart,
    ToolCallPart,
    ToolMessage,
    ToolOutput,
    ToolResult,
    UserMessage,
)
from convoprep_core.model_messages import (
    ModelAssistantMessage,
    ModelMessage,
    ModelSystemMessage,
    ModelUserMessage,
)
from convoprep_core.tool_calls import render_tool_call

logger = logging.getLogger(__name__)


def _shared_fields(message: Message) -> dict[str, Any]:
    """Copy the role-independent fields of a message."""
    return {
        "tags": copy.deepcopy(message.tags),
        "time_to_live": message.time_to_live,
        "provider_options": copy.deepcopy(message.provider_options),
    }


def format_tool_result(tool_result: ToolResult, output: JsonToolOutput) -> str:
    """Render one JSON tool output as a tagged text block."""
    payload = {
        "toolName": tool_result.tool_name,
        "toolCallId": tool_result.tool_call_id,
        "output": output.value,
    }
    return (
        "<tool_result>\n"
        + json.dumps(payload, indent=2, ensure_ascii=False)
        + "\n</tool_result>"
    )


def _tool_output_part(tool_result: ToolResult, output: ToolOutput) -> TextPart | FilePart:
    if isinstance(output, JsonToolOutput):
        return TextPart(text=format_tool_result(tool_result, output))
    if isinstance(output, MediaToolOutput):
        return FilePart(data=output.data, media_type=output.media_type)
    raise InvalidToolOutput(getattr(output, "type", None))


def _assistant_part(part: TextPart | ToolCallPart) -> TextPart:
    if isinstance(part, ToolCallPart):
        return TextPart(text=render_tool_call(part.tool_name, part.input, False))
    return part.model_copy(deep=True)


def normalize_message(message: Message) -> list[ModelMessage]:
    """Convert one log message into one or more model messages.

    Args:
        message: A validated log message.

    Returns:
        The model messages, in order. Only tool messages yield more than one
        (or zero, for a tool result without outputs).

    Raises:
        InvalidMessageRole: If the message is not one of the four roles.
        InvalidToolOutput: If a tool output is neither json nor media.
    """
    if isinstance(message, SystemMessage):
        return [ModelSystemMessage(content=message.content, **_shared_fields(message))]

    if isinstance(message, UserMessage):
        if isinstance(message.content, str):
            parts = [TextPart(text=message.content)]
        else:
            parts = [part.model_copy(deep=True) for part in message.content]
        return [ModelUserMessage(content=parts, **_shared_fields(message))]

    if isinstance(message, AssistantMessage):
        if isinstance(message.content, str):
            text_parts = [TextPart(text=message.content)]
        else:
            text_parts = [_assistant_part(part) for part in message.content]
        return [ModelAssistantMessage(content=text_parts, **_shared_fields(message))]

    if isinstance(message, ToolMessage):
        tool_result = message.content
        return [
            ModelUserMessage(
                content=[_tool_output_part(tool_result, output)],
                **_shared_fields(message),
            )
            for output in tool_result.output
        ]

    raise InvalidMessageRole(getattr(message, "role", None))


def normalize_messages(messages: Iterable[Message]) -> list[ModelMessage]:
    """Normalize a message log, flattening tool fan-out in original order."""
    normalized: list[ModelMessage] = []
    for message in messages:
        normalized.extend(normalize_message(message))
    logger.debug("normalize_messages results=%d", len(normalized))
    return normalized
