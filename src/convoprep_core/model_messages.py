"""Provider-ready message types.

These are what the conversion pipeline emits and what gets handed to the LLM
call boundary. Unlike the message log types, user and assistant content is
always a list of parts, tool results no longer exist as a role, and tool calls
have been rendered to text.
"""

from collections.abc import Iterable
from typing import Annotated, Any, Literal, Union

from pydantic import Field

from convoprep_core.messages import (
    FilePart,
    MessageBase,
    TextPart,
    UserContentPart,
)


class ModelSystemMessage(MessageBase):
    role: Literal["system"] = "system"
    content: str


class ModelUserMessage(MessageBase):
    role: Literal["user"] = "user"
    content: list[UserContentPart] = Field(default_factory=list)


class ModelAssistantMessage(MessageBase):
    role: Literal["assistant"] = "assistant"
    content: list[TextPart] = Field(default_factory=list)


ModelMessage = Annotated[
    Union[ModelSystemMessage, ModelUserMessage, ModelAssistantMessage],
    Field(discriminator="role"),
]


def to_provider_dict(message: MessageBase, *, json_safe: bool = False) -> dict[str, Any]:
    """Dump a message to the wire shape expected by the LLM call boundary.

    Keys are camelCase and unset optional fields (tags, timeToLive,
    providerOptions) are omitted.

    Args:
        message: Any message model.
        json_safe: Encode bytes payloads as base64 so the result can be
            passed to ``json.dumps``.
    """
    return message.model_dump(
        mode="json" if json_safe else "python",
        by_alias=True,
        exclude_none=True,
    )


def dump_model_messages(
    messages: Iterable[MessageBase], *, json_safe: bool = False
) -> list[dict[str, Any]]:
    """Dump a sequence of messages with ``to_provider_dict``."""
    return [to_provider_dict(m, json_safe=json_safe) for m in messages]


def to_content_string(message: MessageBase) -> str:
    """Flatten a message's content to text.

    String content is returned as-is. Part content joins the text of each part
    with newlines; non-text parts contribute an empty string.
    """
    content = getattr(message, "content", "")
    if isinstance(content, str):
        return content
    return "\n".join(part.text if isinstance(part, TextPart) else "" for part in content)


__all__ = [
    "FilePart",
    "ModelAssistantMessage",
    "ModelMessage",
    "ModelSystemMessage",
    "ModelUserMessage",
    "TextPart",
    "dump_model_messages",
    "to_content_string",
    "to_provider_dict",
]
