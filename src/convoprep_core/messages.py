"""Message log representation for convoprep.

This module provides the role-tagged message types an agent run accumulates.
Use ``parse_message`` to validate raw mappings (e.g. decoded JSON) into these
types, or adapters to convert from framework-specific formats (LangChain).

Field names are snake_case; the camelCase names used on the wire
(``providerOptions``, ``timeToLive``, ``toolCallId``...) are accepted on input
and produced when dumping with ``by_alias=True``.
"""

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from convoprep_core.errors import InvalidMessageRole, InvalidToolOutput

MESSAGE_ROLES = ("system", "user", "assistant", "tool")
TOOL_OUTPUT_TYPES = ("json", "media")

# provider name -> option bag, e.g. {"anthropic": {"cacheControl": {"type": "ephemeral"}}}
ProviderOptions = dict[str, dict[str, Any]]


class TimeToLive(str, Enum):
    """Lifecycle scope of a message within a multi-step agent run.

    A message without a time to live is persistent.
    """

    AGENT_STEP = "agentStep"
    USER_PROMPT = "userPrompt"


class WireModel(BaseModel):
    """Base for all message models: camelCase aliases, base64 bytes in JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        ser_json_bytes="base64",
    )


# Content parts ==============================================================


class TextPart(WireModel):
    """A piece of plain text content."""

    type: Literal["text"] = "text"
    text: str
    provider_options: ProviderOptions | None = None


class FilePart(WireModel):
    """A file or media attachment (image, PDF...)."""

    type: Literal["file"] = "file"
    data: str | bytes
    media_type: str
    provider_options: ProviderOptions | None = None


class ToolCallPart(WireModel):
    """A tool invocation emitted by the assistant."""

    type: Literal["tool-call"] = "tool-call"
    tool_call_id: str
    tool_name: str
    input: dict[str, Any] = Field(default_factory=dict)
    provider_options: ProviderOptions | None = None


UserContentPart = Annotated[Union[TextPart, FilePart], Field(discriminator="type")]
AssistantContentPart = Annotated[
    Union[TextPart, ToolCallPart], Field(discriminator="type")
]


# Tool results ===============================================================


class JsonToolOutput(WireModel):
    """Structured tool output."""

    type: Literal["json"] = "json"
    value: Any = None


class MediaToolOutput(WireModel):
    """Binary tool output such as a screenshot."""

    type: Literal["media"] = "media"
    data: str | bytes
    media_type: str


ToolOutput = Annotated[
    Union[JsonToolOutput, MediaToolOutput], Field(discriminator="type")
]


class ToolResult(WireModel):
    """The result of one tool call, possibly spanning several outputs."""

    type: Literal["tool-result"] = "tool-result"
    tool_name: str
    tool_call_id: str
    output: list[ToolOutput] = Field(default_factory=list)


# Messages ===================================================================


class MessageBase(WireModel):
    """Fields shared by every message role.

    Attributes:
        tags: Semantic labels (e.g. USER_PROMPT) marking the message's place in
            the prompt assembly.
        time_to_live: How long the message stays in the history.
        provider_options: Provider name -> provider-specific options.
    """

    tags: list[str] | None = None
    time_to_live: TimeToLive | None = None
    provider_options: ProviderOptions | None = None


class SystemMessage(MessageBase):
    role: Literal["system"] = "system"
    content: str


class UserMessage(MessageBase):
    role: Literal["user"] = "user"
    content: str | list[UserContentPart]


class AssistantMessage(MessageBase):
    role: Literal["assistant"] = "assistant"
    content: str | list[AssistantContentPart]


class ToolMessage(MessageBase):
    role: Literal["tool"] = "tool"
    content: ToolResult


Message = Annotated[
    Union[SystemMessage, UserMessage, AssistantMessage, ToolMessage],
    Field(discriminator="role"),
]

_MESSAGE_ADAPTER: TypeAdapter[Message] = TypeAdapter(Message)


def _check_tool_outputs(content: Any) -> None:
    if not isinstance(content, Mapping):
        return
    for output in content.get("output") or []:
        if isinstance(output, Mapping) and output.get("type") not in TOOL_OUTPUT_TYPES:
            raise InvalidToolOutput(output.get("type"))


def parse_message(data: Mapping[str, Any] | BaseModel) -> Message:
    """Validate a raw mapping into a Message.

    Already-parsed messages are returned unchanged. Other models (such as
    provider-ready messages) are validated from their dump.

    Args:
        data: A mapping shaped like a message, or a Message instance.

    Returns:
        The validated Message.

    Raises:
        InvalidMessageRole: If the role is not one of system/user/assistant/tool.
        InvalidToolOutput: If a tool output kind is not json/media.
        pydantic.ValidationError: For any other shape problem.
    """
    if isinstance(data, (SystemMessage, UserMessage, AssistantMessage, ToolMessage)):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True, exclude_none=True)
    if not isinstance(data, Mapping):
        return _MESSAGE_ADAPTER.validate_python(data)

    role = data.get("role")
    if role not in MESSAGE_ROLES:
        raise InvalidMessageRole(role)
    if role == "tool":
        _check_tool_outputs(data.get("content"))
    return _MESSAGE_ADAPTER.validate_python(data)


def parse_messages(data: Iterable[Mapping[str, Any] | BaseModel]) -> list[Message]:
    """Validate a sequence of raw mappings into Messages."""
    return [parse_message(item) for item in data]
