from convoprep_core.aggregator import aggregate_messages, is_mergeable
from convoprep_core.cache import (
    add_cache_anchor,
    annotate_cache_control,
    count_cache_anchors,
    is_cache_anchor,
    with_cache_control,
    without_cache_control,
)
from convoprep_core.config import ConvoPrepConfig
from convoprep_core.errors import (
    ConvoPrepError,
    InvalidMessageRole,
    InvalidToolOutput,
)
from convoprep_core.messages import (
    AssistantMessage,
    FilePart,
    JsonToolOutput,
    MediaToolOutput,
    Message,
    SystemMessage,
    TextPart,
    TimeToLive,
    ToolCallPart,
    ToolMessage,
    ToolResult,
    UserMessage,
    parse_message,
    parse_messages,
)
from convoprep_core.model_messages import (
    ModelAssistantMessage,
    ModelMessage,
    ModelSystemMessage,
    ModelUserMessage,
    dump_model_messages,
    to_content_string,
    to_provider_dict,
)
from convoprep_core.normalizer import normalize_message, normalize_messages
from convoprep_core.pipeline import convert_to_model_messages
from convoprep_core.tool_calls import parse_tool_call, render_tool_call

__all__ = [
    # Main entry point
    "convert_to_model_messages",
    # Config
    "ConvoPrepConfig",
    # Errors
    "ConvoPrepError",
    "InvalidMessageRole",
    "InvalidToolOutput",
    # Messages
    "Message",
    "SystemMessage",
    "UserMessage",
    "AssistantMessage",
    "ToolMessage",
    "TextPart",
    "FilePart",
    "ToolCallPart",
    "ToolResult",
    "JsonToolOutput",
    "MediaToolOutput",
    "TimeToLive",
    "parse_message",
    "parse_messages",
    # Model messages
    "ModelMessage",
    "ModelSystemMessage",
    "ModelUserMessage",
    "ModelAssistantMessage",
    "to_provider_dict",
    "dump_model_messages",
    "to_content_string",
    # Pipeline stages
    "normalize_message",
    "normalize_messages",
    "aggregate_messages",
    "is_mergeable",
    "annotate_cache_control",
    "add_cache_anchor",
    # Cache markers
    "with_cache_control",
    "without_cache_control",
    "is_cache_anchor",
    "count_cache_anchors",
    # Tool calls
    "render_tool_call",
    "parse_tool_call",
]
