"""Conversion of a message log into the history sent to an LLM provider.

Usage:
    ```python
    from convoprep_core import convert_to_model_messages

    history = convert_to_model_messages(
        [
            {"role": "system", "content": "You are a coding agent."},
            {"role": "user", "content": "Fix the tests", "tags": ["USER_PROMPT"]},
        ]
    )
    ```
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel

from convoprep_core.aggregator import aggregate_messages
from convoprep_core.cache import annotate_cache_control
from convoprep_core.config import ConvoPrepConfig
from convoprep_core.messages import parse_message
from convoprep_core.model_messages import ModelMessage
from convoprep_core.normalizer import normalize_messages

logger = logging.getLogger(__name__)


def convert_to_model_messages(
    messages: Iterable[Mapping[str, Any] | BaseModel],
    include_cache_control: bool = True,
    config: ConvoPrepConfig | None = None,
) -> list[ModelMessage]:
    """Normalize, aggregate and cache-annotate a message log.

    The whole conversion is a pure function of its arguments: the input
    messages are never modified and the result shares no nested structure
    with them.

    Args:
        messages: Log messages, as models or raw mappings.
        include_cache_control: Whether to place cache anchors.
        config: Conversion settings. Uses defaults if not provided.

    Returns:
        The provider-ready message list.

    Raises:
        InvalidMessageRole: If a message has an unknown role.
        InvalidToolOutput: If a tool output is neither json nor media.
    """
    config = config or ConvoPrepConfig()
    parsed = [parse_message(message) for message in messages]
    normalized = normalize_messages(parsed)
    aggregated = aggregate_messages(normalized, config.system_separator)
    result = annotate_cache_control(aggregated, include_cache_control, config)
    logger.debug(
        "convert_to_model_messages messages=%d results=%d cache_control=%s",
        len(parsed),
        len(result),
        include_cache_control,
    )
    return result
