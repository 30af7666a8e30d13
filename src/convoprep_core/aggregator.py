"""Merging of adjacent compatible model messages."""

import logging
from collections.abc import Iterable

from convoprep_core.model_messages import (
    ModelAssistantMessage,
    ModelMessage,
    ModelSystemMessage,
    ModelUserMessage,
)

logger = logging.getLogger(__name__)

MERGEABLE_TYPES = (ModelSystemMessage, ModelUserMessage, ModelAssistantMessage)


def is_mergeable(previous: ModelMessage, message: ModelMessage) -> bool:
    """Check whether two adjacent messages can be merged.

    They must share the role (system, user or assistant) and have deep-equal
    time to live, provider options and tags.
    """
    return (
        type(previous) is type(message)
        and isinstance(message, MERGEABLE_TYPES)
        and previous.time_to_live == message.time_to_live
        and previous.provider_options == message.provider_options
        and previous.tags == message.tags
    )


def merge_messages(
    previous: ModelMessage, message: ModelMessage, system_separator: str = "\n\n"
) -> ModelMessage:
    """Merge ``message`` into ``previous``, returning a new message.

    System contents are joined with ``system_separator``; part lists are
    concatenated in order.
    """
    if isinstance(previous, ModelSystemMessage):
        content = previous.content + system_separator + message.content
    else:
        content = [*previous.content, *message.content]
    return previous.model_copy(update={"content": content})


def aggregate_messages(
    messages: Iterable[ModelMessage], system_separator: str = "\n\n"
) -> list[ModelMessage]:
    """Merge runs of mergeable messages in a single left-to-right pass.

    Relative order is preserved, and aggregating an already aggregated
    sequence returns an equal sequence.
    """
    aggregated: list[ModelMessage] = []
    count = 0
    for message in messages:
        count += 1
        if aggregated and is_mergeable(aggregated[-1], message):
            aggregated[-1] = merge_messages(aggregated[-1], message, system_separator)
        else:
            aggregated.append(message)
    logger.debug("aggregate_messages messages=%d aggregated=%d", count, len(aggregated))
    return aggregated
