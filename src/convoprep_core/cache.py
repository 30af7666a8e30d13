"""Cache-control markers for provider prompt caching.

A cache anchor is a ``cacheControl: {"type": "ephemeral"}`` entry placed under
``providerOptions`` for each caching provider. Providers reuse the processed
prefix of the conversation up to an anchor on the next call, so anchors are
placed where the prefix is expected to stay stable:

- right before the last message tagged with each of the cache tags
  (USER_PROMPT, INSTRUCTIONS_PROMPT, STEP_PROMPT by default);
- on the last message.

That is at most 4 anchors, the limit providers accept.
"""

import copy
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel

from convoprep_core.config import DEFAULT_CACHE_PROVIDERS, ConvoPrepConfig
from convoprep_core.messages import TextPart
from convoprep_core.model_messages import ModelMessage

logger = logging.getLogger(__name__)

CACHE_CONTROL_KEY = "cacheControl"
EPHEMERAL_CACHE_CONTROL = {"type": "ephemeral"}

T = TypeVar("T", BaseModel, Mapping[str, Any])


def _get_provider_options(obj: BaseModel | Mapping[str, Any]) -> dict[str, Any] | None:
    if isinstance(obj, BaseModel):
        return getattr(obj, "provider_options", None)
    return obj.get("providerOptions")


def _replace_provider_options(obj: T, options: dict[str, Any] | None) -> T:
    """Return a deep copy of ``obj`` carrying ``options``."""
    if isinstance(obj, BaseModel):
        return obj.model_copy(deep=True, update={"provider_options": options})
    result = copy.deepcopy(dict(obj))
    if options is None:
        result.pop("providerOptions", None)
    else:
        result["providerOptions"] = options
    return result


def _resolve_providers(providers: Iterable[str] | None) -> list[str]:
    return list(DEFAULT_CACHE_PROVIDERS if providers is None else providers)


def _pop_path(mapping: dict[str, Any], path: Sequence[str]) -> None:
    """Remove the value at ``path``, then drop containers left empty."""
    key, rest = path[0], path[1:]
    if not rest:
        mapping.pop(key, None)
        return
    child = mapping.get(key)
    if isinstance(child, dict):
        _pop_path(child, rest)
        if not child:
            del mapping[key]


def with_cache_control(obj: T, providers: Iterable[str] | None = None) -> T:
    """Return a copy of ``obj`` marked as a cache anchor.

    Works on message/part models (``provider_options`` field) and on plain
    mappings (``providerOptions`` key). Existing provider options are kept.

    Args:
        obj: The message, content part or mapping to mark.
        providers: Provider keys to mark. Defaults to anthropic, openrouter
            and codebuff.
    """
    options = copy.deepcopy(_get_provider_options(obj)) or {}
    for provider in _resolve_providers(providers):
        entry = options.get(provider)
        if not isinstance(entry, dict):
            entry = options[provider] = {}
        entry[CACHE_CONTROL_KEY] = dict(EPHEMERAL_CACHE_CONTROL)
    return _replace_provider_options(obj, options)


def without_cache_control(obj: T, providers: Iterable[str] | None = None) -> T:
    """Return a copy of ``obj`` with cache markers removed.

    Empty ``cacheControl`` entries, provider entries and provider options left
    behind are dropped. Idempotent.
    """
    options = copy.deepcopy(_get_provider_options(obj)) or {}
    for provider in _resolve_providers(providers):
        _pop_path(options, (provider, CACHE_CONTROL_KEY, "type"))
    return _replace_provider_options(obj, options or None)


def is_cache_anchor(
    obj: BaseModel | Mapping[str, Any], providers: Iterable[str] | None = None
) -> bool:
    """Check whether any provider carries a cache marker on ``obj``."""
    options = _get_provider_options(obj) or {}
    for provider in _resolve_providers(providers):
        entry = options.get(provider)
        if not isinstance(entry, dict):
            continue
        cache_control = entry.get(CACHE_CONTROL_KEY)
        if isinstance(cache_control, dict) and "type" in cache_control:
            return True
    return False


def count_cache_anchors(
    messages: Iterable[ModelMessage], providers: Iterable[str] | None = None
) -> int:
    """Count marked locations: marked messages plus marked content parts."""
    providers = _resolve_providers(providers)
    count = 0
    for message in messages:
        if is_cache_anchor(message, providers):
            count += 1
        if not isinstance(message.content, str):
            count += sum(1 for part in message.content if is_cache_anchor(part, providers))
    return count


def _anchor_index(parts: Sequence[Any], min_text_length: int, providers: list[str]) -> int:
    """Find the part to mark, walking back over short text parts."""
    for index in range(len(parts) - 1, -1, -1):
        part = parts[index]
        if (
            isinstance(part, TextPart)
            and len(part.text) < min_text_length
            and not is_cache_anchor(part, providers)
        ):
            continue
        return index
    # Every part is short text
    return len(parts) - 1


def add_cache_anchor(
    message: ModelMessage,
    providers: Iterable[str] | None = None,
    min_text_length: int = 2,
) -> ModelMessage:
    """Return a copy of ``message`` with its content marked as a cache anchor.

    String content is marked at the message level. For part content, the
    marker goes on the last part, skipping text parts shorter than
    ``min_text_length``. A text part that is marked is split into a
    1-character unmarked prefix and the marked remainder. Other parts are
    marked whole. Marking an already-marked location is a no-op, and so is
    marking with an empty provider list.
    """
    providers = _resolve_providers(providers)
    if not providers:
        return message

    if isinstance(message.content, str):
        if is_cache_anchor(message, providers):
            return message
        return with_cache_control(message, providers)

    parts = message.content
    if not parts:
        return message

    index = _anchor_index(parts, min_text_length, providers)
    part = parts[index]
    if is_cache_anchor(part, providers):
        return message

    if isinstance(part, TextPart) and len(part.text) >= min_text_length:
        replacement = [
            part.model_copy(deep=True, update={"text": part.text[:1]}),
            with_cache_control(part.model_copy(update={"text": part.text[1:]}), providers),
        ]
    else:
        replacement = [with_cache_control(part, providers)]

    content = [*parts[:index], *replacement, *parts[index + 1 :]]
    return message.model_copy(update={"content": content})


def _last_index_with_tag(messages: Sequence[ModelMessage], tag: str) -> int | None:
    for index in range(len(messages) - 1, -1, -1):
        if tag in (messages[index].tags or []):
            return index
    return None


def annotate_cache_control(
    messages: Iterable[ModelMessage],
    include_cache_control: bool = True,
    config: ConvoPrepConfig | None = None,
) -> list[ModelMessage]:
    """Place cache anchors on an aggregated message sequence.

    Args:
        messages: Aggregated model messages.
        include_cache_control: When false, the messages are returned unmarked.
        config: Providers, tags and short-text threshold. Uses defaults if
            not provided.

    Returns:
        A new list; the input messages are not modified.
    """
    result = list(messages)
    if not include_cache_control or not result:
        return result

    config = config or ConvoPrepConfig()
    providers = config.cache_providers
    min_text_length = config.min_cacheable_text_length

    for tag in config.cache_tags:
        index = _last_index_with_tag(result, tag)
        if not index:
            # Missing, or nothing precedes the tagged message
            continue
        result[index - 1] = add_cache_anchor(result[index - 1], providers, min_text_length)

    result[-1] = add_cache_anchor(result[-1], providers, min_text_length)

    logger.debug(
        "annotate_cache_control messages=%d anchors=%d",
        len(result),
        count_cache_anchors(result, providers),
    )
    return result
