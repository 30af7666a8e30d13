"""Interface shared by framework message adapters."""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from convoprep_core.config import ConvoPrepConfig
from convoprep_core.messages import Message
from convoprep_core.model_messages import ModelMessage
from convoprep_core.pipeline import convert_to_model_messages


@runtime_checkable
class MessageAdapter(Protocol):
    """Turns framework-specific messages into the message log.

    ``isinstance`` checks only that both methods exist, not their signatures.
    """

    def convert(self, messages: Sequence[Any]) -> list[Message]: ...

    def convert_single(self, message: Any) -> Message: ...


def prepare_messages(
    adapter: MessageAdapter,
    messages: Sequence[Any],
    *,
    include_cache_control: bool = True,
    config: ConvoPrepConfig | None = None,
) -> list[ModelMessage]:
    """Convert framework messages with ``adapter`` and run the pipeline.

    Raises:
        TypeError: If ``adapter`` does not implement MessageAdapter.
    """
    if not isinstance(adapter, MessageAdapter):
        raise TypeError(f"{type(adapter).__name__} is not a MessageAdapter")
    return convert_to_model_messages(
        adapter.convert(messages),
        include_cache_control=include_cache_control,
        config=config,
    )
