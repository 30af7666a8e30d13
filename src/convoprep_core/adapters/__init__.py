"""Adapters for converting framework-specific messages to convoprep's message log.

Available adapters:
    - LangChainAdapter: Converts LangChain messages (HumanMessage, AIMessage, etc.)

Usage:
    ```python
    from convoprep_core.adapters import prepare_messages
    from convoprep_core.adapters.langchain import LangChainAdapter
    from langchain_core.messages import HumanMessage, AIMessage

    history = prepare_messages(LangChainAdapter(), [
        HumanMessage(content="Hello"),
        AIMessage(content="Hi there!"),
    ])
    ```
"""

from convoprep_core.adapters.protocol import MessageAdapter, prepare_messages

__all__ = ["MessageAdapter", "prepare_messages"]
