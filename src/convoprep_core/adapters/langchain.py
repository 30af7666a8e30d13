"""LangChain message adapter.

Converts LangChain messages (HumanMessage, AIMessage, ToolMessage, etc.)
to convoprep's message log types.
"""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from convoprep_core.messages import (
    AssistantMessage,
    FilePart,
    JsonToolOutput,
    Message,
    SystemMessage,
    TextPart,
    ToolCallPart,
    ToolMessage,
    ToolResult,
    UserMessage,
)

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage

logger = logging.getLogger(__name__)


class LangChainAdapter:
    """Converts LangChain messages to Message types.

    Usage:
        ```python
        from langchain_core.messages import HumanMessage, AIMessage
        from convoprep_core.adapters.langchain import LangChainAdapter

        adapter = LangChainAdapter()
        messages = adapter.convert([
            HumanMessage(content="Read auth.py"),
            AIMessage(content="Here's the file...", tool_calls=[...]),
        ])
        ```
    """

    def convert(self, messages: Sequence["BaseMessage"]) -> list[Message]:
        """Convert a list of LangChain messages.

        Args:
            messages: List of LangChain BaseMessage objects.

        Returns:
            List of Message objects.
        """
        return [self.convert_single(msg) for msg in messages]

    def convert_single(self, message: "BaseMessage") -> Message:
        """Convert a single LangChain message.

        Args:
            message: A LangChain BaseMessage object.

        Returns:
            Message object.
        """
        from langchain_core.messages import AIMessage
        from langchain_core.messages import SystemMessage as LCSystemMessage
        from langchain_core.messages import ToolMessage as LCToolMessage

        if isinstance(message, LCSystemMessage):
            return SystemMessage(content=self._extract_text(message.content))

        elif isinstance(message, AIMessage):
            tool_calls = [
                ToolCallPart(
                    tool_call_id=tc.get("id") or "",
                    tool_name=tc.get("name", ""),
                    input=tc.get("args", {}),
                )
                for tc in (message.tool_calls or [])
            ]
            if not tool_calls and isinstance(message.content, str):
                return AssistantMessage(content=message.content)
            text = self._extract_text(message.content)
            parts: list[TextPart | ToolCallPart] = [TextPart(text=text)] if text else []
            return AssistantMessage(content=[*parts, *tool_calls])

        elif isinstance(message, LCToolMessage):
            return ToolMessage(
                content=ToolResult(
                    tool_name=message.name or "",
                    tool_call_id=message.tool_call_id,
                    output=[JsonToolOutput(value=message.content)],
                )
            )

        else:
            # HumanMessage and any other role are user input
            return UserMessage(content=self._extract_user_content(message.content))

    def _extract_text(self, content: str | list[Any]) -> str:
        """Extract text content, joining text blocks of list content."""
        if isinstance(content, str):
            return content
        texts = []
        for block in content:
            if isinstance(block, str):
                texts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                texts.append(block.get("text", ""))
        return "\n".join(texts)

    def _extract_user_content(
        self, content: str | list[Any]
    ) -> str | list[TextPart | FilePart]:
        """Extract user content, keeping base64 image and file blocks.

        Handles both simple string content and content block lists
        (for multimodal messages).
        """
        if isinstance(content, str):
            return content
        parts: list[TextPart | FilePart] = []
        for block in content:
            if isinstance(block, str):
                parts.append(TextPart(text=block))
            elif not isinstance(block, dict):
                continue
            elif block.get("type") == "text":
                parts.append(TextPart(text=block.get("text", "")))
            elif block.get("type") in ("image", "file") and block.get("data"):
                parts.append(
                    FilePart(
                        data=block["data"],
                        media_type=block.get("mime_type") or "application/octet-stream",
                    )
                )
            else:
                logger.debug("skipping unsupported content block type=%s", block.get("type"))
        return parts
