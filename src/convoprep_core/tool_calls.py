"""Text rendering of tool calls.

Assistant tool calls are replayed to the model as text inside the assistant's
own turn. The rendering is a tagged JSON object so it stays readable for the
model and parseable for tooling.
"""

import json
from typing import Any

START_TOOL_TAG = "<codebuff_tool_call>\n"
END_TOOL_TAG = "\n</codebuff_tool_call>"
TOOL_NAME_PARAM = "cb_tool_name"
ENDS_AGENT_STEP_PARAM = "cb_easp"


def render_tool_call(
    tool_name: str,
    tool_input: dict[str, Any],
    ends_agent_step: bool = False,
) -> str:
    """Render a tool call as a tagged JSON block.

    Input keys that collide with the reserved ``cb_`` parameters are dropped.

    Args:
        tool_name: Name of the tool being called.
        tool_input: Arguments passed to the tool.
        ends_agent_step: Mark the call as the last action of the agent step.

    Returns:
        The rendered tool call. Identical inputs always render identically.
    """
    obj: dict[str, Any] = {TOOL_NAME_PARAM: tool_name}
    obj.update(
        (key, value)
        for key, value in tool_input.items()
        if key not in (TOOL_NAME_PARAM, ENDS_AGENT_STEP_PARAM)
    )
    if ends_agent_step:
        obj[ENDS_AGENT_STEP_PARAM] = True
    return START_TOOL_TAG + json.dumps(obj, indent=2) + END_TOOL_TAG


def parse_tool_call(text: str) -> tuple[str, dict[str, Any], bool]:
    """Parse text produced by ``render_tool_call``.

    Returns:
        Tuple of (tool_name, tool_input, ends_agent_step).

    Raises:
        ValueError: If the text is not a rendered tool call.
    """
    stripped = text.strip()
    if not (
        stripped.startswith(START_TOOL_TAG.strip())
        and stripped.endswith(END_TOOL_TAG.strip())
    ):
        raise ValueError("Text is not a rendered tool call")

    body = stripped[len(START_TOOL_TAG.strip()) : -len(END_TOOL_TAG.strip())]
    obj = json.loads(body)  # JSONDecodeError is a ValueError
    if not isinstance(obj, dict) or not isinstance(obj.get(TOOL_NAME_PARAM), str):
        raise ValueError(f"Tool call is missing {TOOL_NAME_PARAM}")

    tool_name = obj.pop(TOOL_NAME_PARAM)
    ends_agent_step = bool(obj.pop(ENDS_AGENT_STEP_PARAM, False))
    return tool_name, obj, ends_agent_step
