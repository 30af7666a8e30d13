import os
from pathlib import Path

import pytest

from convoprep_core.config import ConvoPrepConfig

CACHE_PROVIDERS = ("anthropic", "openrouter", "codebuff")


@pytest.fixture
def ephemeral() -> dict:
    """Provide provider options carrying the cache marker for every default provider."""
    return {provider: {"cacheControl": {"type": "ephemeral"}} for provider in CACHE_PROVIDERS}


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CONVOPREP_* variables and stray .env files out of tests."""
    for key in list(os.environ):
        if key.upper().startswith("CONVOPREP_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def config() -> ConvoPrepConfig:
    """Provide default settings."""
    return ConvoPrepConfig()


@pytest.fixture
def tool_message() -> dict:
    """Provide a tool message with a single JSON output."""
    return {
        "role": "tool",
        "content": {
            "type": "tool-result",
            "toolName": "test_tool",
            "toolCallId": "call_123",
            "output": [{"type": "json", "value": {"result": "success"}}],
        },
    }


@pytest.fixture
def agent_run_log() -> list[dict]:
    """Provide a realistic multi-step agent log."""
    return [
        {"role": "system", "content": "You are a coding agent."},
        {"role": "system", "content": "Project files: src/, tests/"},
        {"role": "user", "content": "Fix the failing test", "tags": ["USER_PROMPT"]},
        {
            "role": "assistant",
            "content": [
                {"type": "text", "text": "Let me look at the test."},
                {
                    "type": "tool-call",
                    "toolCallId": "call_1",
                    "toolName": "read_files",
                    "input": {"paths": ["tests/test_auth.py"]},
                },
            ],
        },
        {
            "role": "tool",
            "content": {
                "type": "tool-result",
                "toolName": "read_files",
                "toolCallId": "call_1",
                "output": [
                    {"type": "json", "value": {"tests/test_auth.py": "def test_login(): ..."}},
                    {"type": "media", "data": "iVBORw0KGgo=", "mediaType": "image/png"},
                ],
            },
            "timeToLive": "agentStep",
        },
        {
            "role": "user",
            "content": "Follow the instructions below.",
            "tags": ["INSTRUCTIONS_PROMPT"],
            "timeToLive": "userPrompt",
        },
        {
            "role": "user",
            "content": "Continue with the next step.",
            "tags": ["STEP_PROMPT"],
            "timeToLive": "agentStep",
        },
    ]
