"""Tests for ConvoPrepConfig."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from convoprep_core.config import ConvoPrepConfig


class TestConvoPrepConfig:
    """Test settings loading and validation."""

    def test_defaults(self, config: ConvoPrepConfig) -> None:
        """Defaults match the standard caching setup."""
        assert config.cache_providers == ["anthropic", "openrouter", "codebuff"]
        assert config.cache_tags == ["USER_PROMPT", "INSTRUCTIONS_PROMPT", "STEP_PROMPT"]
        assert config.min_cacheable_text_length == 2
        assert config.system_separator == "\n\n"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """CONVOPREP_ environment variables override defaults."""
        monkeypatch.setenv("CONVOPREP_MIN_CACHEABLE_TEXT_LENGTH", "5")
        monkeypatch.setenv("CONVOPREP_CACHE_PROVIDERS", '["anthropic"]')

        config = ConvoPrepConfig()

        assert config.min_cacheable_text_length == 5
        assert config.cache_providers == ["anthropic"]

    def test_env_empty_providers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An empty provider list is kept, not replaced by the defaults."""
        monkeypatch.setenv("CONVOPREP_CACHE_PROVIDERS", "[]")

        assert ConvoPrepConfig().cache_providers == []

    def test_env_file(self, tmp_path: Path) -> None:
        """Settings are read from a .env file in the working directory."""
        (tmp_path / ".env").write_text("CONVOPREP_CACHE_TAGS=[\"USER_PROMPT\"]\n")

        config = ConvoPrepConfig()

        assert config.cache_tags == ["USER_PROMPT"]

    def test_defaults_not_shared(self) -> None:
        """Each config gets its own default lists."""
        first = ConvoPrepConfig()
        first.cache_providers.append("openai")

        assert ConvoPrepConfig().cache_providers == ["anthropic", "openrouter", "codebuff"]

    def test_too_many_tags(self) -> None:
        """More than three tags would exceed four anchors."""
        with pytest.raises(ValidationError):
            ConvoPrepConfig(cache_tags=["A", "B", "C", "D"])

    def test_threshold_minimum(self) -> None:
        """The threshold must leave room for a split."""
        with pytest.raises(ValidationError):
            ConvoPrepConfig(min_cacheable_text_length=1)
