from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CACHE_PROVIDERS = ["anthropic", "openrouter", "codebuff"]
DEFAULT_CACHE_TAGS = ["USER_PROMPT", "INSTRUCTIONS_PROMPT", "STEP_PROMPT"]


class ConvoPrepConfig(BaseSettings):
    """Configuration for message conversion and cache annotation.

    Settings can be provided via environment variables with CONVOPREP_ prefix.
    List values are read from the environment as JSON, e.g.
    ``CONVOPREP_CACHE_PROVIDERS='["anthropic"]'``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONVOPREP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider keys that receive the cacheControl marker
    cache_providers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CACHE_PROVIDERS)
    )

    # Tags whose preceding message becomes a cache anchor, in placement order.
    # Together with the final-message anchor this keeps at most 4 anchors.
    cache_tags: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CACHE_TAGS), max_length=3
    )

    # Text parts shorter than this are skipped when placing an anchor.
    # Must leave room for a 1-character prefix plus a non-empty suffix.
    min_cacheable_text_length: int = Field(default=2, ge=2)

    # Joins the contents of merged system messages
    system_separator: str = "\n\n"
