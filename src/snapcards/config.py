"""Runtime configuration read from the environment (and `.env` via python-dotenv)."""

import os
from dataclasses import dataclass
from pathlib import Path

from snapcards.constants.llm_config import (
    DASHSCOPE_BASE_URL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_PROVIDER,
    DEFAULT_TEXT_MODEL,
    DEFAULT_VISION_MODEL,
    PLACEHOLDER_API_KEY,
)
from snapcards.constants.paths import DATA_DIR


def is_usable_key(key: str | None) -> bool:
    """A key is usable unless it is blank or the shipped placeholder."""
    return bool(key and key.strip() and key.strip() != PLACEHOLDER_API_KEY)


def resolve_api_key(explicit: str | None, fallback: str | None) -> str | None:
    """Pick the credential for a request.

    Order: explicit per-call key, then the configured fallback, then none.
    Placeholder values count as none.
    """
    for key in (explicit, fallback):
        if is_usable_key(key):
            return key.strip()
    return None


@dataclass
class AppConfig:
    """Application settings.

    Attributes:
        provider: LLM provider name ("openai", "anthropic", "gemini").
        base_url: Endpoint for the openai provider (DashScope by default).
        vision_model: Model used for recognition.
        text_model: Model used for enrichment.
        fallback_api_key: Key used when the caller supplies none.
        data_dir: Directory for settings.json and the local word list.
        max_retries: Retries per LLM request after the first attempt.
        supabase_url / supabase_key: Remote store project; both needed for sign-in.
        supabase_email / supabase_password: Credentials for CLI sign-in.
    """

    provider: str = DEFAULT_PROVIDER
    base_url: str | None = DASHSCOPE_BASE_URL
    vision_model: str = DEFAULT_VISION_MODEL
    text_model: str = DEFAULT_TEXT_MODEL
    fallback_api_key: str | None = None
    data_dir: Path = DATA_DIR
    max_retries: int = DEFAULT_MAX_RETRIES
    supabase_url: str | None = None
    supabase_key: str | None = None
    supabase_email: str | None = None
    supabase_password: str | None = None

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build config from environment variables (call load_dotenv() first)."""
        env = os.environ
        return cls(
            provider=env.get("SNAPCARDS_PROVIDER", DEFAULT_PROVIDER),
            base_url=env.get("SNAPCARDS_BASE_URL", DASHSCOPE_BASE_URL) or None,
            vision_model=env.get("SNAPCARDS_VISION_MODEL", DEFAULT_VISION_MODEL),
            text_model=env.get("SNAPCARDS_TEXT_MODEL", DEFAULT_TEXT_MODEL),
            fallback_api_key=env.get("SNAPCARDS_FALLBACK_API_KEY") or env.get("DASHSCOPE_API_KEY"),
            data_dir=Path(env.get("SNAPCARDS_DATA_DIR", str(DATA_DIR))),
            max_retries=int(env.get("SNAPCARDS_MAX_RETRIES", DEFAULT_MAX_RETRIES)),
            supabase_url=env.get("SUPABASE_URL"),
            supabase_key=env.get("SUPABASE_ANON_KEY"),
            supabase_email=env.get("SUPABASE_EMAIL"),
            supabase_password=env.get("SUPABASE_PASSWORD"),
        )

    @property
    def has_remote(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)
