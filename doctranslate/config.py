"""Application configuration loaded from environment variables."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    openai_api_key: Optional[str] = Field(
        default=None, description="Secret key for OpenAI APIs."
    )
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model_chat: str = "gpt-4o-mini"

    translation_temperature: float = 0.3
    translation_max_output_tokens: int = 4000
    translation_chunk_tokens: int = 2500

    database_url: str = "sqlite:///data/documents.db"
    max_upload_bytes: int = 25 * 1024 * 1024

    docx_font_name: str = "Calibri"
    docx_font_size: float = 12.0
    list_nesting: bool = Field(
        default=True,
        description="Indent nested list items by depth instead of flattening them to level 0.",
    )

    log_level: str = "INFO"
    allow_tiktoken_fallback: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def sqlite_path(self) -> Optional[Path]:
        prefix = "sqlite:///"
        if not self.database_url.startswith(prefix):
            return None
        raw = self.database_url[len(prefix):]
        if not raw or raw == ":memory:":
            return None
        return Path(raw)


settings = Settings()
