"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    inkspace_env: str = "development"
    inkspace_log_level: str = "info"

    # Glyph source; empty font_path means the default system sans font
    font_path: str = ""
    font_size: float = 30.0

    # Response cycle
    auto_send: bool = False
    debounce_seconds: float = 1.0

    # Size of the block reserved for each response
    content_width: float = 500.0
    content_height: float = 80.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
