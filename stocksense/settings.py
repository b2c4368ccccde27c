from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOCKSENSE_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    config_file: Path = Path("config/settings.yaml")
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("STOCKSENSE_GEMINI_API_KEY", "GEMINI_API_KEY", "API_KEY"),
    )
    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("STOCKSENSE_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    admin_default_password: Optional[str] = None

    def api_key_for(self, provider_type: str) -> Optional[str]:
        if provider_type == "gemini":
            key = self.gemini_api_key
        elif provider_type == "openai_compatible":
            key = self.openai_api_key
        else:
            return None
        key = (key or "").strip()
        return key or None
