from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from stocksense.config import AppConfig, default_analysis_providers, default_app_config
from stocksense.core.errors import ValidationError


class ConfigStore:
    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path

    def load(self) -> AppConfig:
        if not self.config_path.exists():
            config = default_app_config().model_copy(update={"config_file": self.config_path})
            return self.save(config)

        raw = yaml.safe_load(self.config_path.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Invalid config file content: {self.config_path}")
        config = AppConfig.model_validate(raw)
        config = self._ensure_builtin_providers(config)
        config.ensure_data_root()
        return config.model_copy(update={"config_file": self.config_path})

    def save(self, config: AppConfig) -> AppConfig:
        normalized = config.model_copy(update={"config_file": self.config_path})
        normalized.ensure_data_root()
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        payload = normalized.model_dump(mode="json")
        self.config_path.write_text(
            yaml.safe_dump(payload, allow_unicode=True, sort_keys=False),
            encoding="utf-8",
        )
        return normalized

    def patch(self, patch_data: Dict[str, Any]) -> AppConfig:
        current = self.load()
        payload = current.model_dump(mode="python")
        payload.update(patch_data)
        merged = AppConfig.model_validate(payload)
        return self.save(merged)

    def set_default_provider(self, provider_id: str) -> AppConfig:
        config = self.load()
        if provider_id not in config.analysis_provider_map():
            raise ValidationError(f"Unknown or disabled analysis provider: {provider_id}")
        next_config = config.model_copy(
            update={"analysis": config.analysis.model_copy(update={"default_provider": provider_id})}
        )
        return self.save(next_config)

    @staticmethod
    def _ensure_builtin_providers(config: AppConfig) -> AppConfig:
        # Config files written before a built-in provider existed lack its entry.
        known = {provider.provider_id for provider in config.analysis.providers}
        missing = [provider for provider in default_analysis_providers() if provider.provider_id not in known]
        if not missing:
            return config
        return config.model_copy(
            update={
                "analysis": config.analysis.model_copy(
                    update={"providers": [*config.analysis.providers, *missing]}
                )
            }
        )
