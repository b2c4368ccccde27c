from __future__ import annotations

from typing import Callable

from stocksense.config import AnalysisProviderConfig
from stocksense.core.contracts import ModelProvider
from stocksense.core.errors import ConfigurationError
from stocksense.infra.http.client import HttpClient
from stocksense.modules.analysis_engine.providers.gemini_provider import GeminiProvider
from stocksense.modules.analysis_engine.providers.mock_provider import MockModelProvider
from stocksense.modules.analysis_engine.providers.openai_compatible_provider import OpenAICompatibleProvider
from stocksense.settings import AppSettings

ClientFactory = Callable[[AnalysisProviderConfig, AppSettings, HttpClient], ModelProvider]

_KEY_HINTS = {
    "gemini": "GEMINI_API_KEY (or API_KEY)",
    "openai_compatible": "OPENAI_API_KEY",
}


def create_model_client(
    provider_config: AnalysisProviderConfig,
    settings: AppSettings,
    http_client: HttpClient,
) -> ModelProvider:
    """Validate credentials for *provider_config* and build its client.

    Raises ``ConfigurationError`` before anything touches the network.
    """
    if provider_config.type == "mock":
        return MockModelProvider()
    if provider_config.type not in _KEY_HINTS:
        raise ConfigurationError(f"Unknown analysis provider type: {provider_config.type}")

    api_key = settings.api_key_for(provider_config.type)
    if not api_key:
        raise ConfigurationError(
            f"Configuration required: API key for provider '{provider_config.provider_id}' is missing. "
            f"Set {_KEY_HINTS[provider_config.type]} in the environment or .env file."
        )

    if provider_config.type == "gemini":
        return GeminiProvider(provider_config=provider_config, api_key=api_key, client=http_client)
    return OpenAICompatibleProvider(provider_config=provider_config, api_key=api_key)


def provider_status(provider_config: AnalysisProviderConfig, settings: AppSettings) -> tuple[str, str, bool]:
    if not provider_config.enabled:
        return "disabled", "Provider is disabled in config.", False
    if not provider_config.models:
        return "no-model", "No available models configured for this provider.", False
    if provider_config.type == "mock":
        return "ready", "Provider is ready to use.", True
    if provider_config.type not in _KEY_HINTS:
        return "unsupported", f"Unknown provider type: {provider_config.type}", False
    if not settings.api_key_for(provider_config.type):
        return "missing-secret", "Provider API key is not configured.", False
    return "ready", "Provider is ready to use.", True
