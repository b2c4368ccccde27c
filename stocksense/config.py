from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class AnalysisProviderConfig(BaseModel):
    provider_id: str
    type: str = "gemini"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    models: List[str] = Field(default_factory=lambda: ["gemini-3-flash-preview"])
    timeout: int = Field(default=60, ge=3, le=300)
    enabled: bool = True


class AnalysisConfig(BaseModel):
    default_provider: str = "gemini"
    quote_model: str = "gemini-3-flash-preview"
    analysis_model: str = "gemini-3-pro-preview"
    chart_model: str = "gemini-3-flash-preview"
    forecast_points: int = Field(default=7, ge=3, le=30)
    providers: List[AnalysisProviderConfig] = Field(default_factory=list)


class QuoteConfig(BaseModel):
    buy_ratio: float = Field(default=0.95, gt=0.0, le=1.0)
    sell_ratio: float = Field(default=1.10, ge=1.0, le=3.0)
    min_heuristic_price: float = Field(default=1.0, ge=0.0)


class TrackingConfig(BaseModel):
    max_logs: int = Field(default=100, ge=1, le=10000)
    active_window_hours: int = Field(default=24, ge=1, le=720)
    top_stocks: int = Field(default=5, ge=1, le=50)
    recent_activity: int = Field(default=10, ge=1, le=100)
    suggestion_limit: int = Field(default=4, ge=1, le=50)


class DatabaseConfig(BaseModel):
    url: str = "sqlite:///data/stocksense.db"


def default_analysis_providers() -> List[AnalysisProviderConfig]:
    return [
        AnalysisProviderConfig(
            provider_id="gemini",
            type="gemini",
            base_url="https://generativelanguage.googleapis.com/v1beta",
            models=["gemini-3-flash-preview", "gemini-3-pro-preview"],
            timeout=60,
            enabled=True,
        ),
        AnalysisProviderConfig(
            provider_id="openai_compatible",
            type="openai_compatible",
            base_url="https://api.openai.com/v1",
            models=["gpt-4o-mini", "gpt-4.1"],
            timeout=30,
            enabled=True,
        ),
        AnalysisProviderConfig(
            provider_id="mock",
            type="mock",
            base_url="",
            models=["market-default"],
            timeout=5,
            enabled=True,
        ),
    ]


class AppConfig(BaseModel):
    config_file: Path = Path("config/settings.yaml")
    request_timeout_seconds: int = Field(default=60, ge=3, le=300)
    user_agent: str = "stocksense/0.1"
    analysis: AnalysisConfig = Field(default_factory=lambda: AnalysisConfig(providers=default_analysis_providers()))
    quote: QuoteConfig = Field(default_factory=QuoteConfig)
    tracking: TrackingConfig = Field(default_factory=TrackingConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    def ensure_data_root(self) -> None:
        path = self.database.url
        if path.startswith("sqlite:///"):
            db_file = Path(path.replace("sqlite:///", "", 1))
            db_file.parent.mkdir(parents=True, exist_ok=True)

    def analysis_provider_map(self) -> Dict[str, AnalysisProviderConfig]:
        return {provider.provider_id: provider for provider in self.analysis.providers if provider.enabled}

    def find_provider(self, provider_id: Optional[str] = None) -> Optional[AnalysisProviderConfig]:
        return self.analysis_provider_map().get(provider_id or self.analysis.default_provider)


def default_app_config() -> AppConfig:
    return AppConfig(analysis=AnalysisConfig(providers=default_analysis_providers()))
