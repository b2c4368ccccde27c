"""Health and UI options routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from stocksense.api.deps import get_config
from stocksense.config import AppConfig

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.get("/options/ui")
async def ui_options(config: AppConfig = Depends(get_config)) -> dict:
    return {
        "strategies": ["intraday", "long-term"],
        "signals": ["STRONG_BUY", "STRONG_SELL", "NEUTRAL", "WAIT"],
        "suggestion_actions": ["BUY", "SELL", "HOLD"],
        "analysis_providers": sorted(config.analysis_provider_map()),
        "default_provider": config.analysis.default_provider,
    }
