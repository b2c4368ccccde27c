"""Quote and position analysis routes."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from stocksense.api.deps import get_analysis_service, get_config_store, get_tracking_service, require_admin
from stocksense.api.errors import call_service
from stocksense.config import AppConfig
from stocksense.core.errors import ValidationError
from stocksense.core.types import AnalysisResult, Position, StockQuote
from stocksense.modules.analysis_engine.schemas import AnalysisProviderView, ProviderModelSelectionRequest
from stocksense.modules.analysis_engine.service import StockAnalysisService
from stocksense.modules.tracking.service import TrackingService, search_details
from stocksense.services.config_store import ConfigStore

router = APIRouter(prefix="/api", tags=["analysis"])


@router.get("/quote/{symbol}", response_model=StockQuote)
async def stock_quote(
    symbol: str,
    provider_id: Optional[str] = Query(None),
    service: StockAnalysisService = Depends(get_analysis_service),
) -> StockQuote:
    return await call_service(service.get_stock_quote(symbol, provider_id=provider_id))


@router.post("/analysis", response_model=AnalysisResult)
async def analyze_position(
    payload: Position,
    email: Optional[str] = Query(None, description="Records a SEARCH_STOCK activity for this user."),
    provider_id: Optional[str] = Query(None),
    service: StockAnalysisService = Depends(get_analysis_service),
    tracking: TrackingService = Depends(get_tracking_service),
) -> AnalysisResult:
    if email:
        tracking.log_activity(email=email, action="SEARCH_STOCK", details=search_details(payload.symbol))
    return await call_service(service.analyze_stock_position(payload, provider_id=provider_id))


@router.get("/providers", response_model=List[AnalysisProviderView])
async def list_providers(
    service: StockAnalysisService = Depends(get_analysis_service),
) -> List[AnalysisProviderView]:
    return service.list_providers()


@router.put("/providers/default", response_model=AppConfig, dependencies=[Depends(require_admin)])
async def update_default_provider(
    payload: ProviderModelSelectionRequest,
    config_store: ConfigStore = Depends(get_config_store),
) -> AppConfig:
    try:
        return config_store.set_default_provider(payload.provider_id)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
