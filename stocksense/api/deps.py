"""FastAPI dependency factories for service injection."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from stocksense.config import AppConfig
from stocksense.infra.db.session import init_db
from stocksense.modules.admin.service import AdminDataService
from stocksense.modules.analysis_engine.service import StockAnalysisService
from stocksense.modules.tracking.service import TrackingService
from stocksense.services.config_store import ConfigStore
from stocksense.settings import AppSettings

_basic = HTTPBasic(auto_error=False)


def get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def get_config_store(request: Request) -> ConfigStore:
    return request.app.state.config_store


def get_config(config_store: ConfigStore = Depends(get_config_store)) -> AppConfig:
    return config_store.load()


def get_analysis_service(
    request: Request,
    config: AppConfig = Depends(get_config),
    settings: AppSettings = Depends(get_settings),
) -> StockAnalysisService:
    return StockAnalysisService(
        config=config,
        settings=settings,
        client_factory=getattr(request.app.state, "client_factory", None),
    )


def get_tracking_service(config: AppConfig = Depends(get_config)) -> TrackingService:
    init_db(config.database.url)
    return TrackingService(config)


def get_admin_service(
    config: AppConfig = Depends(get_config),
    settings: AppSettings = Depends(get_settings),
) -> AdminDataService:
    init_db(config.database.url)
    return AdminDataService(config, default_password=settings.admin_default_password)


def require_admin(
    credentials: HTTPBasicCredentials | None = Depends(_basic),
    service: AdminDataService = Depends(get_admin_service),
) -> str:
    if credentials is None or not service.verify_admin(credentials.username, credentials.password):
        raise HTTPException(
            status_code=401,
            detail="Admin credentials required",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username
