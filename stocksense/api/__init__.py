"""StockSense API package: FastAPI application factory."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stocksense.api import admin, analysis, health, users
from stocksense.infra.db.session import init_db
from stocksense.modules.analysis_engine.client_factory import ClientFactory
from stocksense.services.config_store import ConfigStore
from stocksense.settings import AppSettings


def create_app(
    settings: Optional[AppSettings] = None,
    client_factory: Optional[ClientFactory] = None,
) -> FastAPI:
    settings = settings or AppSettings()
    config_store = ConfigStore(config_path=settings.config_file)

    app = FastAPI(title="StockSense API", version="0.1.0")

    # ---------- state --------------------------------------------------------
    app.state.settings = settings
    app.state.config_store = config_store
    app.state.client_factory = client_factory

    # ---------- CORS ---------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- routers ------------------------------------------------------
    app.include_router(health.router)
    app.include_router(analysis.router)
    app.include_router(users.router)
    app.include_router(admin.router)

    @app.on_event("startup")
    async def startup_event() -> None:
        init_db(config_store.load().database.url)

    return app
