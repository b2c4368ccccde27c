from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import httpx

from stocksense.config import AnalysisProviderConfig, AppConfig
from stocksense.core.contracts import ModelProvider
from stocksense.core.errors import (
    AnalysisInterruptedError,
    ConfigurationError,
    QuoteUnavailableError,
    RateLimitedError,
    ValidationError,
)
from stocksense.core.types import AnalysisResult, ModelRequest, Position, StockQuote
from stocksense.infra.http.client import HttpClient
from stocksense.modules.analysis_engine.client_factory import ClientFactory, create_model_client, provider_status
from stocksense.modules.analysis_engine.extractors import extract_quote_levels, parse_chart_points
from stocksense.modules.analysis_engine.markers import derive_sentiment, parse_structured_markers
from stocksense.modules.analysis_engine.prompt_builder import (
    ANALYSIS_SYSTEM_PROMPT,
    CHART_SYSTEM_PROMPT,
    QUOTE_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_chart_prompt,
    build_quote_prompt,
    chart_response_schema,
)
from stocksense.modules.analysis_engine.schemas import AnalysisProviderView
from stocksense.settings import AppSettings

logger = logging.getLogger(__name__)

EMPTY_ANALYSIS_TEXT = "Analysis unavailable."


class StockAnalysisService:
    def __init__(
        self,
        config: AppConfig,
        settings: AppSettings,
        client_factory: Optional[ClientFactory] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self.settings = settings
        self.client_factory = client_factory or create_model_client
        self.transport = transport

    def list_providers(self) -> List[AnalysisProviderView]:
        views = []
        for provider in self.config.analysis.providers:
            status, status_message, ready = provider_status(provider, self.settings)
            views.append(
                AnalysisProviderView(
                    provider_id=provider.provider_id,
                    type=provider.type,
                    base_url=provider.base_url,
                    models=provider.models,
                    timeout=provider.timeout,
                    enabled=provider.enabled,
                    secret_required=provider.type != "mock",
                    ready=ready,
                    status=status,
                    status_message=status_message,
                    is_default=provider.provider_id == self.config.analysis.default_provider,
                )
            )
        return views

    async def get_stock_quote(self, symbol: str, provider_id: Optional[str] = None) -> StockQuote:
        normalized = (symbol or "").strip().upper()
        if not normalized:
            raise ValidationError("Ticker symbol is required")
        provider_cfg = self._select_provider(provider_id)

        async with self._http_client() as http_client:
            client = self.client_factory(provider_cfg, self.settings, http_client)
            request = ModelRequest(
                kind="quote",
                model=self._select_model(provider_cfg, self.config.analysis.quote_model),
                prompt=build_quote_prompt(normalized),
                system_instruction=QUOTE_SYSTEM_PROMPT,
                use_search=True,
            )
            try:
                response = await client.generate(request)
            except (ConfigurationError, RateLimitedError):
                raise
            except Exception as exc:
                logger.exception("quote request failed for %s", normalized)
                raise QuoteUnavailableError(normalized) from exc

        levels = extract_quote_levels(response.text, self.config.quote)
        if levels is None:
            logger.error("no usable price for %s in reply: %.300s", normalized, response.text)
            raise QuoteUnavailableError(normalized)
        current, buy, sell = levels
        return StockQuote(
            symbol=normalized,
            current_price=current,
            suggested_buy=buy,
            suggested_sell=sell,
            sources=response.sources,
        )

    async def analyze_stock_position(self, position: Position, provider_id: Optional[str] = None) -> AnalysisResult:
        provider_cfg = self._select_provider(provider_id)
        try:
            async with self._http_client() as http_client:
                client = self.client_factory(provider_cfg, self.settings, http_client)
                return await self._run_analysis(client, provider_cfg, position)
        except (ConfigurationError, AnalysisInterruptedError):
            raise
        except Exception as exc:
            logger.exception("analysis failed for %s", position.symbol)
            raise AnalysisInterruptedError() from exc

    async def _run_analysis(
        self,
        client: ModelProvider,
        provider_cfg: AnalysisProviderConfig,
        position: Position,
    ) -> AnalysisResult:
        analysis_request = ModelRequest(
            kind="analysis",
            model=self._select_model(provider_cfg, self.config.analysis.analysis_model),
            prompt=build_analysis_prompt(position),
            system_instruction=ANALYSIS_SYSTEM_PROMPT,
            use_search=True,
        )
        chart_request = ModelRequest(
            kind="chart",
            model=self._select_model(provider_cfg, self.config.analysis.chart_model),
            prompt=build_chart_prompt(position.symbol, self.config.analysis.forecast_points),
            system_instruction=CHART_SYSTEM_PROMPT,
            response_schema=chart_response_schema(),
        )
        tasks = [
            asyncio.ensure_future(client.generate(analysis_request)),
            asyncio.ensure_future(client.generate(chart_request)),
        ]
        try:
            analysis_response, chart_response = await asyncio.gather(*tasks)
        finally:
            # A failed call must not leave its sibling running past the HTTP client's lifetime.
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        markers = parse_structured_markers(analysis_response.text)
        return AnalysisResult(
            analysis_text=markers.cleaned_text or EMPTY_ANALYSIS_TEXT,
            sources=analysis_response.sources,
            chart_data=parse_chart_points(chart_response.text),
            current_price_estimate=markers.price_estimate,
            sentiment=derive_sentiment(markers.price_estimate, position.buy_price),
            news=markers.news,
            recommendation=markers.recommendation,
        )

    def _http_client(self) -> HttpClient:
        return HttpClient(
            timeout_seconds=self.config.request_timeout_seconds,
            user_agent=self.config.user_agent,
            transport=self.transport,
        )

    def _select_provider(self, provider_id: Optional[str]) -> AnalysisProviderConfig:
        selected = provider_id or self.config.analysis.default_provider
        provider_cfg = self.config.find_provider(selected)
        if provider_cfg is None:
            raise ConfigurationError(f"Configuration required: analysis provider not enabled: {selected}")
        return provider_cfg

    @staticmethod
    def _select_model(provider_cfg: AnalysisProviderConfig, preferred: str) -> str:
        if provider_cfg.models and preferred not in provider_cfg.models:
            return provider_cfg.models[0]
        return preferred
