from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

Strategy = Literal["intraday", "long-term"]
Signal = Literal["STRONG_BUY", "STRONG_SELL", "NEUTRAL", "WAIT"]
NewsSentiment = Literal["positive", "negative", "neutral"]
MarketSentiment = Literal["bullish", "bearish", "neutral"]
RequestKind = Literal["quote", "analysis", "chart"]


class Position(BaseModel):
    symbol: str = Field(min_length=1)
    buy_price: float = Field(gt=0)
    quantity: float = Field(gt=0)
    strategy: Strategy = "long-term"

    model_config = {"frozen": True}

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        normalized = value.strip().upper()
        if not normalized:
            raise ValueError("symbol must not be blank")
        return normalized


class GroundingSource(BaseModel):
    title: str
    uri: str


class ChartDataPoint(BaseModel):
    label: str
    price: float
    type: Literal["historical", "forecast"] = "forecast"


class NewsItem(BaseModel):
    headline: str
    summary: str
    sentiment: NewsSentiment


class Recommendation(BaseModel):
    signal: Signal
    price: float
    reason: str


class StockQuote(BaseModel):
    symbol: str
    current_price: float
    suggested_buy: float
    suggested_sell: float
    sources: List[GroundingSource] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    analysis_text: str
    sources: List[GroundingSource] = Field(default_factory=list)
    chart_data: List[ChartDataPoint] = Field(default_factory=list)
    current_price_estimate: Optional[float] = None
    sentiment: MarketSentiment = "neutral"
    news: List[NewsItem] = Field(default_factory=list)
    recommendation: Optional[Recommendation] = None


class StructuredMarkers(BaseModel):
    news: List[NewsItem] = Field(default_factory=list)
    recommendation: Optional[Recommendation] = None
    price_estimate: Optional[float] = None
    cleaned_text: str = ""


class ModelRequest(BaseModel):
    kind: RequestKind
    model: str
    prompt: str
    system_instruction: str = ""
    use_search: bool = False
    response_schema: Optional[Dict[str, Any]] = None


class ModelResponse(BaseModel):
    text: str = ""
    sources: List[GroundingSource] = Field(default_factory=list)
