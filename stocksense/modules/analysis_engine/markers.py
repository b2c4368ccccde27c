"""Line-marker parsing for free-form analysis replies.

The analysis prompt asks the model to embed three kinds of directives in its
markdown answer::

    NEWS_ITEM: <headline> | <summary> | <Positive|Negative|Neutral>
    CURRENT_PRICE: <value>
    FINAL_RECOMMENDATION: <STRONG_BUY|STRONG_SELL|NEUTRAL|WAIT> | <price> | <reason>

Everything here is pure and tolerant: a missing or malformed directive yields
an empty/``None`` field, never an exception.
"""

from __future__ import annotations

import re
from typing import List, Optional

from stocksense.core.types import MarketSentiment, NewsItem, Recommendation, StructuredMarkers

_NUMBER = r"(\d[\d,]*(?:\.\d+)?)"

NEWS_ITEM_RE = re.compile(
    r"NEWS_ITEM:[*\s]*(.+?)\s*\|\s*(.+?)\s*\|\s*(Positive|Negative|Neutral)\b",
    re.IGNORECASE,
)
RECOMMENDATION_RE = re.compile(
    r"FINAL_RECOMMENDATION:[*\s]*(STRONG_BUY|STRONG_SELL|NEUTRAL|WAIT)\s*\|\s*[^\d|\n]*"
    + _NUMBER
    + r"\s*\|\s*(.+)",
    re.IGNORECASE,
)
CURRENT_PRICE_RE = re.compile(r"CURRENT_PRICE:[^\d\n]*" + _NUMBER, re.IGNORECASE)
CURRENT_PRICE_MARKER_RE = re.compile(r"CURRENT_PRICE:", re.IGNORECASE)
_EXTRA_BLANK_LINES_RE = re.compile(r"\n{3,}")


def _to_float(raw: str) -> Optional[float]:
    try:
        return float(raw.replace(",", ""))
    except ValueError:
        return None


def parse_news_items(text: str) -> List[NewsItem]:
    items: List[NewsItem] = []
    for match in NEWS_ITEM_RE.finditer(text or ""):
        items.append(
            NewsItem(
                headline=match.group(1).strip(),
                summary=match.group(2).strip(),
                sentiment=match.group(3).strip().lower(),
            )
        )
    return items


def parse_recommendation(text: str) -> Optional[Recommendation]:
    match = RECOMMENDATION_RE.search(text or "")
    if match is None:
        return None
    price = _to_float(match.group(2))
    if price is None:
        return None
    return Recommendation(
        signal=match.group(1).strip().upper(),
        price=price,
        reason=match.group(3).strip(),
    )


def parse_price_estimate(text: str) -> Optional[float]:
    match = CURRENT_PRICE_RE.search(text or "")
    if match is None:
        return None
    return _to_float(match.group(1))


def _is_marker_line(line: str) -> bool:
    return bool(
        NEWS_ITEM_RE.search(line)
        or RECOMMENDATION_RE.search(line)
        or CURRENT_PRICE_MARKER_RE.search(line)
    )


def strip_markers(text: str) -> str:
    """Drop every line carrying a directive, bullets and trailing notes included."""
    kept = [line for line in (text or "").splitlines() if not _is_marker_line(line)]
    cleaned = _EXTRA_BLANK_LINES_RE.sub("\n\n", "\n".join(kept))
    return cleaned.strip()


def parse_structured_markers(text: str) -> StructuredMarkers:
    return StructuredMarkers(
        news=parse_news_items(text),
        recommendation=parse_recommendation(text),
        price_estimate=parse_price_estimate(text),
        cleaned_text=strip_markers(text),
    )


def derive_sentiment(price_estimate: Optional[float], buy_price: float) -> MarketSentiment:
    if price_estimate is None:
        return "neutral"
    if price_estimate > buy_price:
        return "bullish"
    if price_estimate < buy_price:
        return "bearish"
    return "neutral"
