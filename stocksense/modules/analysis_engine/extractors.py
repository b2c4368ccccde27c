from __future__ import annotations

import logging
import re
from typing import Any, List, Optional, Tuple

from stocksense.config import QuoteConfig
from stocksense.core.types import ChartDataPoint
from stocksense.core.utils import clean_number, extract_json, strip_code_fences

logger = logging.getLogger(__name__)

_PRICE_TOKEN_RE = re.compile(r"\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?")


def find_first_price(text: str, minimum: float = 1.0) -> Optional[float]:
    """Return the first number-looking token in *text* greater than *minimum*."""
    for match in _PRICE_TOKEN_RE.finditer(text or ""):
        value = clean_number(match.group(0).replace(",", ""))
        if value > minimum:
            return value
    return None


def derive_levels(current_price: float, config: QuoteConfig) -> Tuple[float, float]:
    return (
        round(current_price * config.buy_ratio, 2),
        round(current_price * config.sell_ratio, 2),
    )


def extract_quote_levels(text: str, config: QuoteConfig) -> Optional[Tuple[float, float, float]]:
    """Extract ``(current, suggested_buy, suggested_sell)`` from a quote reply.

    The structured JSON payload wins when it carries a positive
    ``currentPrice``.  Otherwise the first plausible number in the reply is
    used and both levels are derived from it; when the reply held a JSON
    object only the prose around it is scanned.  ``None`` means no usable price.
    """
    payload = extract_json(text)
    heuristic_text = text
    if isinstance(payload, dict):
        current = clean_number(payload.get("currentPrice"))
        if current > 0:
            buy_default, sell_default = derive_levels(current, config)
            buy = clean_number(payload.get("suggestedBuy"))
            sell = clean_number(payload.get("suggestedSell"))
            return (
                current,
                buy if buy > 0 else buy_default,
                sell if sell > 0 else sell_default,
            )
        logger.warning("quote payload has no usable currentPrice: %s", payload)
        heuristic_text = _text_outside_object(text)
    else:
        logger.warning("quote reply is not a JSON object, trying text heuristic")

    price = find_first_price(heuristic_text, minimum=config.min_heuristic_price)
    if price is None:
        return None
    buy, sell = derive_levels(price, config)
    return price, buy, sell


def _text_outside_object(text: str) -> str:
    # Levels inside the parsed object (suggestedBuy, suggestedSell) are never a current price.
    cleaned = strip_code_fences(text)
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start < 0 or end <= start:
        return cleaned
    return f"{cleaned[:start]} {cleaned[end + 1 :]}"


def parse_chart_points(text: str) -> List[ChartDataPoint]:
    raw: Any = extract_json(text or "[]")
    if not isinstance(raw, list):
        if raw is not None or text:
            logger.warning("forecast reply is not a JSON array, skipping chart")
        return []

    points: List[ChartDataPoint] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            continue
        label = item.get("label")
        points.append(
            ChartDataPoint(
                label=str(label) if label not in (None, "") else f"Day {idx + 1}",
                price=clean_number(item.get("price")),
                type="forecast",
            )
        )
    return points
