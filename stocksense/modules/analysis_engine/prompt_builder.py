from __future__ import annotations

from typing import Any, Dict

from stocksense.core.types import Position

# ---------------------------------------------------------------------------
# Quote
# ---------------------------------------------------------------------------

QUOTE_SYSTEM_PROMPT = (
    "You are a precise financial data extractor. Return only raw JSON data based on "
    "real-time search results. Do not include any conversational text."
)


def build_quote_prompt(symbol: str) -> str:
    return f"""\
Perform a real-time web search for the latest share price of "{symbol}" on the NSE \
(National Stock Exchange of India) or BSE.
Locate the current trading price, a 52-week low for suggested buy, and a consensus \
target for suggested sell.

Respond ONLY with a JSON object in this format:
{{"currentPrice": number, "suggestedBuy": number, "suggestedSell": number}}
"""


# ---------------------------------------------------------------------------
# Position analysis
# ---------------------------------------------------------------------------

ANALYSIS_SYSTEM_PROMPT = (
    "You are a professional equity researcher. Use Google Search grounding to verify "
    "all news and prices."
)

STRATEGY_INSTRUCTIONS: Dict[str, str] = {
    "intraday": (
        "Prioritize today's technical levels, intraday momentum and immediate "
        "support/resistance. Keep the horizon to the current trading session."
    ),
    "long-term": (
        "Focus on fundamental strength, earnings quality, valuation and sector outlook "
        "over a multi-month horizon."
    ),
}


def build_analysis_prompt(position: Position) -> str:
    instructions = STRATEGY_INSTRUCTIONS.get(position.strategy, STRATEGY_INSTRUCTIONS["long-term"])
    return f"""\
Deep analysis for "{position.symbol}" ({_fmt(position.quantity)} units @ ₹{_fmt(position.buy_price)}). \
Strategy: {position.strategy}.
{instructions}

Requirements:
1. At least 3 lines, each formatted exactly as
   NEWS_ITEM: Headline | Summary | Sentiment (Positive/Negative/Neutral)
2. One line formatted as CURRENT_PRICE: <estimated live value>
3. One line formatted as
   FINAL_RECOMMENDATION: SIGNAL (STRONG_BUY/STRONG_SELL/NEUTRAL/WAIT) | PRICE | REASON
4. Detailed reasoning in Markdown.
"""


# ---------------------------------------------------------------------------
# Forecast chart
# ---------------------------------------------------------------------------

CHART_SYSTEM_PROMPT = "You are a quantitative analyst. Return strictly valid JSON only."


def build_chart_prompt(symbol: str, points: int = 7) -> str:
    return (
        f'Project the next {points} specific price points for "{symbol}". '
        'Return only a JSON array: [{"label": "Day 1", "price": 123.4}, ...]'
    )


def chart_response_schema() -> Dict[str, Any]:
    return {
        "type": "ARRAY",
        "items": {
            "type": "OBJECT",
            "properties": {
                "label": {"type": "STRING"},
                "price": {"type": "NUMBER"},
            },
            "required": ["label", "price"],
        },
    }


def _fmt(value: float) -> str:
    return f"{value:g}"
