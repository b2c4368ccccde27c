from __future__ import annotations

import json
import zlib

from stocksense.core.types import GroundingSource, ModelRequest, ModelResponse


class MockModelProvider:
    provider_id = "mock"

    async def generate(self, request: ModelRequest) -> ModelResponse:
        symbol = _symbol_from_prompt(request.prompt)
        base = 100 + zlib.crc32(symbol.encode("utf-8")) % 2900
        sources = [
            GroundingSource(
                title=f"{symbol} share price (mock)",
                uri=f"https://example.com/quote/{symbol}",
            )
        ]

        if request.kind == "quote":
            text = json.dumps(
                {
                    "currentPrice": base,
                    "suggestedBuy": round(base * 0.95, 2),
                    "suggestedSell": round(base * 1.1, 2),
                }
            )
            return ModelResponse(text=f"```json\n{text}\n```", sources=sources)

        if request.kind == "chart":
            points = [{"label": f"Day {idx}", "price": round(base * (1 + 0.004 * idx), 2)} for idx in range(1, 8)]
            return ModelResponse(text=json.dumps(points))

        text = (
            f"### {symbol} quick take (mock)\n"
            f"NEWS_ITEM: {symbol} holds steady | Offline demo headline | Neutral\n"
            f"NEWS_ITEM: Sector sees inflows | Offline demo headline | Positive\n"
            f"NEWS_ITEM: Macro headwinds persist | Offline demo headline | Negative\n"
            f"CURRENT_PRICE: ₹{base:,.2f}\n"
            f"FINAL_RECOMMENDATION: WAIT | {base * 0.97:,.2f} | Wait for a clearer breakout signal.\n"
            "- Trend: sideways\n"
            "- This reply was generated by the mock provider.\n"
        )
        return ModelResponse(text=text, sources=sources)


def _symbol_from_prompt(prompt: str) -> str:
    start = prompt.find('"')
    end = prompt.find('"', start + 1)
    if start >= 0 and end > start:
        return prompt[start + 1 : end]
    return "STOCK"
