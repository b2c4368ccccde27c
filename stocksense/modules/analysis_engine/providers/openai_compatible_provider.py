from __future__ import annotations

from typing import Optional

import httpx
import openai
from openai import AsyncOpenAI

from stocksense.config import AnalysisProviderConfig
from stocksense.core.errors import ProviderExecutionError, RateLimitedError
from stocksense.core.types import ModelRequest, ModelResponse


class OpenAICompatibleProvider:
    """Chat-completions backend. It has no search grounding, so sources stay empty."""

    provider_id = "openai_compatible"

    def __init__(
        self,
        provider_config: AnalysisProviderConfig,
        api_key: str,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.provider_config = provider_config
        self.api_key = api_key
        self.http_client = http_client

    async def generate(self, request: ModelRequest) -> ModelResponse:
        messages = []
        if request.system_instruction:
            messages.append({"role": "system", "content": request.system_instruction})
        messages.append({"role": "user", "content": request.prompt})

        client = AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.provider_config.base_url,
            timeout=self.provider_config.timeout,
            max_retries=0,
            http_client=self.http_client,
        )
        try:
            async with client:
                response = await client.chat.completions.create(
                    model=request.model,
                    temperature=0.2,
                    messages=messages,
                )
        except openai.RateLimitError as exc:
            raise RateLimitedError(retry_after=_retry_after(exc.response)) from exc
        except openai.APIError as exc:
            raise ProviderExecutionError(
                f"OpenAI-compatible request failed: {exc}",
                status_code=getattr(exc, "status_code", None),
            ) from exc

        content = (response.choices[0].message.content or "").strip()
        return ModelResponse(text=content)


def _retry_after(response: httpx.Response) -> Optional[float]:
    try:
        return max(float(response.headers.get("retry-after", "")), 0.0)
    except ValueError:
        return None
