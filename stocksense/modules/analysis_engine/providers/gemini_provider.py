from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from stocksense.config import AnalysisProviderConfig
from stocksense.core.errors import ProviderExecutionError, RateLimitedError
from stocksense.core.types import GroundingSource, ModelRequest, ModelResponse
from stocksense.infra.http.client import HttpClient

logger = logging.getLogger(__name__)


class GeminiProvider:
    """Gemini ``generateContent`` over REST, with optional Google Search grounding."""

    provider_id = "gemini"

    def __init__(self, provider_config: AnalysisProviderConfig, api_key: str, client: HttpClient) -> None:
        self.provider_config = provider_config
        self.api_key = api_key
        self.client = client

    async def generate(self, request: ModelRequest) -> ModelResponse:
        url = f"{self.provider_config.base_url.rstrip('/')}/models/{request.model}:generateContent"
        try:
            response = await self.client.post_json(
                url,
                payload=self.build_payload(request),
                headers={"x-goog-api-key": self.api_key},
                timeout_seconds=self.provider_config.timeout,
            )
        except httpx.HTTPError as exc:
            raise ProviderExecutionError(f"Gemini request failed: {exc}") from exc

        if response.status_code >= 400:
            self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderExecutionError("Gemini returned a non-JSON body", response.status_code) from exc
        if not isinstance(data, dict):
            raise ProviderExecutionError("Gemini returned an unexpected body", response.status_code)

        return ModelResponse(
            text=self.extract_text(data),
            sources=self.extract_grounding_sources(data),
        )

    @staticmethod
    def build_payload(request: ModelRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
        }
        if request.system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": request.system_instruction}]}
        if request.use_search:
            payload["tools"] = [{"google_search": {}}]
        if request.response_schema is not None:
            payload["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": request.response_schema,
            }
        return payload

    @staticmethod
    def extract_text(data: Dict[str, Any]) -> str:
        candidate = _first_candidate(data)
        parts = (candidate.get("content") or {}).get("parts") or []
        texts = [part.get("text") for part in parts if isinstance(part, dict)]
        return "".join(text for text in texts if isinstance(text, str)).strip()

    @staticmethod
    def extract_grounding_sources(data: Dict[str, Any]) -> List[GroundingSource]:
        metadata = _first_candidate(data).get("groundingMetadata") or {}
        sources: List[GroundingSource] = []
        for chunk in metadata.get("groundingChunks") or []:
            web = chunk.get("web") if isinstance(chunk, dict) else None
            if not isinstance(web, dict):
                continue
            uri = web.get("uri")
            title = web.get("title")
            if uri and title:
                sources.append(GroundingSource(title=str(title), uri=str(uri)))
        return sources

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        status = ""
        message = response.text[:300]
        try:
            error = (response.json() or {}).get("error") or {}
            status = str(error.get("status") or "")
            message = str(error.get("message") or message)
        except (ValueError, AttributeError):
            pass

        if response.status_code == 429 or status == "RESOURCE_EXHAUSTED":
            raise RateLimitedError(retry_after=_parse_retry_after(response.headers.get("Retry-After")))
        logger.warning("gemini call failed: status=%s body=%s", response.status_code, message)
        raise ProviderExecutionError(
            f"Gemini request failed ({response.status_code}): {message}",
            status_code=response.status_code,
        )


def _first_candidate(data: Dict[str, Any]) -> Dict[str, Any]:
    candidates = data.get("candidates") or []
    if candidates and isinstance(candidates[0], dict):
        return candidates[0]
    return {}


def _parse_retry_after(raw: Optional[str]) -> Optional[float]:
    if not raw:
        return None
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return None
