import asyncio
import json
import unittest

import httpx

from stocksense.config import AnalysisProviderConfig
from stocksense.core.errors import ProviderExecutionError, RateLimitedError
from stocksense.core.types import ModelRequest
from stocksense.infra.http.client import HttpClient
from stocksense.modules.analysis_engine.providers.gemini_provider import GeminiProvider

GROUNDED_BODY = {
    "candidates": [
        {
            "content": {"parts": [{"text": "Reliance trades near "}, {"text": "2,450.10 INR."}]},
            "groundingMetadata": {
                "groundingChunks": [
                    {"web": {"uri": "https://www.nseindia.com/get-quotes/equity?symbol=RELIANCE", "title": "NSE"}},
                    {"web": {"uri": "https://example.com/untitled"}},
                    {"retrievedContext": {"uri": "ignored"}},
                    {"web": {"uri": "https://www.moneycontrol.com/reliance", "title": "Moneycontrol"}},
                ]
            },
        }
    ]
}


def _provider_config():
    return AnalysisProviderConfig(
        provider_id="gemini",
        type="gemini",
        base_url="https://gemini.test/v1beta/",
        models=["gemini-3-flash-preview"],
        timeout=17,
    )


class GeminiProviderTest(unittest.TestCase):
    def _generate(self, handler, request):
        async def run():
            async with HttpClient(timeout_seconds=5, user_agent="test", transport=httpx.MockTransport(handler)) as client:
                provider = GeminiProvider(provider_config=_provider_config(), api_key="secret-key", client=client)
                return await provider.generate(request)

        return asyncio.run(run())

    def test_search_grounded_request_and_sources(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers.get("x-goog-api-key")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=GROUNDED_BODY)

        response = self._generate(
            handler,
            ModelRequest(
                kind="quote",
                model="gemini-3-flash-preview",
                prompt='Quote "RELIANCE"',
                system_instruction="Be precise.",
                use_search=True,
            ),
        )

        self.assertEqual(
            seen["url"],
            "https://gemini.test/v1beta/models/gemini-3-flash-preview:generateContent",
        )
        self.assertEqual(seen["key"], "secret-key")
        self.assertEqual(seen["body"]["tools"], [{"google_search": {}}])
        self.assertEqual(seen["body"]["systemInstruction"], {"parts": [{"text": "Be precise."}]})
        self.assertNotIn("generationConfig", seen["body"])
        self.assertEqual(response.text, "Reliance trades near 2,450.10 INR.")
        self.assertEqual([s.title for s in response.sources], ["NSE", "Moneycontrol"])

    def test_provider_timeout_overrides_client_timeout(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["timeout"] = request.extensions["timeout"]
            return httpx.Response(200, json=GROUNDED_BODY)

        self._generate(handler, ModelRequest(kind="quote", model="m", prompt="p"))
        self.assertEqual(seen["timeout"]["read"], 17)
        self.assertEqual(seen["timeout"]["connect"], 17)

    def test_structured_request_payload(self):
        schema = {"type": "ARRAY", "items": {"type": "OBJECT"}}
        payload = GeminiProvider.build_payload(
            ModelRequest(kind="chart", model="m", prompt="p", response_schema=schema)
        )
        self.assertNotIn("tools", payload)
        self.assertNotIn("systemInstruction", payload)
        self.assertEqual(
            payload["generationConfig"],
            {"responseMimeType": "application/json", "responseSchema": schema},
        )

    def test_empty_candidates_give_empty_text(self):
        self.assertEqual(GeminiProvider.extract_text({"candidates": []}), "")
        self.assertEqual(GeminiProvider.extract_grounding_sources({}), [])

    def test_rate_limit_maps_to_rate_limited_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                429,
                headers={"Retry-After": "30"},
                json={"error": {"code": 429, "status": "RESOURCE_EXHAUSTED", "message": "quota"}},
            )

        with self.assertRaises(RateLimitedError) as ctx:
            self._generate(handler, ModelRequest(kind="analysis", model="m", prompt="p"))
        self.assertEqual(ctx.exception.retry_after, 30.0)

    def test_resource_exhausted_status_without_429(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": {"status": "RESOURCE_EXHAUSTED", "message": "quota"}})

        with self.assertRaises(RateLimitedError):
            self._generate(handler, ModelRequest(kind="analysis", model="m", prompt="p"))

    def test_server_error_maps_to_provider_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": {"status": "INTERNAL", "message": "boom"}})

        with self.assertRaises(ProviderExecutionError) as ctx:
            self._generate(handler, ModelRequest(kind="analysis", model="m", prompt="p"))
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertIn("boom", str(ctx.exception))

    def test_transport_error_maps_to_provider_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        with self.assertRaises(ProviderExecutionError):
            self._generate(handler, ModelRequest(kind="quote", model="m", prompt="p"))


if __name__ == "__main__":
    unittest.main()
