import asyncio
import json
import unittest

import httpx

from stocksense.config import AnalysisProviderConfig
from stocksense.core.errors import ProviderExecutionError, RateLimitedError
from stocksense.core.types import ModelRequest
from stocksense.modules.analysis_engine.providers.openai_compatible_provider import OpenAICompatibleProvider

COMPLETION = {
    "id": "chatcmpl-1",
    "object": "chat.completion",
    "created": 1767225600,
    "model": "gpt-4o-mini",
    "choices": [
        {
            "index": 0,
            "finish_reason": "stop",
            "message": {"role": "assistant", "content": '  {"currentPrice": 512.0}  '},
        }
    ],
}


class OpenAICompatibleProviderTest(unittest.TestCase):
    def _generate(self, handler):
        provider = OpenAICompatibleProvider(
            provider_config=AnalysisProviderConfig(
                provider_id="openai_compatible",
                type="openai_compatible",
                base_url="https://llm.test/v1",
                models=["gpt-4o-mini"],
            ),
            api_key="sk-test",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        request = ModelRequest(
            kind="quote",
            model="gpt-4o-mini",
            prompt='Quote "TCS"',
            system_instruction="Return JSON.",
            use_search=True,
        )
        return asyncio.run(provider.generate(request))

    def test_chat_completion_text_without_sources(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["auth"] = request.headers.get("authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=COMPLETION)

        response = self._generate(handler)

        self.assertEqual(seen["path"], "/v1/chat/completions")
        self.assertEqual(seen["auth"], "Bearer sk-test")
        self.assertEqual(
            [message["role"] for message in seen["body"]["messages"]],
            ["system", "user"],
        )
        self.assertEqual(response.text, '{"currentPrice": 512.0}')
        self.assertEqual(response.sources, [])

    def test_rate_limit(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                429,
                headers={"retry-after": "7"},
                json={"error": {"message": "quota", "type": "rate_limit"}},
            )

        with self.assertRaises(RateLimitedError) as ctx:
            self._generate(handler)
        self.assertEqual(ctx.exception.retry_after, 7.0)

    def test_server_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": {"message": "boom"}})

        with self.assertRaises(ProviderExecutionError) as ctx:
            self._generate(handler)
        self.assertEqual(ctx.exception.status_code, 500)


if __name__ == "__main__":
    unittest.main()
