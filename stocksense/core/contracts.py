from __future__ import annotations

from typing import Protocol

from stocksense.core.types import ModelRequest, ModelResponse


class ModelProvider(Protocol):
    provider_id: str

    async def generate(self, request: ModelRequest) -> ModelResponse:
        ...
