from __future__ import annotations

from typing import List

from pydantic import BaseModel


class AnalysisProviderView(BaseModel):
    provider_id: str
    type: str
    base_url: str
    models: List[str]
    timeout: int
    enabled: bool
    secret_required: bool
    ready: bool
    status: str
    status_message: str
    is_default: bool


class ProviderModelSelectionRequest(BaseModel):
    provider_id: str
