from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

SuggestionAction = Literal["BUY", "SELL", "HOLD"]


class UserProfile(BaseModel):
    email: str = Field(min_length=3)
    name: str = ""
    mobile: str = ""
    city: str = ""
    profession: str = ""
    joined_at: Optional[datetime] = None


class ManualAdCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    description: str = ""
    cta_text: str = "Learn more"
    link: str = ""


class ManualAd(ManualAdCreateRequest):
    id: str
    created_at: datetime


class ManualSuggestionCreateRequest(BaseModel):
    symbol: str = Field(min_length=1)
    action: SuggestionAction
    target: float = Field(default=0.0, ge=0)
    stop_loss: float = Field(default=0.0, ge=0)
    reason: str = ""
    target_user_email: Optional[str] = None

    @field_validator("symbol")
    @classmethod
    def _upper_symbol(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("target_user_email")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        value = (value or "").strip().lower()
        return value or None


class ManualSuggestion(ManualSuggestionCreateRequest):
    id: str
    timestamp: datetime


class AdminPasswordRequest(BaseModel):
    password: str = Field(min_length=4)
