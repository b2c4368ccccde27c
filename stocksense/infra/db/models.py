from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class ActivityLogTable(SQLModel, table=True):
    __tablename__ = "activity_logs"

    id: str = Field(primary_key=True, max_length=36)
    timestamp: datetime = Field(default_factory=datetime.utcnow, index=True)
    email: str = Field(index=True, max_length=256)
    action: str = Field(index=True, max_length=32)
    details: str = Field(default="")
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    city: Optional[str] = Field(default=None, max_length=128)


class UserProfileTable(SQLModel, table=True):
    __tablename__ = "user_profiles"

    email: str = Field(primary_key=True, max_length=256)
    name: str = Field(default="", max_length=128)
    mobile: str = Field(default="", max_length=32)
    city: str = Field(default="", max_length=128)
    profession: str = Field(default="", max_length=128)
    joined_at: datetime = Field(default_factory=datetime.utcnow)


class ManualAdTable(SQLModel, table=True):
    __tablename__ = "manual_ads"

    id: str = Field(primary_key=True, max_length=36)
    title: str
    description: str = ""
    cta_text: str = Field(default="Learn more", max_length=64)
    link: str = ""
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)


class ManualSuggestionTable(SQLModel, table=True):
    __tablename__ = "manual_suggestions"

    id: str = Field(primary_key=True, max_length=36)
    symbol: str = Field(index=True, max_length=32)
    action: str = Field(max_length=8)
    target: float = 0.0
    stop_loss: float = 0.0
    reason: str = ""
    timestamp: datetime = Field(default_factory=datetime.utcnow, index=True)
    target_user_email: Optional[str] = Field(default=None, index=True, max_length=256)


class AdminCredentialTable(SQLModel, table=True):
    __tablename__ = "admin_credentials"

    id: Optional[int] = Field(default=None, primary_key=True)
    password_hash: str
    updated_at: datetime = Field(default_factory=datetime.utcnow)
