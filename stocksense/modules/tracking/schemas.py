from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

ActivityAction = Literal["LOGIN", "SEARCH_STOCK"]


class UserLocation(BaseModel):
    lat: float
    lng: float
    city: Optional[str] = None


class ActivityLog(BaseModel):
    id: str
    timestamp: datetime
    email: str
    action: ActivityAction
    details: str
    location: Optional[UserLocation] = None


class ActivityLogRequest(BaseModel):
    email: str = Field(min_length=3)
    location: Optional[UserLocation] = None


class StockSearchCount(BaseModel):
    name: str
    count: int


class DashboardStats(BaseModel):
    active_users: int
    total_searches: int
    top_stocks: List[StockSearchCount] = Field(default_factory=list)
    recent_activity: List[ActivityLog] = Field(default_factory=list)
