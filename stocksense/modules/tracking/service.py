from __future__ import annotations

import math
from collections import Counter
from datetime import datetime, timedelta
from typing import List, Optional

from stocksense.config import AppConfig
from stocksense.infra.db.models import ActivityLogTable
from stocksense.infra.db.repos import ActivityLogRepo
from stocksense.infra.db.session import session_scope
from stocksense.modules.tracking.schemas import (
    ActivityAction,
    ActivityLog,
    DashboardStats,
    StockSearchCount,
    UserLocation,
)

MOCK_CITIES = ["Mumbai", "Delhi", "Bangalore", "Hyderabad", "Chennai", "Pune", "Kolkata"]
SEARCH_PREFIX = "Searched "


def mock_reverse_geocode(lat: float, lng: float) -> str:
    """Deterministic stand-in for reverse geocoding."""
    index = math.floor((abs(lat * lng) * 100) % len(MOCK_CITIES))
    return MOCK_CITIES[index]


def search_details(symbol: str) -> str:
    return f"{SEARCH_PREFIX}{symbol}"


class TrackingService:
    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def log_activity(
        self,
        email: str,
        action: ActivityAction,
        details: str,
        location: Optional[UserLocation] = None,
        timestamp: Optional[datetime] = None,
    ) -> ActivityLog:
        if location is not None and not location.city:
            location = location.model_copy(update={"city": mock_reverse_geocode(location.lat, location.lng)})

        with session_scope(self.config.database.url) as session:
            repo = ActivityLogRepo(session)
            row = repo.add(
                email=email.strip().lower(),
                action=action,
                details=details,
                latitude=location.lat if location else None,
                longitude=location.lng if location else None,
                city=location.city if location else None,
                timestamp=timestamp,
            )
            log = self._to_schema(row)
            repo.trim(keep=self.config.tracking.max_logs)
        return log

    def get_logs(self, limit: Optional[int] = None) -> List[ActivityLog]:
        with session_scope(self.config.database.url) as session:
            rows = ActivityLogRepo(session).list_recent(limit=limit)
            return [self._to_schema(row) for row in rows]

    def searched_symbols(self, email: str) -> set[str]:
        email = email.strip().lower()
        return {
            log.details[len(SEARCH_PREFIX) :] if log.details.startswith(SEARCH_PREFIX) else log.details
            for log in self.get_logs()
            if log.email == email and log.action == "SEARCH_STOCK"
        }

    def get_dashboard_stats(self, now: Optional[datetime] = None) -> DashboardStats:
        tracking = self.config.tracking
        logs = self.get_logs()
        cutoff = (now or datetime.utcnow()) - timedelta(hours=tracking.active_window_hours)
        active_users = len({log.email for log in logs if log.timestamp > cutoff})

        searches = [log for log in logs if log.action == "SEARCH_STOCK"]
        counts = Counter(log.details.replace(SEARCH_PREFIX, "", 1) for log in searches)
        top_stocks = [
            StockSearchCount(name=name, count=count)
            for name, count in counts.most_common(tracking.top_stocks)
        ]
        return DashboardStats(
            active_users=active_users,
            total_searches=len(searches),
            top_stocks=top_stocks,
            recent_activity=logs[: tracking.recent_activity],
        )

    @staticmethod
    def _to_schema(row: ActivityLogTable) -> ActivityLog:
        location = None
        if row.latitude is not None and row.longitude is not None:
            location = UserLocation(lat=row.latitude, lng=row.longitude, city=row.city)
        return ActivityLog(
            id=row.id,
            timestamp=row.timestamp,
            email=row.email,
            action=row.action,
            details=row.details,
            location=location,
        )
