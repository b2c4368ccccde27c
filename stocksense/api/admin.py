"""Admin panel routes (stats, logs, ads, suggestions, users, password)."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from stocksense.api.deps import get_admin_service, get_tracking_service, require_admin
from stocksense.api.errors import raise_not_found
from stocksense.modules.admin.schemas import (
    AdminPasswordRequest,
    ManualAd,
    ManualAdCreateRequest,
    ManualSuggestion,
    ManualSuggestionCreateRequest,
    UserProfile,
)
from stocksense.modules.admin.service import AdminDataService
from stocksense.modules.tracking.schemas import ActivityLog, DashboardStats
from stocksense.modules.tracking.service import TrackingService

router = APIRouter(prefix="/api/admin", tags=["admin"])


class AdminLoginRequest(BaseModel):
    username: str
    password: str


@router.post("/login")
async def admin_login(
    payload: AdminLoginRequest,
    service: AdminDataService = Depends(get_admin_service),
) -> dict:
    if not service.verify_admin(payload.username, payload.password):
        raise HTTPException(status_code=401, detail="Invalid admin credentials")
    return {"ok": True, "password_set": service.has_admin_password()}


@router.put("/password", dependencies=[Depends(require_admin)])
async def admin_set_password(
    payload: AdminPasswordRequest,
    service: AdminDataService = Depends(get_admin_service),
) -> dict:
    service.set_admin_password(payload.password)
    return {"updated": True}


@router.get("/stats", response_model=DashboardStats, dependencies=[Depends(require_admin)])
async def admin_stats(tracking: TrackingService = Depends(get_tracking_service)) -> DashboardStats:
    return tracking.get_dashboard_stats()


@router.get("/logs", response_model=List[ActivityLog], dependencies=[Depends(require_admin)])
async def admin_logs(tracking: TrackingService = Depends(get_tracking_service)) -> List[ActivityLog]:
    return tracking.get_logs()


@router.get("/users", response_model=List[UserProfile], dependencies=[Depends(require_admin)])
async def admin_users(service: AdminDataService = Depends(get_admin_service)) -> List[UserProfile]:
    return service.list_user_profiles()


@router.get("/ads", response_model=List[ManualAd], dependencies=[Depends(require_admin)])
async def admin_list_ads(service: AdminDataService = Depends(get_admin_service)) -> List[ManualAd]:
    return service.list_ads()


@router.post("/ads", response_model=ManualAd, dependencies=[Depends(require_admin)])
async def admin_add_ad(
    payload: ManualAdCreateRequest,
    service: AdminDataService = Depends(get_admin_service),
) -> ManualAd:
    return service.add_ad(payload)


@router.delete("/ads/{ad_id}", dependencies=[Depends(require_admin)])
async def admin_delete_ad(ad_id: str, service: AdminDataService = Depends(get_admin_service)) -> dict:
    if not service.delete_ad(ad_id):
        raise_not_found(f"Ad not found: {ad_id}")
    return {"deleted": True}


@router.get("/suggestions", response_model=List[ManualSuggestion], dependencies=[Depends(require_admin)])
async def admin_list_suggestions(
    service: AdminDataService = Depends(get_admin_service),
) -> List[ManualSuggestion]:
    return service.list_suggestions()


@router.post("/suggestions", response_model=ManualSuggestion, dependencies=[Depends(require_admin)])
async def admin_add_suggestion(
    payload: ManualSuggestionCreateRequest,
    service: AdminDataService = Depends(get_admin_service),
) -> ManualSuggestion:
    return service.add_suggestion(payload)


@router.delete("/suggestions/{suggestion_id}", dependencies=[Depends(require_admin)])
async def admin_delete_suggestion(
    suggestion_id: str,
    service: AdminDataService = Depends(get_admin_service),
) -> dict:
    if not service.delete_suggestion(suggestion_id):
        raise_not_found(f"Suggestion not found: {suggestion_id}")
    return {"deleted": True}
