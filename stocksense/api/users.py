"""User-facing routes: profiles, login activity, ads and pro tips."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query

from stocksense.api.deps import get_admin_service, get_tracking_service
from stocksense.api.errors import raise_not_found
from stocksense.modules.admin.schemas import ManualAd, ManualSuggestion, UserProfile
from stocksense.modules.admin.service import AdminDataService
from stocksense.modules.tracking.schemas import ActivityLog, ActivityLogRequest
from stocksense.modules.tracking.service import TrackingService

router = APIRouter(prefix="/api", tags=["users"])


@router.put("/users", response_model=UserProfile)
async def save_user(
    payload: UserProfile,
    service: AdminDataService = Depends(get_admin_service),
) -> UserProfile:
    return service.save_user_profile(payload)


@router.get("/users/{email}", response_model=UserProfile)
async def get_user(email: str, service: AdminDataService = Depends(get_admin_service)) -> UserProfile:
    profile = service.get_user_profile(email)
    if profile is None:
        raise_not_found(f"User not found: {email}")
    return profile


@router.post("/activity/login", response_model=ActivityLog)
async def log_login(
    payload: ActivityLogRequest,
    tracking: TrackingService = Depends(get_tracking_service),
) -> ActivityLog:
    return tracking.log_activity(
        email=payload.email,
        action="LOGIN",
        details="Logged in to application",
        location=payload.location,
    )


@router.get("/ads", response_model=List[ManualAd])
async def list_ads(service: AdminDataService = Depends(get_admin_service)) -> List[ManualAd]:
    return service.list_ads()


@router.get("/suggestions", response_model=List[ManualSuggestion])
async def list_suggestions(
    email: str = Query(..., min_length=3),
    service: AdminDataService = Depends(get_admin_service),
    tracking: TrackingService = Depends(get_tracking_service),
) -> List[ManualSuggestion]:
    return service.prioritized_suggestions(email=email, interests=tracking.searched_symbols(email))
