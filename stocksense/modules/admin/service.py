from __future__ import annotations

import secrets
from typing import Iterable, List, Optional

from stocksense.config import AppConfig
from stocksense.core.errors import ValidationError
from stocksense.infra.db.models import ManualAdTable, ManualSuggestionTable, UserProfileTable
from stocksense.infra.db.repos import (
    AdminCredentialRepo,
    ManualAdRepo,
    ManualSuggestionRepo,
    UserProfileRepo,
)
from stocksense.infra.db.session import hash_password, session_scope, verify_password
from stocksense.modules.admin.schemas import (
    ManualAd,
    ManualAdCreateRequest,
    ManualSuggestion,
    ManualSuggestionCreateRequest,
    UserProfile,
)

ADMIN_USERNAME = "admin"


class AdminDataService:
    def __init__(self, config: AppConfig, default_password: Optional[str] = None) -> None:
        self.config = config
        self.default_password = default_password

    # -- admin credential ---------------------------------------------------

    def has_admin_password(self) -> bool:
        with session_scope(self.config.database.url) as session:
            return AdminCredentialRepo(session).get() is not None

    def set_admin_password(self, password: str) -> None:
        if len(password or "") < 4:
            raise ValidationError("Admin password must be at least 4 characters")
        with session_scope(self.config.database.url) as session:
            AdminCredentialRepo(session).upsert(password_hash=hash_password(password))

    def verify_admin(self, username: str, password: str) -> bool:
        if username != ADMIN_USERNAME or not password:
            return False
        with session_scope(self.config.database.url) as session:
            row = AdminCredentialRepo(session).get()
            stored_hash = row.password_hash if row is not None else None
        if stored_hash is not None:
            return verify_password(password, stored_hash)
        if self.default_password:
            return secrets.compare_digest(password, self.default_password)
        return False

    # -- user profiles ------------------------------------------------------

    def save_user_profile(self, profile: UserProfile) -> UserProfile:
        with session_scope(self.config.database.url) as session:
            row = UserProfileRepo(session).upsert(
                email=profile.email.strip().lower(),
                name=profile.name,
                mobile=profile.mobile,
                city=profile.city,
                profession=profile.profession,
                joined_at=profile.joined_at,
            )
            return self._profile_to_schema(row)

    def get_user_profile(self, email: str) -> Optional[UserProfile]:
        with session_scope(self.config.database.url) as session:
            row = UserProfileRepo(session).get(email.strip().lower())
            return self._profile_to_schema(row) if row is not None else None

    def list_user_profiles(self) -> List[UserProfile]:
        with session_scope(self.config.database.url) as session:
            return [self._profile_to_schema(row) for row in UserProfileRepo(session).list_all()]

    # -- ads ------------------------------------------------------------------

    def add_ad(self, payload: ManualAdCreateRequest) -> ManualAd:
        with session_scope(self.config.database.url) as session:
            row = ManualAdRepo(session).add(
                title=payload.title,
                description=payload.description,
                cta_text=payload.cta_text,
                link=payload.link,
            )
            return self._ad_to_schema(row)

    def list_ads(self) -> List[ManualAd]:
        with session_scope(self.config.database.url) as session:
            return [self._ad_to_schema(row) for row in ManualAdRepo(session).list_all()]

    def delete_ad(self, ad_id: str) -> bool:
        with session_scope(self.config.database.url) as session:
            return ManualAdRepo(session).delete(ad_id)

    # -- suggestions ----------------------------------------------------------

    def add_suggestion(self, payload: ManualSuggestionCreateRequest) -> ManualSuggestion:
        with session_scope(self.config.database.url) as session:
            row = ManualSuggestionRepo(session).add(
                symbol=payload.symbol,
                action=payload.action,
                target=payload.target,
                stop_loss=payload.stop_loss,
                reason=payload.reason,
                target_user_email=payload.target_user_email,
            )
            return self._suggestion_to_schema(row)

    def list_suggestions(self) -> List[ManualSuggestion]:
        with session_scope(self.config.database.url) as session:
            return [self._suggestion_to_schema(row) for row in ManualSuggestionRepo(session).list_all()]

    def delete_suggestion(self, suggestion_id: str) -> bool:
        with session_scope(self.config.database.url) as session:
            return ManualSuggestionRepo(session).delete(suggestion_id)

    def prioritized_suggestions(
        self,
        email: str,
        interests: Iterable[str] = (),
        limit: Optional[int] = None,
    ) -> List[ManualSuggestion]:
        """Tips for *email*: targeted first, then the user's searched symbols, then newest.

        Tips targeted at a different user are never shown.
        """
        email = email.strip().lower()
        interest_set = {symbol.upper() for symbol in interests}
        visible = [
            item
            for item in self.list_suggestions()
            if item.target_user_email is None or item.target_user_email == email
        ]
        visible.sort(key=lambda item: item.timestamp, reverse=True)
        visible.sort(
            key=lambda item: (
                item.target_user_email != email,
                item.symbol not in interest_set,
            )
        )
        return visible[: limit or self.config.tracking.suggestion_limit]

    @staticmethod
    def _profile_to_schema(row: UserProfileTable) -> UserProfile:
        return UserProfile(
            email=row.email,
            name=row.name,
            mobile=row.mobile,
            city=row.city,
            profession=row.profession,
            joined_at=row.joined_at,
        )

    @staticmethod
    def _ad_to_schema(row: ManualAdTable) -> ManualAd:
        return ManualAd(
            id=row.id,
            title=row.title,
            description=row.description,
            cta_text=row.cta_text,
            link=row.link,
            created_at=row.created_at,
        )

    @staticmethod
    def _suggestion_to_schema(row: ManualSuggestionTable) -> ManualSuggestion:
        return ManualSuggestion(
            id=row.id,
            symbol=row.symbol,
            action=row.action,
            target=row.target,
            stop_loss=row.stop_loss,
            reason=row.reason,
            target_user_email=row.target_user_email,
            timestamp=row.timestamp,
        )
