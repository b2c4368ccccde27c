from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from sqlmodel import Session, select

from stocksense.infra.db.models import (
    ActivityLogTable,
    AdminCredentialTable,
    ManualAdTable,
    ManualSuggestionTable,
    UserProfileTable,
)


def _new_id() -> str:
    return str(uuid.uuid4())


class ActivityLogRepo:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(
        self,
        email: str,
        action: str,
        details: str,
        latitude: Optional[float],
        longitude: Optional[float],
        city: Optional[str],
        timestamp: Optional[datetime] = None,
    ) -> ActivityLogTable:
        row = ActivityLogTable(
            id=_new_id(),
            timestamp=timestamp or datetime.utcnow(),
            email=email,
            action=action,
            details=details,
            latitude=latitude,
            longitude=longitude,
            city=city,
        )
        self.session.add(row)
        self.session.flush()
        self.session.refresh(row)
        return row

    def list_recent(self, limit: Optional[int] = None) -> List[ActivityLogTable]:
        statement = select(ActivityLogTable).order_by(ActivityLogTable.timestamp.desc())
        if limit is not None:
            statement = statement.limit(limit)
        return list(self.session.exec(statement).all())

    def trim(self, keep: int) -> int:
        # Newest first, so everything past the retention window can be dropped in one pass.
        stale = self.list_recent()[keep:]
        for row in stale:
            self.session.delete(row)
        self.session.flush()
        return len(stale)


class UserProfileRepo:
    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert(
        self,
        email: str,
        name: str,
        mobile: str,
        city: str,
        profession: str,
        joined_at: Optional[datetime] = None,
    ) -> UserProfileTable:
        row = self.session.get(UserProfileTable, email)
        if row is None:
            row = UserProfileTable(email=email, joined_at=joined_at or datetime.utcnow())
        elif joined_at is not None:
            row.joined_at = joined_at
        row.name = name
        row.mobile = mobile
        row.city = city
        row.profession = profession
        self.session.add(row)
        self.session.flush()
        self.session.refresh(row)
        return row

    def get(self, email: str) -> Optional[UserProfileTable]:
        return self.session.get(UserProfileTable, email)

    def list_all(self) -> List[UserProfileTable]:
        return list(self.session.exec(select(UserProfileTable).order_by(UserProfileTable.joined_at)).all())


class ManualAdRepo:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, title: str, description: str, cta_text: str, link: str) -> ManualAdTable:
        row = ManualAdTable(id=_new_id(), title=title, description=description, cta_text=cta_text, link=link)
        self.session.add(row)
        self.session.flush()
        self.session.refresh(row)
        return row

    def list_all(self) -> List[ManualAdTable]:
        return list(self.session.exec(select(ManualAdTable).order_by(ManualAdTable.created_at.desc())).all())

    def delete(self, ad_id: str) -> bool:
        row = self.session.get(ManualAdTable, ad_id)
        if row is None:
            return False
        self.session.delete(row)
        self.session.flush()
        return True


class ManualSuggestionRepo:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(
        self,
        symbol: str,
        action: str,
        target: float,
        stop_loss: float,
        reason: str,
        target_user_email: Optional[str],
        timestamp: Optional[datetime] = None,
    ) -> ManualSuggestionTable:
        row = ManualSuggestionTable(
            id=_new_id(),
            symbol=symbol,
            action=action,
            target=target,
            stop_loss=stop_loss,
            reason=reason,
            target_user_email=target_user_email,
            timestamp=timestamp or datetime.utcnow(),
        )
        self.session.add(row)
        self.session.flush()
        self.session.refresh(row)
        return row

    def list_all(self) -> List[ManualSuggestionTable]:
        return list(
            self.session.exec(select(ManualSuggestionTable).order_by(ManualSuggestionTable.timestamp.desc())).all()
        )

    def delete(self, suggestion_id: str) -> bool:
        row = self.session.get(ManualSuggestionTable, suggestion_id)
        if row is None:
            return False
        self.session.delete(row)
        self.session.flush()
        return True


class AdminCredentialRepo:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self) -> Optional[AdminCredentialTable]:
        return self.session.exec(select(AdminCredentialTable).order_by(AdminCredentialTable.id)).first()

    def upsert(self, password_hash: str) -> AdminCredentialTable:
        row = self.get()
        if row is None:
            row = AdminCredentialTable(password_hash=password_hash)
        else:
            row.password_hash = password_hash
            row.updated_at = datetime.utcnow()
        self.session.add(row)
        self.session.flush()
        self.session.refresh(row)
        return row
