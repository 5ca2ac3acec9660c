"""
Activity Log and Profile Repository Implementations
"""

from typing import List, Optional
from stockroom.database import db
from stockroom.models import ActivityLog, Profile
from .base import ActivityRepositoryInterface, ProfileRepositoryInterface


class ActivityRepository(ActivityRepositoryInterface):
    """Append-only access to the activity log"""

    def add(self, entry: ActivityLog) -> ActivityLog:
        db.session.add(entry)
        db.session.flush()
        return entry

    def recent(self, limit: int = 10) -> List[ActivityLog]:
        return ActivityLog.query.order_by(ActivityLog.timestamp.desc()).limit(limit).all()

    def page(self, limit: int = 50, offset: int = 0) -> List[ActivityLog]:
        return ActivityLog.query.order_by(
            ActivityLog.timestamp.desc()
        ).offset(offset).limit(limit).all()

    def for_item(self, item_id: str, limit: int = 20) -> List[ActivityLog]:
        return ActivityLog.query.filter_by(item_id=item_id).order_by(
            ActivityLog.timestamp.desc()
        ).limit(limit).all()


class ProfileRepository(ProfileRepositoryInterface):
    """Concrete implementation of profile repository"""

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        return Profile.query.filter_by(id=profile_id).first()

    def get_by_email(self, email: str) -> Optional[Profile]:
        return Profile.query.filter(Profile.email == email.strip().lower()).first()

    def add(self, profile: Profile) -> Profile:
        db.session.add(profile)
        db.session.flush()
        return profile
