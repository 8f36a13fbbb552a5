"""User model - an application account that owns preferences."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from database import Base
from models.has_preferences import HasPreferences


class User(HasPreferences, Base):
    """An application user with per-user preferences."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    preference_defaults = {
        "theme": "light",
        "items_per_page": 25,
        "email_notifications": True,
    }
    preference_casts = {
        "items_per_page": "int",
        "email_notifications": "bool",
        "dashboard_layout": "json",
        "pinned_reports": "collection",
        "last_release_seen": "datetime",
    }
