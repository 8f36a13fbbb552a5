"""SQLAlchemy ORM models."""

from .has_preferences import HasPreferences
from .preference import Preference, get_hidden_attributes, get_qualified_table_name
from .user import User

__all__ = ["HasPreferences", "Preference", "User", "get_hidden_attributes", "get_qualified_table_name"]
