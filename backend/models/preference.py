"""Preference model - named string values attached to any owning model."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import reconstructor

from config import preference_config, settings
from database import Base

DEFAULT_MODEL_PREFERENCE_TABLE = "model_preferences"

# preferable_type discriminator -> name of the Preference relationship that
# loads that owner. Filled in by HasPreferences as owner mappers configure.
PREFERABLE_RELATIONSHIPS: dict[str, str] = {}


def get_qualified_table_name() -> str:
    """Determine the name of the model preferences table.

    Runtime configuration wins, then the MODEL_PREFERENCE_TABLE setting,
    then the built-in default.
    """
    table = preference_config.get("table")
    if table:
        return table

    if settings.MODEL_PREFERENCE_TABLE:
        return settings.MODEL_PREFERENCE_TABLE

    return DEFAULT_MODEL_PREFERENCE_TABLE


def get_hidden_attributes() -> list[str]:
    """Determine which preference attributes are left out of ``to_dict()``.

    Same precedence as the table name; the setting is comma-separated.
    """
    hidden = preference_config.get("hidden_attributes")
    if hidden is not None:
        return list(hidden)

    if settings.MODEL_PREFERENCE_HIDDEN_ATTRIBUTES:
        return [
            name.strip()
            for name in settings.MODEL_PREFERENCE_HIDDEN_ATTRIBUTES.split(",")
            if name.strip()
        ]

    return []


_TABLE_NAME = get_qualified_table_name()


class Preference(Base):
    """A single named preference belonging to one owning record.

    The owner is referenced by ``preferable_type`` + ``preferable_id``
    rather than a foreign key, so any model using HasPreferences can own
    rows in the same table.
    """

    DEFAULT_MODEL_PREFERENCE_TABLE = DEFAULT_MODEL_PREFERENCE_TABLE

    __tablename__ = _TABLE_NAME
    __table_args__ = (
        Index(
            f"{_TABLE_NAME}_preferable_type_preferable_id_index",
            "preferable_type",
            "preferable_id",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    preference = Column(String(255), nullable=False)
    value = Column(Text, nullable=False)  # store-serialized, see services.preference_casts
    preferable_id = Column(Integer, nullable=False)
    preferable_type = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._hidden = get_hidden_attributes()

    @reconstructor
    def _init_on_load(self):
        self._hidden = get_hidden_attributes()

    @property
    def preferable(self):
        """The owning record, whatever model it is."""
        relationship_name = PREFERABLE_RELATIONSHIPS.get(self.preferable_type)
        if relationship_name is None:
            return None
        return getattr(self, relationship_name)

    def get_hidden(self) -> list[str]:
        return list(self._hidden)

    def to_dict(self) -> dict[str, Any]:
        """Export the row's columns, minus the hidden attributes."""
        hidden = set(self._hidden)
        return {
            column.key: getattr(self, column.key)
            for column in self.__table__.columns
            if column.key not in hidden
        }

    def __repr__(self) -> str:
        return (
            f"<Preference {self.preference!r} "
            f"owner={self.preferable_type}:{self.preferable_id}>"
        )
