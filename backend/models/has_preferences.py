"""HasPreferences mixin - gives any model get/set/clear over its preferences.

Add ``HasPreferences`` to a model's bases to associate preferences with it::

    class User(HasPreferences, Base):
        __tablename__ = "users"

        id = Column(Integer, primary_key=True)

        preference_defaults = {"theme": "light"}
        preference_casts = {"items_per_page": "int"}

The owning model needs an ``id`` primary key. When its mapper is configured
a ``preferences`` relationship is attached to it, along with a read-only
relationship on Preference that ``Preference.preferable`` uses.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import and_, event
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import Query, Session, foreign, object_session, relationship, remote
from sqlalchemy.orm.exc import DetachedInstanceError

from models.preference import PREFERABLE_RELATIONSHIPS, Preference
from services.preference_casts import cast_for_store, cast_from_store

logger = logging.getLogger(__name__)

# Preference-side relationship name -> the owning class that claimed it.
_OWNER_CLASSES: dict[str, type] = {}


class HasPreferences:
    """Mixin for models that own preferences.

    Owning models may declare:

    - ``preference_defaults``: preference name -> value returned when no
      row is stored for that name.
    - ``preference_casts``: preference name -> cast tag (see
      :mod:`services.preference_casts`).
    - ``preference_owner_type``: the ``preferable_type`` discriminator;
      defaults to the class name.

    Writes are flushed but never committed.
    """

    preference_defaults = {}
    preference_casts = {}
    preference_owner_type = None

    @classmethod
    def get_preference_owner_type(cls) -> str:
        return cls.preference_owner_type or cls.__name__

    def preference_query(self) -> Query:
        """Query over the Preference rows owned by this record."""
        session = self._preference_session()
        return session.query(Preference).filter(
            Preference.preferable_type == self.get_preference_owner_type(),
            Preference.preferable_id == self.id,
        )

    def get_preference(self, preference: str, default: Any = None) -> Any:
        """Retrieve a single preference by name.

        Falls back to the model's declared default, then to ``default``.
        The result is cast according to ``preference_casts``.
        """
        saved = self._find_preference(preference)

        if saved is not None:
            value = saved.value
        elif preference in (self.preference_defaults or {}):
            value = self.preference_defaults[preference]
        else:
            value = default

        return cast_from_store(value, self._cast_for(preference))

    def prefers(self, preference: str, default: Any = None) -> Any:
        """A more readable alias for :meth:`get_preference`."""
        return self.get_preference(preference, default)

    def set_preference(self, preference: str, value: Any):
        """Set an individual preference value, creating the row if needed."""
        session = self._preference_session()
        stored = cast_for_store(value, self._cast_for(preference))
        saved = self._find_preference(preference)

        if saved is None:
            session.add(
                Preference(
                    preference=preference,
                    value=stored,
                    preferable_id=self.id,
                    preferable_type=self.get_preference_owner_type(),
                )
            )
            session.flush()
            # The row was added without loading the collection.
            session.expire(self, ["preferences"])
            logger.info("Created preference %s for %s", preference, self._owner_label())
        else:
            saved.value = stored
            session.flush()
            logger.info("Updated preference %s for %s", preference, self._owner_label())

        return self

    def set_preferences(
        self, preferences: Mapping[str, Any] | Iterable[tuple[str, Any]] = ()
    ):
        """Set multiple preference values, one at a time and in order."""
        items = preferences.items() if isinstance(preferences, Mapping) else preferences
        for preference, value in items:
            self.set_preference(preference, value)

        return self

    def clear_preference(self, preference: str):
        """Delete one preference. Missing preferences are ignored."""
        deleted = (
            self.preference_query()
            .filter(Preference.preference == preference)
            .delete(synchronize_session="fetch")
        )
        self._after_delete(deleted)
        return self

    def clear_preferences(self, preferences: Iterable[str] = ()):
        """Delete many preferences in one statement."""
        names = list(preferences)
        deleted = (
            self.preference_query()
            .filter(Preference.preference.in_(names))
            .delete(synchronize_session="fetch")
        )
        self._after_delete(deleted)
        return self

    def clear_all_preferences(self):
        """Delete all preferences."""
        deleted = self.preference_query().delete(synchronize_session="fetch")
        self._after_delete(deleted)
        return self

    def _find_preference(self, preference: str) -> Preference | None:
        return (
            self.preference_query()
            .filter(Preference.preference == preference)
            .order_by(Preference.id)
            .first()
        )

    def _cast_for(self, preference: str) -> str | None:
        return (self.preference_casts or {}).get(preference)

    def _preference_session(self) -> Session:
        session = object_session(self)
        if session is None:
            raise DetachedInstanceError(
                f"{type(self).__name__} is not bound to a Session; "
                "preferences cannot be loaded or saved"
            )
        if self.id is None:
            session.flush()
        return session

    def _after_delete(self, deleted: int) -> None:
        # Bulk deletes bypass the loaded collection; reload it on next access.
        self._preference_session().expire(self, ["preferences"])
        if deleted:
            logger.info("Cleared %d preference(s) for %s", deleted, self._owner_label())

    def _owner_label(self) -> str:
        return f"{self.get_preference_owner_type()}:{self.id}"


@event.listens_for(HasPreferences, "mapper_configured", propagate=True)
def _setup_preferences(mapper, class_):
    """Attach the polymorphic preference relationships to an owning model."""
    if mapper.has_property("preferences"):
        # Inherited from a mapped parent that already set it up.
        return

    owner_type = class_.get_preference_owner_type()
    owner_relationship = _claim_owner_relationship(owner_type, class_)

    class_.preferences = relationship(
        Preference,
        primaryjoin=and_(
            class_.id == foreign(remote(Preference.preferable_id)),
            Preference.preferable_type == owner_type,
        ),
        order_by=Preference.id,
        overlaps="preferences",
    )
    setattr(
        Preference,
        owner_relationship,
        relationship(
            class_,
            primaryjoin=remote(class_.id) == foreign(Preference.preferable_id),
            viewonly=True,
        ),
    )
    PREFERABLE_RELATIONSHIPS[owner_type] = owner_relationship

    @event.listens_for(class_.preferences, "append")
    def _set_owner_type(target, value, initiator):
        value.preferable_type = owner_type


def owner_relationship_name(owner_type: str) -> str:
    """Attribute name on Preference for the owners of one discriminator."""
    return "preferable_" + re.sub(r"\W", "_", owner_type).lower()


def _claim_owner_relationship(owner_type: str, class_: type) -> str:
    """Reserve the Preference-side relationship for ``class_``.

    Raises ArgumentError when another owning class already uses the same
    discriminator (or one that maps to the same attribute name).
    """
    name = owner_relationship_name(owner_type)
    claimed = _OWNER_CLASSES.setdefault(name, class_)
    if claimed is not class_:
        raise ArgumentError(
            f"Preference owner type {owner_type!r} of {class_.__module__}."
            f"{class_.__qualname__} clashes with {claimed.__module__}."
            f"{claimed.__qualname__}; set preference_owner_type on one of them"
        )
    return name
