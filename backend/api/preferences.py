"""User preferences API endpoints."""

import json
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from api.helpers import get_or_404
from database import get_db
from models import User
from schemas.preference import PreferenceResponse, PreferenceSet, PreferencesSet
from services.preference_casts import as_json, cast_for_store, cast_from_store

router = APIRouter(prefix="/api/users/{user_id}/preferences", tags=["preferences"])

_NAME_MAX_LENGTH = 255


def _validate_name(name: str) -> None:
    """Validate a preference name. Raises HTTPException on invalid names."""
    if not name.strip():
        raise HTTPException(status_code=422, detail="Preference name must not be blank")
    if len(name) > _NAME_MAX_LENGTH:
        raise HTTPException(
            status_code=422,
            detail=f"Preference name must be at most {_NAME_MAX_LENGTH} characters",
        )


def _get_user(db: Session, user_id: int) -> User:
    return get_or_404(db, User, user_id, detail=f"User {user_id} not found")


def _validate_value(name: str, value: Any) -> None:
    """Reject values that cannot be stored, or read back under their cast."""
    if value is None:
        raise HTTPException(status_code=422, detail=f"Preference {name!r} must not be null")
    tag = User.preference_casts.get(name)
    try:
        cast_from_store(cast_for_store(value, tag), tag)
    except (TypeError, ValueError, ArithmeticError) as e:
        raise HTTPException(
            status_code=422,
            detail=f"Invalid value for preference {name!r}: {e}",
        ) from e


def _jsonable(value: Any) -> Any:
    """Flatten a cast value (namespaces, collections, datetimes) to plain JSON."""
    return json.loads(as_json(value))


def _to_response(user: User, name: str, default: Any = None) -> PreferenceResponse:
    return PreferenceResponse(
        preference=name,
        value=_jsonable(user.get_preference(name, default)),
    )


@router.get("", response_model=list[dict[str, Any]])
def list_preferences(user_id: int, db: Session = Depends(get_db)):
    """List the stored preference records, minus hidden attributes."""
    user = _get_user(db, user_id)
    return [pref.to_dict() for pref in user.preferences]


@router.get("/{name}", response_model=PreferenceResponse)
def get_preference(
    user_id: int,
    name: str,
    default: str | None = None,
    db: Session = Depends(get_db),
):
    """Get a single preference, falling back to the model or query default."""
    _validate_name(name)
    user = _get_user(db, user_id)
    return _to_response(user, name, default)


@router.put("", response_model=dict[str, Any])
def set_preferences(user_id: int, body: PreferencesSet, db: Session = Depends(get_db)):
    """Set several preferences in one request."""
    for name, value in body.preferences.items():
        _validate_name(name)
        _validate_value(name, value)
    user = _get_user(db, user_id)
    user.set_preferences(body.preferences)
    db.commit()
    return {name: _jsonable(user.get_preference(name)) for name in body.preferences}


@router.put("/{name}", response_model=PreferenceResponse)
def set_preference(user_id: int, name: str, body: PreferenceSet, db: Session = Depends(get_db)):
    """Create or update a preference (idempotent upsert)."""
    _validate_name(name)
    _validate_value(name, body.value)
    user = _get_user(db, user_id)
    user.set_preference(name, body.value)
    db.commit()
    return _to_response(user, name)


@router.delete("/{name}", status_code=204)
def clear_preference(user_id: int, name: str, db: Session = Depends(get_db)):
    """Delete one preference. Deleting a missing preference is not an error."""
    _validate_name(name)
    user = _get_user(db, user_id)
    user.clear_preference(name)
    db.commit()


@router.delete("", status_code=204)
def clear_preferences(
    user_id: int,
    names: list[str] = Query(default=[], alias="name"),
    db: Session = Depends(get_db),
):
    """Delete the named preferences, or all of them when no name is given."""
    user = _get_user(db, user_id)
    if names:
        user.clear_preferences(names)
    else:
        user.clear_all_preferences()
    db.commit()
