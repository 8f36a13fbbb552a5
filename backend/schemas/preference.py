"""Pydantic schemas for model preferences."""

from typing import Any

from pydantic import BaseModel


class PreferenceSet(BaseModel):
    """Request body for setting a preference value."""

    value: Any


class PreferencesSet(BaseModel):
    """Request body for setting several preferences at once."""

    preferences: dict[str, Any]


class PreferenceResponse(BaseModel):
    """A single preference as resolved for its owner (default and cast applied)."""

    preference: str
    value: Any
