"""Cast pipeline between stored preference strings and typed values.

Preferences are stored as plain strings. An owning model may declare a cast
tag per preference name (``preference_casts``); the tag decides how a stored
string is turned back into a typed value on read, and how a typed value is
flattened into a string on write.

Supported tags:

    int, integer            -> int
    real, float, double     -> float
    string                  -> str (unchanged)
    bool, boolean           -> bool
    object                  -> types.SimpleNamespace (decoded JSON)
    array, json             -> dict / list (decoded JSON)
    collection              -> PreferenceCollection (decoded JSON list)
    date, datetime          -> timezone-aware UTC datetime
    timestamp               -> int (Unix epoch seconds)
    decimal:<n>             -> str with exactly <n> fractional digits

Any other tag leaves the value untouched.
"""

import json
import re
from collections import UserList
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, localcontext
from types import SimpleNamespace
from typing import Any

# Canonical storage format for date-like values (always UTC).
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

INT_TAGS = frozenset({"int", "integer"})
FLOAT_TAGS = frozenset({"real", "float", "double"})
BOOL_TAGS = frozenset({"bool", "boolean"})
JSON_TAGS = frozenset({"object", "array", "json", "collection"})
DATE_TAGS = frozenset({"date", "datetime"})

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")
_EPOCH = re.compile(r"^[+-]?\d+$")
_SIMPLE_DATE = re.compile(r"^\d{4}-\d{1,2}-\d{1,2}$")
_DECIMAL_TAG = re.compile(r"^decimal:(\d+)$")


class PreferenceCollection(UserList):
    """Sequence container returned for ``collection``-cast preferences."""

    def __repr__(self) -> str:
        return f"PreferenceCollection({self.data!r})"


def normalize_tag(tag: str | None) -> str | None:
    """Lower-case and trim a cast tag; ``None`` stays ``None``."""
    if tag is None:
        return None
    return tag.strip().lower()


def cast_from_store(value: Any, tag: str | None) -> Any:
    """Convert a stored (or default) value into its typed form.

    ``None`` and untagged values are returned unchanged. Parse errors from
    malformed stored text (bad JSON, bad dates) propagate to the caller.
    """
    tag = normalize_tag(tag)
    if value is None or tag is None:
        return value

    if tag in INT_TAGS:
        return as_int(value)
    if tag in FLOAT_TAGS:
        return as_float(value)
    if tag == "string":
        return value
    if tag in BOOL_TAGS:
        return as_bool(value)
    if tag == "object":
        return from_json(value, as_object=True)
    if tag in ("array", "json"):
        return from_json(value)
    if tag == "collection":
        return as_collection(value)
    if tag in DATE_TAGS:
        return as_datetime(value)
    if tag == "timestamp":
        return as_timestamp(value)

    match = _DECIMAL_TAG.match(tag)
    if match:
        return as_decimal(value, int(match.group(1)))

    return value


def cast_for_store(value: Any, tag: str | None) -> Any:
    """Flatten a typed value into the string stored in the preferences table."""
    if value is None:
        return None

    tag = normalize_tag(tag)
    if tag in JSON_TAGS or _is_structured(value):
        return as_json(value)
    if isinstance(value, (datetime, date)):
        return from_datetime(value)
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def as_int(value: Any) -> int:
    """Integer conversion that truncates instead of rejecting trailing junk."""
    if isinstance(value, (int, float, Decimal)):
        return int(value)
    text = str(value)
    try:
        return int(text)
    except ValueError:
        match = _LEADING_INT.match(text)
        return int(match.group(1)) if match else 0


def as_float(value: Any) -> float:
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    text = str(value)
    try:
        return float(text)
    except ValueError:
        match = _LEADING_FLOAT.match(text)
        return float(match.group(1)) if match else 0.0


def as_bool(value: Any) -> bool:
    """Truthiness of a stored value: "0", "", "false" and zero are False."""
    if isinstance(value, (bytes, bytearray)):
        value = value.decode()
    if not isinstance(value, str):
        return bool(value)

    text = value.strip().lower()
    if text in ("", "0", "false"):
        return False
    if text == "true":
        return True
    try:
        return float(text) != 0
    except ValueError:
        return True


def from_json(value: Any, as_object: bool = False) -> Any:
    """Decode stored JSON text; values that are already decoded pass through."""
    if not isinstance(value, (str, bytes, bytearray)):
        return value
    if as_object:
        return json.loads(value, object_hook=lambda d: SimpleNamespace(**d))
    return json.loads(value)


def as_collection(value: Any) -> PreferenceCollection:
    decoded = from_json(value)
    if isinstance(decoded, PreferenceCollection):
        return decoded
    if decoded is None:
        return PreferenceCollection()
    if isinstance(decoded, (list, tuple, UserList)):
        return PreferenceCollection(decoded)
    return PreferenceCollection([decoded])


def as_datetime(value: Any) -> datetime:
    """Parse a stored date into a timezone-aware UTC datetime.

    Accepts datetime/date objects, Unix epoch numbers, ``YYYY-MM-DD``,
    the canonical ``YYYY-MM-DD HH:MM:SS`` format and ISO-8601 strings.
    Naive values are taken to be UTC.
    """
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)

    text = str(value).strip()
    if _EPOCH.match(text):
        return datetime.fromtimestamp(int(text), tz=timezone.utc)
    if _SIMPLE_DATE.match(text):
        return datetime.strptime(text, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    try:
        return datetime.strptime(text, DATE_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return _as_utc(datetime.fromisoformat(text))


def as_timestamp(value: Any) -> int:
    return int(as_datetime(value).timestamp())


def as_decimal(value: Any, places: int) -> str:
    """Fixed-point string with ``places`` fractional digits, rounding half up."""
    number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    quantum = Decimal(1).scaleb(-places)
    # Room for every integer digit, the fraction and a rounding carry.
    digits = max(number.adjusted() + 1, 1) + places + 1
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, digits)
        return format(number.quantize(quantum, rounding=ROUND_HALF_UP), "f")


def from_datetime(value: datetime | date) -> str:
    """Render a date-like value in the canonical storage format."""
    return as_datetime(value).strftime(DATE_FORMAT)


def as_json(value: Any) -> str:
    return json.dumps(value, default=_json_default)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _is_structured(value: Any) -> bool:
    return isinstance(value, (dict, list, tuple, set, SimpleNamespace, UserList))


def _json_default(obj: Any) -> Any:
    """Encode the non-native types a preference value may contain."""
    if isinstance(obj, SimpleNamespace):
        return vars(obj)
    if isinstance(obj, UserList):
        return obj.data
    if isinstance(obj, (datetime, date)):
        return from_datetime(obj)
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
