"""Helpers shared by the Supabase repositories."""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import date, datetime
from enum import Enum
from uuid import UUID

import httpx
from postgrest.exceptions import APIError

from school_meals.domain.errors import PersistenceError


def parse_record_id(raw: object) -> str | None:
    """Return a normalized record id, or None when raw is not a UUID."""
    if isinstance(raw, UUID):
        return str(raw)
    try:
        return str(UUID(str(raw)))
    except ValueError:
        return None


def parse_datetime(raw: object) -> datetime | None:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def parse_date(raw: object) -> date | None:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str) and raw:
        return date.fromisoformat(raw[:10])
    return None


def to_row_value(value: object) -> object:
    """Convert a domain value into something PostgREST can encode."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime | date):
        return value.isoformat()
    return value


def to_row(payload: Mapping[str, object]) -> dict[str, object]:
    return {key: to_row_value(value) for key, value in payload.items()}


def like_pattern(text: str) -> str:
    """Return an ILIKE substring pattern with wildcards in text escaped."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Wrap Supabase and transport failures in PersistenceError."""
    try:
        yield
    except (APIError, httpx.HTTPError) as exc:
        raise PersistenceError(f"Failed to {action}: {exc}") from exc
