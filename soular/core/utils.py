"""
Small helpers shared by the module services
"""

import re
from datetime import datetime, timezone
from typing import Any, Optional

_UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)

# Characters with meaning in the PostgREST or=() filter grammar
_FILTER_RESERVED_RE = re.compile(r"[,()]")

UNIQUE_VIOLATION = "23505"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def slugify(value: str) -> str:
    """Lower-case, collapse runs of non-alphanumerics into '-', strip leading/trailing '-'."""
    slug = re.sub(r"[^a-z0-9]+", "-", (value or "").lower())
    return slug.strip("-")


def is_uuid(value: str) -> bool:
    return bool(_UUID_RE.match(value or ""))


def clean_search(term: Optional[str]) -> str:
    """Trim a search term and drop characters that would break an or() filter."""
    if not term:
        return ""
    return _FILTER_RESERVED_RE.sub(" ", term).strip()


def ilike_any(columns, term: str) -> str:
    """Build an or() filter string matching term against any of the columns."""
    return ",".join(f"{column}.ilike.%{term}%" for column in columns)


def row_or_none(result: Any) -> Optional[dict]:
    """First row of a query result, or None. Handles single-row and list payloads."""
    if result is None:
        return None
    data = getattr(result, "data", None)
    if isinstance(data, list):
        return data[0] if data else None
    return data or None


def rows(result: Any) -> list:
    if result is None:
        return []
    data = getattr(result, "data", None)
    if data is None:
        return []
    if isinstance(data, list):
        return data
    return [data]


def result_count(result: Any) -> int:
    return (getattr(result, "count", None) or 0) if result is not None else 0


def is_unique_violation(exc: Exception) -> bool:
    return getattr(exc, "code", None) == UNIQUE_VIOLATION


def normalize_tags(tags: Any, limit: int = 5) -> list:
    """Keep non-empty string tags, trimmed and lower-cased, at most limit of them."""
    if not tags:
        return []
    valid = [tag for tag in tags if isinstance(tag, str) and tag.strip()]
    return [tag.strip().lower() for tag in valid[:limit]]
