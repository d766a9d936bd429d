from datetime import datetime, timezone
from typing import Any, Optional


def get_utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for consistent timestamps."""
    return datetime.now(timezone.utc)


def text_or_none(value: Any) -> Optional[str]:
    """Return value when it is a non-blank string, else None."""
    if isinstance(value, str) and value.strip():
        return value
    return None
