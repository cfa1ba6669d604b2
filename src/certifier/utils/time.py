from datetime import datetime, timezone


def get_utc_time() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
