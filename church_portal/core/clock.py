from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as an aware UTC datetime. Every stored timestamp uses this."""
    return datetime.now(timezone.utc)


def age_on(birth_date: date, today: Optional[date] = None) -> int:
    """Full years old on `today` (defaults to the current UTC date)."""
    today = today or utcnow().date()
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years
