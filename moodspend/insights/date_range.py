from datetime import date, datetime, timedelta


def to_date(value: date | datetime | str | None) -> date:
    """Coerce a date, datetime or ISO string (YYYY-MM-DD...) to a date. None is today."""
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def build_date_range(days: int, end_date: date | datetime | str | None = None) -> list[str]:
    """
    Ascending ISO date keys for the `days` calendar days ending at `end_date`.

    >>> build_date_range(3, "2024-06-17")
    ['2024-06-15', '2024-06-16', '2024-06-17']
    """
    if days <= 0:
        return []
    end = to_date(end_date)
    start = end - timedelta(days=days - 1)
    return [(start + timedelta(days=i)).isoformat() for i in range(days)]
