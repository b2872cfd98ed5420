from datetime import date, datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def month_key(value) -> str:
    if isinstance(value, datetime):
        value = value.date()
    return "{:04d}-{:02d}".format(value.year, value.month)


def last_months(count: int, today: date | None = None) -> list[str]:
    """Labels (YYYY-MM) of the last ``count`` months, oldest first, ending at ``today``."""
    if today is None:
        today = utcnow().date()
    year, month = today.year, today.month
    labels = []
    for _ in range(max(0, count)):
        labels.append("{:04d}-{:02d}".format(year, month))
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    labels.reverse()
    return labels
