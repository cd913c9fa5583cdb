from datetime import date, datetime, timedelta, timezone

from ..config.config import settings


def school_timezone() -> timezone:
    return timezone(timedelta(hours=settings.APP_UTC_OFFSET_HOURS))


def local_now() -> datetime:
    """Current time in the school's fixed UTC offset."""
    return datetime.now(school_timezone())


def local_today() -> date:
    return local_now().date()
