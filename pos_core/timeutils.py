from datetime import date, datetime, timedelta, timezone, tzinfo

NANOS_PER_SECOND = 1_000_000_000


def dt_from_nanos(ts: int, tz: tzinfo = timezone.utc) -> datetime:
    """Наносекунды с эпохи → aware datetime в tz (без округления через float)"""
    seconds, nanos = divmod(ts, NANOS_PER_SECOND)
    return datetime.fromtimestamp(seconds, tz=tz).replace(microsecond=nanos // 1000)


def nanos_from_dt(dt: datetime) -> int:
    """Обратное преобразование, dt должен быть aware"""
    delta = dt - datetime(1970, 1, 1, tzinfo=timezone.utc)
    return (
        delta.days * 86_400 + delta.seconds
    ) * NANOS_PER_SECOND + delta.microseconds * 1000


def start_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(dt: datetime) -> datetime:
    """Неделя ISO, начинается с понедельника"""
    return start_of_day(dt) - timedelta(days=dt.weekday())


def start_of_month(dt: datetime) -> datetime:
    return start_of_day(dt).replace(day=1)


def local_midnight(day: date, tz: tzinfo = timezone.utc) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=tz)
