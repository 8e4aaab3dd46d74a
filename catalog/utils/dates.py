# catalog/utils/dates.py
from datetime import datetime, timedelta, timezone

def utcnow() -> datetime:
    """Naive UTC now; every timestamp column stores naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def parse_iso8601(s):
    if s is None:
        return None
    if isinstance(s, datetime):
        dt = s
    else:
        s = str(s).strip()
        if not s:
            return None
        # support trailing 'Z' (UTC)
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
    if dt.tzinfo:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt

def add_years(dt: datetime, years: int) -> datetime:
    try:
        return dt.replace(year=dt.year + years)
    except ValueError:
        # Feb 29 rolls over to Mar 1
        return dt.replace(year=dt.year + years, month=3, day=1)

def iso(dt):
    return dt.isoformat() if dt else None

def one_year_from(dt: datetime) -> datetime:
    return dt + timedelta(days=365)
