from datetime import datetime, timezone

def now_utc() -> datetime:
    return datetime.now(timezone.utc)

def parse_timestamp(ts) -> datetime:
    """
    Normalize a stored timestamp to an aware UTC datetime.
    Accepts:
    - datetime: naive values are treated as UTC
    - int/float: epoch seconds (or milliseconds if suspiciously large)
    - ISO-8601 string: parsed via datetime.fromisoformat (supports trailing 'Z')
    Raises ValueError for anything else; an expiry must never silently default.
    """
    if isinstance(ts, bool) or ts is None:
        raise ValueError(f"unsupported timestamp: {ts!r}")
    if isinstance(ts, datetime):
        dt = ts
    elif isinstance(ts, (int, float)):
        v = float(ts)
        # Heuristic: values >= 10^12 are epoch ms
        if v >= 10**12:
            v = v / 1000.0
        dt = datetime.fromtimestamp(v, tz=timezone.utc)
    elif isinstance(ts, str):
        s = ts.strip()
        if not s:
            raise ValueError("empty timestamp")
        # Support Zulu time
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        dt = datetime.fromisoformat(s)
    else:
        raise ValueError(f"unsupported timestamp: {ts!r}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
