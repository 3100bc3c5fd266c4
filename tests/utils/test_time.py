import pytest
from datetime import datetime, timezone, timedelta
from app.utils.time import parse_timestamp, now_utc

REF = datetime(2026, 10, 17, 8, 0, tzinfo=timezone.utc)

@pytest.mark.parametrize("raw", [
    "2026-10-17T08:00:00Z",
    "2026-10-17T08:00:00+00:00",
    "2026-10-17T10:00:00+02:00",
    "2026-10-17T08:00:00",          # naive -> UTC
    int(REF.timestamp()),           # epoch seconds
    int(REF.timestamp() * 1000),    # epoch ms
    REF.replace(tzinfo=None),
])
def test_parse_timestamp_variants(raw):
    dt = parse_timestamp(raw)
    assert dt == REF
    assert dt.tzinfo == timezone.utc

@pytest.mark.parametrize("raw", [None, "", "   ", "soon", True, [2026]])
def test_parse_timestamp_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_timestamp(raw)

def test_now_utc_is_aware():
    n = now_utc()
    assert n.tzinfo is not None
    assert abs(n - datetime.now(timezone.utc)) < timedelta(seconds=5)
