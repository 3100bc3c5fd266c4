"""
Verification Metrics
--------------------
Redis-backed counters per verification outcome plus a capped latency list,
summarized by get_verification_snapshot() for /admin/metrics. Missing keys
(first boot) read as zero.
"""
from __future__ import annotations
import time
from typing import List, Tuple
from app.store.redis_conn import get_redis
from app.settings import settings

K_OUTCOME_PREFIX = "metrics:verify:outcome:"   # INCR per outcome value
K_VERIFY_LAT = "metrics:verify:latencies"      # LPUSH ms

def _max_samples() -> int:
    try:
        return max(1, int(settings.METRICS_MAX_SAMPLES))
    except (TypeError, ValueError):
        return 500

def _percentile(data: List[float], p: float) -> float:
    """Deterministic percentile (nearest-rank on sorted data)."""
    if not data:
        return 0.0
    d = sorted(data)
    k = max(1, int(round(p * len(d))))
    return float(d[k - 1])

def increment_outcome(outcome: str) -> None:
    r = get_redis()
    r.incr(f"{K_OUTCOME_PREFIX}{outcome}", 1)

def record_verify_latency(ms: int) -> None:
    r = get_redis()
    r.lpush(K_VERIFY_LAT, int(ms))
    r.ltrim(K_VERIFY_LAT, 0, _max_samples() - 1)

def _read_latency_list(key: str) -> List[float]:
    r = get_redis()
    out: List[float] = []
    for x in r.lrange(key, 0, _max_samples() - 1) or []:
        try:
            out.append(float(x))
        except (TypeError, ValueError):
            continue
    return out

def _p50_p95(latencies_ms: List[float]) -> Tuple[float, float]:
    if not latencies_ms:
        return 0.0, 0.0
    return _percentile(latencies_ms, 0.50), _percentile(latencies_ms, 0.95)

def get_verification_snapshot(outcomes: List[str]) -> dict:
    """
    Fields:
      - outcomes: {outcome: count}
      - total, success_rate (percent of all attempts that verified)
      - p50_latency_ms, p95_latency_ms
    """
    r = get_redis()
    counts = {o: int(r.get(f"{K_OUTCOME_PREFIX}{o}") or 0) for o in outcomes}
    total = sum(counts.values())
    ok = counts.get("verified", 0)
    p50, p95 = _p50_p95(_read_latency_list(K_VERIFY_LAT))
    return {
        "outcomes": counts,
        "total": total,
        "success_rate": round((ok / total) * 100.0, 3) if total else 0.0,
        "p50_latency_ms": round(p50, 3),
        "p95_latency_ms": round(p95, 3),
        "snapshot_at": int(time.time()),
    }
