from unittest.mock import patch, MagicMock
from app.observability import metrics

@patch("app.observability.metrics.get_redis")
def test_increment_outcome(mock_get_redis):
    r = MagicMock()
    mock_get_redis.return_value = r
    metrics.increment_outcome("expired")
    r.incr.assert_called_once_with("metrics:verify:outcome:expired", 1)

@patch("app.observability.metrics.get_redis")
def test_record_latency_is_capped(mock_get_redis):
    r = MagicMock()
    mock_get_redis.return_value = r
    with patch.object(metrics.settings, "METRICS_MAX_SAMPLES", 10):
        metrics.record_verify_latency(42)
    r.lpush.assert_called_once_with(metrics.K_VERIFY_LAT, 42)
    r.ltrim.assert_called_once_with(metrics.K_VERIFY_LAT, 0, 9)

@patch("app.observability.metrics.get_redis")
def test_snapshot(mock_get_redis):
    r = MagicMock()
    mock_get_redis.return_value = r
    counts = {"metrics:verify:outcome:verified": "3", "metrics:verify:outcome:expired": "1"}
    r.get.side_effect = lambda k: counts.get(k)
    r.lrange.return_value = ["10", "20", "30", "40", "bogus"]
    out = metrics.get_verification_snapshot(["verified", "expired", "not_found"])
    assert out["outcomes"] == {"verified": 3, "expired": 1, "not_found": 0}
    assert out["total"] == 4
    assert out["success_rate"] == 75.0
    assert out["p50_latency_ms"] == 20.0
    assert out["p95_latency_ms"] == 40.0

@patch("app.observability.metrics.get_redis")
def test_snapshot_first_boot(mock_get_redis):
    r = MagicMock()
    mock_get_redis.return_value = r
    r.get.return_value = None
    r.lrange.return_value = []
    out = metrics.get_verification_snapshot(["verified"])
    assert out["total"] == 0
    assert out["success_rate"] == 0.0
    assert out["p95_latency_ms"] == 0.0
