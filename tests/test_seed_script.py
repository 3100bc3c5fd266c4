import json
from unittest.mock import patch, MagicMock
from scripts.seed_secure_link import main, PREFIX
from app.store.link_repo import _coerce_link_data

@patch("scripts.seed_secure_link.Redis")
def test_seed_secure_link(mock_redis_cls):
    mock_redis = MagicMock()
    mock_redis_cls.from_url.return_value = mock_redis

    link = main(["tok-dev", "dev@example.com"])

    key, raw = mock_redis.set.call_args.args
    assert key == f"{PREFIX}dev-tok-dev"
    mock_redis.sadd.assert_called_once_with(f"{PREFIX}token:tok-dev", "dev-tok-dev")

    # Seeded documents must load through the store's own reader
    loaded = _coerce_link_data(json.loads(raw))
    assert loaded.status == "pending"
    assert loaded.customer_email == "dev@example.com"
    assert link["token"] == "tok-dev"
