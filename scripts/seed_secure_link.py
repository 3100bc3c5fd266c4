"""
Seed one pending secure link into Redis for local/dev manual testing of
POST /api/verify-secure-link. Links are normally created by an external
process; this is only a developer convenience.

Usage: python -m scripts.seed_secure_link [token] [email]
"""
import json
import os
import sys
from datetime import datetime, timedelta, timezone
from redis import Redis

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
PREFIX = os.getenv("LINK_KEY_PREFIX", "secure_link:")

def build_link(token: str, email: str, ttl_hours: int = 24) -> dict:
    return {
        "id": f"dev-{token}",
        "token": token,
        "status": "pending",
        "expires_at": (datetime.now(timezone.utc) + timedelta(hours=ttl_hours)).isoformat(),
        "customer_email": email,
        "customer_name": "Dev Customer",
        "staff_creator_email": "staff@example.com",
    }

def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    token = argv[0] if len(argv) > 0 else "dev-token"
    email = argv[1] if len(argv) > 1 else "customer@example.com"

    link = build_link(token, email)
    r = Redis.from_url(REDIS_URL, decode_responses=True)
    r.set(f"{PREFIX}{link['id']}", json.dumps(link))
    r.sadd(f"{PREFIX}token:{token}", link["id"])
    print(f"OK: seeded {link['id']} (token={token}) into {REDIS_URL}")
    return link

if __name__ == "__main__":
    main()
