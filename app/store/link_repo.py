import json
import threading
from dataclasses import fields as dc_fields, replace
from typing import Dict, List, Optional, Protocol

from redis.exceptions import RedisError

from app.core.errors import LinkStoreError
from app.core.link_states import PENDING, VERIFIED
from app.observability.logging import log
from app.settings import settings
from app.store.models import SecureLink
from app.store.redis_conn import get_redis
from app.utils.time import parse_timestamp

REQUIRED_FIELDS = ("id", "token", "expires_at")

# Atomic compare-and-set on the JSON document: only pending -> verified.
# Returns -1 if the record is gone, 0 if it was not pending, 1 on transition.
_MARK_VERIFIED_LUA = """
local raw = redis.call("GET", KEYS[1])
if not raw then
    return -1
end
local doc = cjson.decode(raw)
if doc["status"] ~= ARGV[1] then
    return 0
end
doc["status"] = ARGV[2]
redis.call("SET", KEYS[1], cjson.encode(doc))
return 1
"""


class LinkStore(Protocol):
    """Capability interface the verifier depends on."""

    def find_by_token(self, token: str) -> List[SecureLink]:
        ...

    def mark_verified(self, link_id: str) -> bool:
        """Transition pending -> verified. False if the link was no longer pending."""
        ...


def _coerce_link_data(data: dict) -> SecureLink:
    """
    Turn a stored document into a SecureLink.
    Undeclared fields are dropped; missing required fields or an unparseable
    expires_at make the record malformed.
    """
    if not isinstance(data, dict):
        raise LinkStoreError("secure link record is not an object")

    allowed = {f.name for f in dc_fields(SecureLink)}
    dropped = sorted(k for k in data if k not in allowed)
    if dropped:
        log(event="link_record_dropped_fields", linkId=str(data.get("id") or ""), fields=dropped)
    kwargs = {k: v for k, v in data.items() if k in allowed}

    missing = [k for k in REQUIRED_FIELDS if not kwargs.get(k)]
    if missing:
        raise LinkStoreError(f"secure link record missing fields: {', '.join(missing)}")

    try:
        kwargs["expires_at"] = parse_timestamp(kwargs["expires_at"])
    except ValueError as exc:
        raise LinkStoreError("secure link record has an invalid expires_at") from exc

    kwargs["id"] = str(kwargs["id"])
    # A record without a status is not verifiable; never default it to pending
    kwargs["status"] = str(kwargs.get("status") or "")
    for k in ("customer_email", "customer_name", "staff_creator_email"):
        kwargs[k] = str(kwargs.get(k) or "")
    return SecureLink(**kwargs)


class RedisLinkStore:
    """
    Links live as JSON documents under {prefix}{id}; a set at
    {prefix}token:{token} indexes link ids by token.
    """

    def __init__(self, redis=None, prefix: Optional[str] = None):
        self._redis = redis
        self.prefix = prefix if prefix is not None else settings.LINK_KEY_PREFIX

    @property
    def redis(self):
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    def _link_key(self, link_id: str) -> str:
        return f"{self.prefix}{link_id}"

    def _token_key(self, token: str) -> str:
        return f"{self.prefix}token:{token}"

    def _load(self, raw: str) -> SecureLink:
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise LinkStoreError("secure link record is not valid JSON") from exc
        return _coerce_link_data(data)

    def find_by_token(self, token: str) -> List[SecureLink]:
        try:
            ids = sorted(self.redis.smembers(self._token_key(token)) or [])
            raws = [self.redis.get(self._link_key(i)) for i in ids]
        except RedisError as exc:
            raise LinkStoreError("secure link lookup failed") from exc

        links: List[SecureLink] = []
        for link_id, raw in zip(ids, raws):
            if not raw:
                # Stale index entry (record deleted out of band)
                log(event="link_index_stale", linkId=link_id)
                continue
            link = self._load(raw)
            if link.token == token:
                links.append(link)
        return links

    def get_link(self, link_id: str) -> Optional[SecureLink]:
        try:
            raw = self.redis.get(self._link_key(link_id))
        except RedisError as exc:
            raise LinkStoreError("secure link read failed") from exc
        return self._load(raw) if raw else None

    def mark_verified(self, link_id: str) -> bool:
        try:
            res = self.redis.eval(_MARK_VERIFIED_LUA, 1, self._link_key(link_id), PENDING, VERIFIED)
        except RedisError as exc:
            raise LinkStoreError("secure link update failed") from exc
        if int(res) < 0:
            raise LinkStoreError(f"secure link {link_id} vanished before commit")
        return int(res) == 1

    def save_link(self, link: SecureLink) -> None:
        try:
            pipe = self.redis.pipeline()
            pipe.set(self._link_key(link.id), json.dumps(link.to_record()))
            pipe.sadd(self._token_key(link.token), link.id)
            pipe.execute()
        except RedisError as exc:
            raise LinkStoreError("secure link write failed") from exc


class MemoryLinkStore:
    """In-process store; the lock makes mark_verified a compare-and-set."""

    def __init__(self, links: Optional[List[SecureLink]] = None):
        self._links: Dict[str, SecureLink] = {}
        self._lock = threading.Lock()
        for link in links or []:
            self.save_link(link)

    def find_by_token(self, token: str) -> List[SecureLink]:
        with self._lock:
            return [link for _, link in sorted(self._links.items()) if link.token == token]

    def get_link(self, link_id: str) -> Optional[SecureLink]:
        with self._lock:
            return self._links.get(link_id)

    def mark_verified(self, link_id: str) -> bool:
        with self._lock:
            link = self._links.get(link_id)
            if link is None:
                raise LinkStoreError(f"secure link {link_id} vanished before commit")
            if link.status != PENDING:
                return False
            self._links[link_id] = replace(link, status=VERIFIED)
            return True

    def save_link(self, link: SecureLink) -> None:
        # Same expiry normalization as the Redis read path (aware UTC)
        try:
            link = replace(link, expires_at=parse_timestamp(link.expires_at))
        except ValueError as exc:
            raise LinkStoreError("secure link record has an invalid expires_at") from exc
        with self._lock:
            self._links[link.id] = link


_memory_store: Optional[MemoryLinkStore] = None


def get_link_store() -> LinkStore:
    """Backend selected by LINK_STORE_BACKEND; the memory store is process-wide."""
    global _memory_store
    if settings.LINK_STORE_BACKEND == "memory":
        if _memory_store is None:
            _memory_store = MemoryLinkStore()
        return _memory_store
    return RedisLinkStore()
