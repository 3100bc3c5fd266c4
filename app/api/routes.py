import time

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from starlette.concurrency import run_in_threadpool

from app.api.auth import require_api_key
from app.api.normalize import normalize_verify_payload
from app.api.schemas import VerifyRequest, VerifyResponse
from app.core.errors import DataIntegrityError, LinkStoreError
from app.core.verifier import VerificationResult, internal_error, verify
from app.observability.logging import log
from app.settings import settings
from app.store.link_repo import LinkStore, get_link_store
import app.observability.metrics as metrics

router = APIRouter()

VERIFY_PATHS = (
    "/api/verify-secure-link",   # primary
    "/verify-secure-link",
    "/api/secure-links/verify",
)


def _record_metrics(outcome: str, latency_ms: int) -> None:
    if not settings.METRICS_ENABLED:
        return
    try:
        metrics.increment_outcome(outcome)
        metrics.record_verify_latency(latency_ms)
    except RedisError as exc:
        # Metrics never change the verification response
        log(event="metrics_write_failed", error=type(exc).__name__)


def _to_response(result: VerificationResult) -> JSONResponse:
    body = VerifyResponse.model_validate(result.to_body()).model_dump(exclude_none=True)
    return JSONResponse(status_code=result.status_code, content=body)


async def _handle_verify(request: Request, store: LinkStore) -> JSONResponse:
    """Parse the body leniently; a missing or broken body is a request without token/email."""
    try:
        payload = await request.json()
    except ValueError:
        payload = {}

    req = VerifyRequest.model_validate(normalize_verify_payload(payload))

    started = time.perf_counter()
    try:
        result = await run_in_threadpool(verify, req.token, req.email, store)
    except (LinkStoreError, DataIntegrityError) as exc:
        log(event="secure_link_verify_failed", error=type(exc).__name__, detail=str(exc))
        result = internal_error()
    latency_ms = int((time.perf_counter() - started) * 1000)

    log(
        event="secure_link_verify",
        outcome=result.outcome.value,
        linkId=result.link_id or "",
        latencyMs=latency_ms,
    )
    await run_in_threadpool(_record_metrics, result.outcome.value, latency_ms)
    return _to_response(result)


for _path in VERIFY_PATHS:
    @router.post(
        _path,
        response_model=VerifyResponse,
        dependencies=[Depends(require_api_key)],
    )
    async def verify_secure_link(request: Request, store: LinkStore = Depends(get_link_store)):  # type: ignore
        return await _handle_verify(request, store)


@router.get("/ping", dependencies=[Depends(require_api_key)])
async def ping():
    return {
        "success": True,
        "message": "Secure link verifier is running. POST {token, email} to /api/verify-secure-link.",
    }
