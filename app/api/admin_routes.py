from fastapi import APIRouter, Depends, HTTPException, Header
from app.api.schemas import LinkSnapshot
from app.core.verifier import Outcome
from app.settings import settings
from app.store.link_repo import get_link_store
from app.utils.time import now_utc
import app.observability.metrics as metrics

router = APIRouter(prefix="/admin", tags=["admin"])

def require_admin(x_admin_key: str = Header(default="", alias="x-admin-key")):
    if not settings.ADMIN_RBAC_ENABLED:
        return
    # Secure default: if enabled but no key configured, reject all.
    if not settings.ADMIN_API_KEY:
        raise HTTPException(status_code=403, detail="Admin access disabled (no key configured)")
    if x_admin_key != settings.ADMIN_API_KEY:
        raise HTTPException(status_code=403, detail="Invalid admin key")

@router.get("/links/{link_id}", response_model=LinkSnapshot)
def get_link_snapshot(link_id: str, _=Depends(require_admin), store=Depends(get_link_store)):
    """Redacted link view for support staff. The token is never returned."""
    link = store.get_link(link_id)
    if link is None:
        raise HTTPException(status_code=404, detail="Unknown secure link")
    return LinkSnapshot(
        id=link.id,
        status=link.status,
        expires_at=link.expires_at.isoformat(),
        expired=link.expires_at < now_utc(),
        staff_creator_email=link.staff_creator_email,
    )

@router.get("/metrics")
def get_metrics(_=Depends(require_admin)):
    """Verification outcome counters backed by Redis."""
    return metrics.get_verification_snapshot([o.value for o in Outcome])
