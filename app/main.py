from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from app.api.routes import router
from app.api.admin_routes import router as admin_router
from app.core.verifier import internal_error
from app.observability.logging import log
from app.settings import settings

app = FastAPI(title="Secure Link Verifier API")

# The verification page is usually served from another origin; restrict via env in prod.
origins = [x.strip() for x in settings.CORS_ORIGINS.split(",") if x.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
app.include_router(admin_router)


@app.get("/")
def root():
    return {
        "status": "ok",
        "message": "Secure link verifier is running. Use /health and POST /api/verify-secure-link."
    }


@app.get("/health")
def health():
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Catch-all: anything unexpected becomes the generic 500 body.
# Details go to the log only, never to the caller.
# ---------------------------------------------------------------------------
@app.exception_handler(Exception)
async def universal_exception_handler(request: Request, exc: Exception):
    log(event="unhandled_exception", path=request.url.path, error=type(exc).__name__, detail=str(exc))
    result = internal_error()
    return JSONResponse(status_code=result.status_code, content=result.to_body())


log(
    event="boot",
    linkStoreBackend=settings.LINK_STORE_BACKEND,
    metricsEnabled=bool(settings.METRICS_ENABLED),
    apiKeyRequired=bool(settings.API_KEY),
)
