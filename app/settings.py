import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    API_KEY: str = os.getenv("API_KEY", "")

    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    REDIS_SOCKET_TIMEOUT_SEC: float = float(os.getenv("REDIS_SOCKET_TIMEOUT_SEC", "5"))

    # Link store backend: "redis" (default) or "memory".
    # "memory" is for tests and local dev only: it starts empty, is per-process,
    # and nothing outside the process can seed it (every lookup answers 404).
    LINK_STORE_BACKEND: str = os.getenv("LINK_STORE_BACKEND", "redis").lower()
    LINK_KEY_PREFIX: str = os.getenv("LINK_KEY_PREFIX", "secure_link:")

    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Observability
    METRICS_ENABLED: bool = os.getenv("METRICS_ENABLED", "true").lower() == "true"
    METRICS_MAX_SAMPLES: int = int(os.getenv("METRICS_MAX_SAMPLES", "500"))

    # Security & Privacy
    ENABLE_PII_REDACTION: bool = os.getenv("ENABLE_PII_REDACTION", "true").lower() == "true"
    ADMIN_RBAC_ENABLED: bool = os.getenv("ADMIN_RBAC_ENABLED", "true").lower() == "true"
    # Used for rudimentary RBAC if enabled
    ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")

settings = Settings()
