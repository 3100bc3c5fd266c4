from dataclasses import dataclass
from datetime import datetime

from app.core.link_states import PENDING


@dataclass
class SecureLink:
    # Identity
    id: str
    token: str

    # Lifecycle
    expires_at: datetime  # always timezone-aware (UTC) once loaded
    status: str = PENDING

    # Customer of record
    customer_email: str = ""
    customer_name: str = ""

    # Who issued the link (returned on success)
    staff_creator_email: str = ""

    def to_record(self) -> dict:
        """JSON-safe dict for persistence (expires_at as ISO-8601)."""
        data = self.__dict__.copy()
        data["expires_at"] = self.expires_at.isoformat()
        return data
