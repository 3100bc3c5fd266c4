from typing import Optional
from pydantic import BaseModel

class VerifyRequest(BaseModel):
    # Both optional at the schema level; presence is a verification outcome (400), not a 422
    token: Optional[str] = None
    email: Optional[str] = None

class VerifyResponse(BaseModel):
    success: bool
    error: Optional[str] = None
    message: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    secure_link_id: Optional[str] = None
    staff_creator_email: Optional[str] = None

class LinkSnapshot(BaseModel):
    id: str
    status: str
    expires_at: str
    expired: bool
    staff_creator_email: str
