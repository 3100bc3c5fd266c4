from typing import Optional

TOKEN_KEYS = ("token", "linkToken", "link_token")
EMAIL_KEYS = ("email", "customerEmail", "customer_email")


def _first_str(payload: dict, keys) -> Optional[str]:
    for k in keys:
        v = payload.get(k)
        if v is None:
            continue
        # Non-string values count as missing rather than being coerced
        return v if isinstance(v, str) else None
    return None


def normalize_verify_payload(payload) -> dict:
    """
    Accepts the canonical {token, email} body plus a few client spellings
    and converts it into the shape expected by VerifyRequest.
    Anything that is not a JSON object yields an empty request.
    """
    if not isinstance(payload, dict):
        payload = {}

    return {
        "token": _first_str(payload, TOKEN_KEYS),
        "email": _first_str(payload, EMAIL_KEYS),
    }
