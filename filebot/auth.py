"""Front-end authentication."""

import hmac
from typing import Optional

from fastapi import Header

from filebot import config
from filebot.exceptions import UnauthorizedFrontendError


async def verify_frontend_key(authorization: Optional[str] = Header(None)) -> None:
    """
    FastAPI dependency checking the shared front-end key.

    Args:
        authorization: Authorization header value (format: "Bearer <key>")

    Raises:
        UnauthorizedFrontendError: Key configured and missing or wrong
    """
    expected = config.FRONTEND_API_KEY
    if not expected:
        return

    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedFrontendError("Missing or malformed authorization header")

    presented = authorization[len("Bearer "):]
    if not hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8")):
        raise UnauthorizedFrontendError("Invalid front-end key")
