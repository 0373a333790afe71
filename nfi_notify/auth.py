import logging
import secrets
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from . import config

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def require_api_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> None:
    """
    Guard server-side endpoints with the shared NOTIFY_API_TOKEN.
    Open when no token is configured (local development).
    """
    expected = config.NOTIFY_API_TOKEN
    if not expected:
        return

    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")

    if not secrets.compare_digest(credentials.credentials.encode(), expected.encode()):
        logger.warning("⚠️ Rejected notification request with invalid API token")
        raise HTTPException(status_code=401, detail="Invalid API token")
