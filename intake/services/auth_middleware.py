import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from intake.config import Settings, get_settings, settings as app_settings
from intake.services.auth_service import decode_admin_token

logger = logging.getLogger(__name__)


def get_current_admin(
    credentials: HTTPAuthorizationCredentials = Depends(app_settings.bearer_scheme),
    config: Settings = Depends(get_settings),
):
    """Guard shared by every admin data route."""
    payload = decode_admin_token(credentials.credentials, config)
    if payload is None:
        logger.warning("Rejected admin request with invalid token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired admin token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload
