# src/auth/dependencies.py

import secrets
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

from src.common.config import settings

ADMIN_KEY_HEADER = "X-Admin-Key"

admin_key_scheme = APIKeyHeader(name=ADMIN_KEY_HEADER, auto_error=False)

class AccessDenied(Exception):
    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(detail)

def check_admin_key(api_key: Optional[str]) -> None:
    """
    Raise AccessDenied unless the supplied key matches the configured admin key.
    Shared by the REST dependency and the GraphQL mutations.
    """
    if not api_key:
        raise AccessDenied(status.HTTP_401_UNAUTHORIZED, "You must be logged in to perform this action.")
    if not settings.ADMIN_API_KEY or not secrets.compare_digest(api_key, settings.ADMIN_API_KEY):
        raise AccessDenied(status.HTTP_403_FORBIDDEN, "You do not have permission to perform this action.")

async def require_admin(api_key: Optional[str] = Depends(admin_key_scheme)) -> None:
    """
    Dependency guarding catalog mutations.
    """
    try:
        check_admin_key(api_key)
    except AccessDenied as exc:
        raise HTTPException(
            status_code=exc.status_code,
            detail=exc.detail,
            headers={"WWW-Authenticate": "ApiKey"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None,
        )
