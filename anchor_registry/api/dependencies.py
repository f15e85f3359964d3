from __future__ import annotations

import logging
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from anchor_registry.models.identity import is_null_identity, normalize_identity, parse_hash
from anchor_registry.models.principal import Principal
from anchor_registry.services import token_service

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def require_caller(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Principal:
    """Extract and validate the JWT bearer token. Returns the calling Principal.

    Only authenticates.  Whether the caller may perform an operation is
    decided inside the registry against its role store.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        claims = token_service.decode_access_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    if is_null_identity(claims["sub"]):
        logger.warning("Token with null subject rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    principal = Principal(identity=normalize_identity(claims["sub"]))
    logger.debug("Token validated for caller=%s", principal.identity)
    return principal


def hash_param(value: str, *, field: str) -> bytes:
    """Decode a 0x-hex hash from a request, or 422."""
    try:
        return parse_hash(value)
    except ValueError as e:
        raise HTTPException(
            status_code=422,
            detail=f"{field}: {e}",
        ) from None


def cred_id_path(cred_id: str) -> bytes:
    return hash_param(cred_id, field="cred_id")
