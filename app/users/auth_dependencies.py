# app/users/auth_dependencies.py
# Centralized Authentication Dependencies

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.clinical_store.authorization import Principal, Role
from app.clinical_store.store import ClinicalStore
from app.users.auth_services import IdentityProvider

# Security schemes
security_scheme = HTTPBearer(auto_error=False)


def get_store(request: Request) -> ClinicalStore:
    """The process-wide Clinical Store built in the application lifespan."""
    return request.app.state.store


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> Principal:
    """
    Resolve the acting principal from the Authorization: Bearer header.
    Raises 401 if the token is missing, invalid, expired, or the account is gone.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    principal = identity.resolve_token(credentials.credentials)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired access token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal


def require_roles(*roles: Role):
    """
    Route guard: only the listed roles may reach the endpoint.
    Raises 403 for any other authenticated principal.
    """
    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(r.value for r in roles)}",
            )
        return principal

    return dependency
