"""
API authentication module

Bearer-token authentication and role gates. Every role must appear in
ROLE_CAPABILITIES; a role added to UserRole without an entry fails at import.
"""

from enum import Enum
from typing import Optional

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.error_handling import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ErrorCodes,
)
from app.core.security import Principal, get_credential_service
from app.models import UserRole

bearer_scheme = HTTPBearer(auto_error=False)


class Capability(str, Enum):
    """Role-gated capabilities"""
    REVIEW = "REVIEW"
    FAVORITE = "FAVORITE"
    MANAGE_OWN_LOCATIONS = "MANAGE_OWN_LOCATIONS"
    MODERATE = "MODERATE"


ROLE_CAPABILITIES = {
    UserRole.USER: frozenset({Capability.REVIEW, Capability.FAVORITE}),
    UserRole.OWNER: frozenset(
        {Capability.REVIEW, Capability.FAVORITE, Capability.MANAGE_OWN_LOCATIONS}
    ),
    UserRole.ADMIN: frozenset({Capability.MODERATE}),
}

_unmapped_roles = set(UserRole) - set(ROLE_CAPABILITIES)
if _unmapped_roles:
    raise ConfigurationError(
        f"Roles without capabilities: {', '.join(sorted(r.value for r in _unmapped_roles))}"
    )


def roles_with(capability: Capability) -> list:
    return [role.value for role in UserRole if capability in ROLE_CAPABILITIES[role]]


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> Principal:
    """Verified caller identity from `Authorization: Bearer <token>`"""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationError("Missing Bearer token", error_code=ErrorCodes.AUTH_TOKEN_MISSING)
    return get_credential_service().verify_token(credentials.credentials)


def require(capability: Capability):
    """Dependency factory: caller must hold a role granting the capability"""

    async def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if capability not in ROLE_CAPABILITIES[principal.role]:
            allowed = roles_with(capability)
            raise AuthorizationError(
                f"Forbidden. Requires role: {', '.join(allowed)}",
                required_roles=allowed,
                error_code=ErrorCodes.AUTH_ROLE_REQUIRED,
            )
        return principal

    return dependency


require_reviewer = require(Capability.REVIEW)
require_favorites = require(Capability.FAVORITE)
require_owner = require(Capability.MANAGE_OWN_LOCATIONS)
require_admin = require(Capability.MODERATE)
