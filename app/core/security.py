"""
Credential service

Password hashing (bcrypt) and identity token issue/verification (JWT).
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from config.settings import AuthConfig, DEVELOPMENT_JWT_SECRET, get_app_settings, get_auth_config
from app.core.error_handling import AuthenticationError, ConfigurationError, ErrorCodes
from app.models import UserRole


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, built from a verified token"""

    id: int
    role: UserRole
    email: str


def resolve_auth_config() -> AuthConfig:
    """Auth settings with the secret checked"""
    config = get_auth_config()
    if not config.jwt_secret:
        if get_app_settings().environment != "development":
            raise ConfigurationError("JWT_SECRET is not set", config_key="JWT_SECRET")
        config.jwt_secret = DEVELOPMENT_JWT_SECRET
    return config


class CredentialService:
    """Hashes passwords and signs/verifies identity tokens"""

    def __init__(self, config: Optional[AuthConfig] = None):
        self.config = config or resolve_auth_config()

    # bcrypt is CPU bound; run it off the event loop
    async def hash_password(self, password: str) -> str:
        return await asyncio.to_thread(self._hash_password, password)

    async def verify_password(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self._verify_password, password, password_hash)

    def _hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.config.bcrypt_rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def _verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False

    def issue_token(self, user_id: int, role: UserRole, email: str) -> str:
        """Signed token carrying id, role, email, iat and exp"""
        now = datetime.now(timezone.utc)
        payload = {
            "id": user_id,
            "role": role.value,
            "email": email,
            "iat": now,
            "exp": now + timedelta(minutes=self.config.jwt_expires_minutes),
        }
        return jwt.encode(payload, self.config.jwt_secret, algorithm=self.config.jwt_algorithm)

    def verify_token(self, token: str) -> Principal:
        """Decode a token into a Principal or raise AuthenticationError"""
        try:
            payload = jwt.decode(
                token,
                self.config.jwt_secret,
                algorithms=[self.config.jwt_algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid or expired token")

        try:
            return Principal(
                id=int(payload["id"]),
                role=UserRole(payload["role"]),
                email=str(payload.get("email", "")),
            )
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError(
                "Invalid or expired token", error_code=ErrorCodes.AUTH_TOKEN_INVALID
            )


# global instance
_credential_service = None


def get_credential_service() -> CredentialService:
    """Credential service instance"""
    global _credential_service
    if _credential_service is None:
        _credential_service = CredentialService()
    return _credential_service