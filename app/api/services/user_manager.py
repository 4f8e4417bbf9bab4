"""
User account service

Registration, login and profile changes. Public registration produces USER or
OWNER accounts only; admins are provisioned by scripts/create_admin.py.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.schemas import AuthResponse, LoginRequest, RegisterRequest, UserInfo
from app.api.services import validators, views
from app.core.error_handling import (
    AuthenticationError,
    ErrorCodes,
    NotFoundError,
    ValidationError,
    storage_errors,
)
from app.core.logger import get_logger
from app.core.security import CredentialService, Principal, get_credential_service
from app.models import User, UserRole


def registration_role(requested: Optional[str]) -> UserRole:
    """Only OWNER may be requested; everything else registers as USER"""
    if str(requested or "").strip().upper() == UserRole.OWNER.value:
        return UserRole.OWNER
    return UserRole.USER


class UserManager:
    """Accounts and credentials"""

    def __init__(self, credentials: Optional[CredentialService] = None):
        self.logger = get_logger(__name__)
        self._credentials = credentials

    @property
    def credentials(self) -> CredentialService:
        if self._credentials is None:
            self._credentials = get_credential_service()
        return self._credentials

    @storage_errors("register user")
    async def register(self, db: AsyncSession, request: RegisterRequest) -> AuthResponse:
        if not request.email or not request.password:
            raise ValidationError(
                "email and password are required",
                field_name="email" if not request.email else "password",
                error_code=ErrorCodes.VALIDATION_REQUIRED_FIELD,
            )
        email = validators.normalize_email(request.email)
        password = validators.validate_password(request.password)
        display_name = validators.validate_display_name(request.display_name)
        role = registration_role(request.role)

        user = await self.create_user(db, email, password, role, display_name)
        self.logger.info(f"User {user.id} registered with role {role.value}")
        return self._auth_response(user)

    @storage_errors("create user")
    async def create_user(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        role: UserRole,
        display_name: Optional[str] = None,
    ) -> User:
        """Insert a user; uniqueness violations surface as ConflictError"""
        user = User(
            email=email,
            password_hash=await self.credentials.hash_password(password),
            display_name=display_name,
            role=role,
        )
        db.add(user)
        await db.flush()
        await db.commit()
        return user

    async def login(self, db: AsyncSession, request: LoginRequest) -> AuthResponse:
        if not request.email or not request.password:
            raise ValidationError(
                "email and password are required",
                error_code=ErrorCodes.VALIDATION_REQUIRED_FIELD,
            )
        user = await db.scalar(
            select(User).where(User.email == request.email.strip().lower())
        )
        if user is None or not await self.credentials.verify_password(
            request.password, user.password_hash
        ):
            raise AuthenticationError(
                "Invalid credentials", error_code=ErrorCodes.AUTH_BAD_CREDENTIALS
            )
        return self._auth_response(user)

    async def get_user(self, db: AsyncSession, principal: Principal) -> UserInfo:
        return views.user_info(await self._get(db, principal))

    @storage_errors("update profile")
    async def update_display_name(
        self, db: AsyncSession, principal: Principal, display_name: str
    ) -> UserInfo:
        name = validators.validate_display_name(display_name)
        user = await self._get(db, principal)
        user.display_name = name
        await db.flush()
        await db.commit()
        return views.user_info(user)

    async def change_password(
        self,
        db: AsyncSession,
        principal: Principal,
        current_password: str,
        new_password: str,
    ) -> None:
        password = validators.validate_password(new_password, field_name="newPassword")
        user = await self._get(db, principal)
        if not await self.credentials.verify_password(current_password or "", user.password_hash):
            raise AuthenticationError(
                "Current password is incorrect", error_code=ErrorCodes.AUTH_BAD_CREDENTIALS
            )
        user.password_hash = await self.credentials.hash_password(password)
        await db.commit()
        self.logger.info(f"User {user.id} changed password")

    async def _get(self, db: AsyncSession, principal: Principal) -> User:
        user = await db.get(User, principal.id)
        if user is None:
            raise NotFoundError("User not found", resource="user")
        return user

    def _auth_response(self, user: User) -> AuthResponse:
        token = self.credentials.issue_token(user.id, user.role, user.email)
        return AuthResponse(user=views.user_info(user), token=token)
