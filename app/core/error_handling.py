"""
Unified error handling framework

Project exception hierarchy and the helpers that translate storage failures
into it. Every FishSpotError knows the HTTP status it maps to; the API layer
renders it, and anything outside the hierarchy becomes a generic 500.
"""

import functools
from datetime import datetime
from enum import Enum
from typing import Dict, Any, Optional, Callable, Iterable
from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError, SQLAlchemyError


class ErrorSeverity(Enum):
    """Error severity level"""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class ErrorCategory(Enum):
    """Error category"""

    VALIDATION_ERROR = "validation"
    AUTHENTICATION_ERROR = "authentication"
    AUTHORIZATION_ERROR = "authorization"
    NOT_FOUND_ERROR = "not_found"
    CONFLICT_ERROR = "conflict"
    DATABASE_ERROR = "database"
    CONFIGURATION_ERROR = "config"
    SYSTEM_ERROR = "system"


class ErrorCodes:
    """Standard error codes"""

    # validation
    VALIDATION_REQUIRED_FIELD = "FS_VAL_001"
    VALIDATION_INVALID_FORMAT = "FS_VAL_002"
    VALIDATION_OUT_OF_RANGE = "FS_VAL_003"
    VALIDATION_NOT_ALLOWED = "FS_VAL_004"

    # auth
    AUTH_TOKEN_MISSING = "FS_AUTH_001"
    AUTH_TOKEN_INVALID = "FS_AUTH_002"
    AUTH_BAD_CREDENTIALS = "FS_AUTH_003"
    AUTH_ROLE_REQUIRED = "FS_AUTH_004"
    AUTH_FORBIDDEN = "FS_AUTH_005"

    # resources
    RESOURCE_NOT_FOUND = "FS_RES_001"

    # conflicts
    CONFLICT_UNIQUE = "FS_CONF_001"
    CONFLICT_STATE = "FS_CONF_002"

    # storage / config
    DB_QUERY_FAILED = "FS_DB_001"
    CONFIG_REQUIRED_MISSING = "FS_CFG_001"

    SERVER_ERROR = "FS_SERVER_ERROR"


@dataclass
class ErrorContext:
    """Error context information"""

    operation: str = ""
    module: str = ""
    function: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation,
            "module": self.module,
            "function": self.function,
            "metadata": self.metadata,
            "timestamp": self.timestamp.isoformat(),
        }


class FishSpotError(Exception):
    """Project base exception"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCodes.SERVER_ERROR,
        category: ErrorCategory = ErrorCategory.SYSTEM_ERROR,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.cause = cause
        self.details = details or {}

    def to_response(self) -> Dict[str, Any]:
        """Client-facing body; internal context never leaves the process"""
        body = {"error": self.message, "code": self.error_code}
        body.update(self.details)
        return body

    def to_dict(self) -> Dict[str, Any]:
        """Full representation for logs"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "status_code": self.status_code,
            "category": self.category.value,
            "severity": self.severity.value,
            "details": self.details,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


# ========== specialised exceptions ==========


class ValidationError(FishSpotError):
    """Missing, malformed or out-of-range input"""

    status_code = 400

    def __init__(
        self,
        message: str,
        field_name: str = "",
        allowed: Optional[Iterable[str]] = None,
        error_code: str = ErrorCodes.VALIDATION_INVALID_FORMAT,
        **kwargs,
    ):
        details = {}
        if field_name:
            details["field"] = field_name
        if allowed is not None:
            details["allowed"] = list(allowed)
        super().__init__(
            message,
            error_code=error_code,
            category=ErrorCategory.VALIDATION_ERROR,
            severity=ErrorSeverity.LOW,
            details=details,
            **kwargs,
        )
        self.field_name = field_name


class AuthenticationError(FishSpotError):
    """Missing, invalid or expired credentials"""

    status_code = 401

    def __init__(self, message: str, error_code: str = ErrorCodes.AUTH_TOKEN_INVALID, **kwargs):
        super().__init__(
            message,
            error_code=error_code,
            category=ErrorCategory.AUTHENTICATION_ERROR,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )


class AuthorizationError(FishSpotError):
    """Authenticated caller lacks the required role"""

    status_code = 403

    def __init__(
        self,
        message: str,
        required_roles: Optional[Iterable[str]] = None,
        error_code: str = ErrorCodes.AUTH_FORBIDDEN,
        **kwargs,
    ):
        details = {}
        if required_roles is not None:
            details["requiredRoles"] = list(required_roles)
        super().__init__(
            message,
            error_code=error_code,
            category=ErrorCategory.AUTHORIZATION_ERROR,
            severity=ErrorSeverity.LOW,
            details=details,
            **kwargs,
        )


class NotFoundError(FishSpotError):
    """Resource does not exist (or is hidden from the caller)"""

    status_code = 404

    def __init__(self, message: str = "Not found", resource: str = "", **kwargs):
        super().__init__(
            message,
            error_code=ErrorCodes.RESOURCE_NOT_FOUND,
            category=ErrorCategory.NOT_FOUND_ERROR,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.resource = resource


class ConflictError(FishSpotError):
    """Uniqueness violation or illegal state transition"""

    status_code = 409

    def __init__(
        self,
        message: str,
        field_name: str = "",
        current_status: Optional[str] = None,
        error_code: str = ErrorCodes.CONFLICT_UNIQUE,
        **kwargs,
    ):
        details = {}
        if field_name:
            details["field"] = field_name
        if current_status is not None:
            details["status"] = current_status
        super().__init__(
            message,
            error_code=error_code,
            category=ErrorCategory.CONFLICT_ERROR,
            severity=ErrorSeverity.LOW,
            details=details,
            **kwargs,
        )


class DatabaseError(FishSpotError):
    """Unexpected storage failure"""

    status_code = 500

    def __init__(self, message: str, table_name: str = "", **kwargs):
        super().__init__(
            message,
            error_code=ErrorCodes.DB_QUERY_FAILED,
            category=ErrorCategory.DATABASE_ERROR,
            severity=ErrorSeverity.HIGH,
            **kwargs,
        )
        self.table_name = table_name
        if self.context:
            self.context.metadata.update({"table_name": table_name})


class ConfigurationError(FishSpotError):
    """Invalid or missing configuration"""

    def __init__(self, message: str, config_key: str = "", **kwargs):
        super().__init__(
            message,
            error_code=ErrorCodes.CONFIG_REQUIRED_MISSING,
            category=ErrorCategory.CONFIGURATION_ERROR,
            severity=ErrorSeverity.CRITICAL,
            **kwargs,
        )
        self.config_key = config_key
        if self.context:
            self.context.metadata.update({"config_key": config_key})


# ========== storage error translation ==========

_EMAIL_TAKEN = ("email", "Email already taken")
_DISPLAY_NAME_TAKEN = ("displayName", "Display name already taken")
_ALREADY_REVIEWED = ("review", "You already reviewed this location")
_ALREADY_FAVORITE = ("favorite", "Location is already a favorite")

# constraint name (PostgreSQL) or SQLite column list -> (conflicting field, client message)
UNIQUE_CONSTRAINT_MESSAGES = {
    "uq_users_email": _EMAIL_TAKEN,
    "uq_users_display_name": _DISPLAY_NAME_TAKEN,
    "uq_reviews_user_location": _ALREADY_REVIEWED,
    "uq_favorites_user_location": _ALREADY_FAVORITE,
    "users.email": _EMAIL_TAKEN,
    "users.display_name": _DISPLAY_NAME_TAKEN,
    "reviews.user_id, reviews.location_id": _ALREADY_REVIEWED,
    "favorites.user_id, favorites.location_id": _ALREADY_FAVORITE,
}

SQLITE_UNIQUE_PREFIX = "UNIQUE constraint failed: "


def violated_constraint(exc: IntegrityError) -> Optional[str]:
    """
    Name of the violated constraint, read from the driver error.

    asyncpg exposes it on the wrapped exception, psycopg on `diag`; SQLite only
    reports the column list, which is returned instead. The offending value
    is never part of the result.
    """
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        name = getattr(candidate, "constraint_name", None)
        if name:
            return name
    diag_name = getattr(getattr(orig, "diag", None), "constraint_name", None)
    if diag_name:
        return diag_name

    text = str(orig) if orig is not None else ""
    if text.startswith(SQLITE_UNIQUE_PREFIX):
        return text[len(SQLITE_UNIQUE_PREFIX):].strip()
    return None


def translate_integrity_error(exc: IntegrityError) -> FishSpotError:
    """Map a storage uniqueness violation onto a ConflictError naming the field"""
    constraint = violated_constraint(exc)
    if constraint in UNIQUE_CONSTRAINT_MESSAGES:
        field_name, message = UNIQUE_CONSTRAINT_MESSAGES[constraint]
        return ConflictError(message, field_name=field_name, cause=exc)

    text = str(exc.orig) if exc.orig is not None else str(exc)
    if "unique" in text.lower() or "duplicate" in text.lower():
        return ConflictError("Unique constraint failed", cause=exc)
    return DatabaseError("Integrity constraint failed", cause=exc)


def storage_errors(operation: str):
    """Decorator for async service methods: storage failures become FishSpotErrors"""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except FishSpotError:
                raise
            except IntegrityError as e:
                error = translate_integrity_error(e)
                error.context.operation = operation
                error.context.function = func.__name__
                error.context.module = func.__module__
                raise error from e
            except SQLAlchemyError as e:
                raise DatabaseError(
                    f"{operation} failed",
                    context=ErrorContext(
                        operation=operation,
                        function=func.__name__,
                        module=func.__module__,
                    ),
                    cause=e,
                ) from e

        return wrapper

    return decorator
