"""
Input validation and normalisation

Every check raises ValidationError naming the offending field, before any
storage write happens.
"""

import math
import re
from typing import Iterable, List, Optional, Tuple

from config.constants import (
    CONTACT_INFO_MAX_LENGTH,
    DISPLAY_NAME_PATTERN,
    EMAIL_MAX_LENGTH,
    EMAIL_PATTERN,
    FISH_NAME_MAX_LENGTH,
    MAX_REQUEST_INT,
    PASSWORD_MAX_BYTES,
    PASSWORD_MIN_LENGTH,
    PHOTO_URL_MAX_LENGTH,
    REGION_CODES,
    REVIEW_COMMENT_MIN_LENGTH,
    TITLE_MAX_LENGTH,
)
from app.core.error_handling import ErrorCodes, NotFoundError, ValidationError
from app.models import LocationStatus, WaterType

EMAIL_RE = re.compile(EMAIL_PATTERN)
DISPLAY_NAME_RE = re.compile(DISPLAY_NAME_PATTERN)

WATER_TYPES = tuple(w.value for w in WaterType)


def normalize_region(value: Optional[str]) -> Optional[str]:
    """Trim/uppercase a region code; None or blank means no region"""
    if value is None:
        return None
    code = str(value).strip().upper()
    if not code:
        return None
    if code not in REGION_CODES:
        raise ValidationError(
            "Invalid region",
            field_name="region",
            allowed=REGION_CODES,
            error_code=ErrorCodes.VALIDATION_NOT_ALLOWED,
        )
    return code


def require_region(value: Optional[str]) -> str:
    code = normalize_region(value)
    if code is None:
        raise ValidationError(
            "region is required", field_name="region", error_code=ErrorCodes.VALIDATION_REQUIRED_FIELD
        )
    return code


def validate_water_type(value: Optional[str]) -> str:
    water_type = str(value or "").strip().upper()
    if water_type not in WATER_TYPES:
        raise ValidationError(
            "Invalid waterType",
            field_name="waterType",
            allowed=WATER_TYPES,
            error_code=ErrorCodes.VALIDATION_NOT_ALLOWED,
        )
    return water_type


def require_text(value: Optional[str], field_name: str, max_length: Optional[int] = None) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError(
            f"{field_name} is required",
            field_name=field_name,
            error_code=ErrorCodes.VALIDATION_REQUIRED_FIELD,
        )
    if max_length is not None and len(text) > max_length:
        raise ValidationError(
            f"{field_name} is too long (max {max_length} chars)",
            field_name=field_name,
            error_code=ErrorCodes.VALIDATION_OUT_OF_RANGE,
        )
    return text


def validate_title(value: Optional[str]) -> str:
    return require_text(value, "title", max_length=TITLE_MAX_LENGTH)


def validate_description(value: Optional[str]) -> str:
    return require_text(value, "description")


def validate_latitude(value) -> float:
    return _validate_coordinate(value, "lat", 90.0)


def validate_longitude(value) -> float:
    return _validate_coordinate(value, "lng", 180.0)


def _validate_coordinate(value, field_name: str, bound: float) -> float:
    if value is None or isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid number",
            field_name=field_name,
            error_code=ErrorCodes.VALIDATION_REQUIRED_FIELD,
        )
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a valid number", field_name=field_name)
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a valid number", field_name=field_name)
    if number < -bound or number > bound:
        raise ValidationError(
            f"{field_name} out of range [-{bound:g}, {bound:g}]",
            field_name=field_name,
            error_code=ErrorCodes.VALIDATION_OUT_OF_RANGE,
        )
    return number


def normalize_contact_info(value: Optional[str]) -> Optional[str]:
    """Blank contact info is stored as NULL"""
    if value is None:
        return None
    contact = str(value).strip()
    if not contact:
        return None
    if len(contact) > CONTACT_INFO_MAX_LENGTH:
        raise ValidationError(
            f"contactInfo is too long (max {CONTACT_INFO_MAX_LENGTH} chars)",
            field_name="contactInfo",
            error_code=ErrorCodes.VALIDATION_OUT_OF_RANGE,
        )
    return contact


def clean_strings(values: Optional[Iterable[str]]) -> List[str]:
    """Trim, drop blanks, collapse duplicates keeping first-seen order"""
    if not values:
        return []
    cleaned = (str(v).strip() for v in values if v is not None)
    return list(dict.fromkeys(v for v in cleaned if v))


def split_multi_value(value: Optional[str]) -> List[str]:
    """'Pike,Perch' -> ['Pike', 'Perch']"""
    if value is None:
        return []
    return clean_strings(str(value).split(","))


def clean_bounded_strings(
    values: Optional[Iterable[str]], field_name: str, max_length: int
) -> List[str]:
    """clean_strings, rejecting any entry longer than max_length"""
    cleaned = clean_strings(values)
    for value in cleaned:
        if len(value) > max_length:
            raise ValidationError(
                f"{field_name} entries must be at most {max_length} chars",
                field_name=field_name,
                error_code=ErrorCodes.VALIDATION_OUT_OF_RANGE,
            )
    return cleaned


def validate_photo_urls(values: Optional[Iterable[str]]) -> List[str]:
    return clean_bounded_strings(values, "photoUrls", PHOTO_URL_MAX_LENGTH)


def validate_fish_names(values: Optional[Iterable[str]]) -> List[str]:
    return clean_bounded_strings(values, "fishNames", FISH_NAME_MAX_LENGTH)


def parse_status(value: Optional[str], allowed: Iterable[LocationStatus] = tuple(LocationStatus)) -> LocationStatus:
    allowed = tuple(allowed)
    allowed_values = [s.value for s in allowed]
    code = str(value or "").strip().upper()
    if code not in allowed_values:
        raise ValidationError(
            f"Invalid status. Allowed: {', '.join(allowed_values)}",
            field_name="status",
            allowed=allowed_values,
            error_code=ErrorCodes.VALIDATION_NOT_ALLOWED,
        )
    return LocationStatus(code)


def parse_optional_status(value: Optional[str]) -> Optional[LocationStatus]:
    if value is None or not str(value).strip():
        return None
    return parse_status(value)


def validate_rating(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1 or value > 5:
        raise ValidationError(
            "rating must be an integer from 1 to 5",
            field_name="rating",
            error_code=ErrorCodes.VALIDATION_OUT_OF_RANGE,
        )
    return value


def validate_comment(value: Optional[str]) -> str:
    comment = str(value).strip() if value is not None else ""
    if len(comment) < REVIEW_COMMENT_MIN_LENGTH:
        raise ValidationError(
            f"comment is required (min {REVIEW_COMMENT_MIN_LENGTH} chars)",
            field_name="comment",
            error_code=ErrorCodes.VALIDATION_REQUIRED_FIELD,
        )
    return comment


def normalize_email(value: Optional[str]) -> str:
    email = str(value or "").strip().lower()
    if not email:
        raise ValidationError(
            "email and password are required",
            field_name="email",
            error_code=ErrorCodes.VALIDATION_REQUIRED_FIELD,
        )
    if len(email) > EMAIL_MAX_LENGTH:
        raise ValidationError(
            f"email is too long (max {EMAIL_MAX_LENGTH} chars)",
            field_name="email",
            error_code=ErrorCodes.VALIDATION_OUT_OF_RANGE,
        )
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email", field_name="email")
    return email


def validate_password(value: Optional[str], field_name: str = "password") -> str:
    password = str(value or "")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
            field_name=field_name,
            error_code=ErrorCodes.VALIDATION_OUT_OF_RANGE,
        )
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValidationError(
            f"Password must be at most {PASSWORD_MAX_BYTES} bytes",
            field_name=field_name,
            error_code=ErrorCodes.VALIDATION_OUT_OF_RANGE,
        )
    return password


def validate_display_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    name = str(value).strip()
    if not DISPLAY_NAME_RE.match(name):
        raise ValidationError(
            "Invalid display name (3-30 chars: letters, digits, '.', '_')",
            field_name="displayName",
        )
    return name


def resolve_pagination(
    page: Optional[int], limit: Optional[int], page_size: Tuple[int, int]
) -> Tuple[int, int, int]:
    """(page, limit, offset) with page >= 1 and limit in [1, cap]"""
    default_limit, max_limit = page_size
    page = min(max(page or 1, 1), MAX_REQUEST_INT)
    if not limit or limit < 1:
        limit = default_limit
    limit = min(limit, max_limit)
    return page, limit, (page - 1) * limit


def location_id_param(location_id: int) -> int:
    """Path id dependency; ids outside the storable range cannot exist"""
    if location_id < 1 or location_id > MAX_REQUEST_INT:
        raise NotFoundError("Location not found", resource="location")
    return location_id
