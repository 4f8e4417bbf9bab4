"""
Input validation unit tests
"""

import pytest

from config.constants import (
    EMAIL_MAX_LENGTH,
    FISH_NAME_MAX_LENGTH,
    MAX_REQUEST_INT,
    PASSWORD_MAX_BYTES,
    PHOTO_URL_MAX_LENGTH,
    PUBLIC_PAGE_SIZE,
    REGION_CODES,
)
from app.api.services import validators
from app.core.error_handling import NotFoundError, ValidationError
from app.models import LocationStatus


class TestRegion:
    """Region code normalisation"""

    def test_trims_and_uppercases(self):
        assert validators.normalize_region("  kyiv ") == "KYIV"

    def test_blank_means_no_filter(self):
        assert validators.normalize_region(None) is None
        assert validators.normalize_region("   ") is None

    def test_unknown_region_lists_allowed_codes(self):
        with pytest.raises(ValidationError) as exc_info:
            validators.normalize_region("ATLANTIS")
        body = exc_info.value.to_response()
        assert body["field"] == "region"
        assert body["allowed"] == list(REGION_CODES)

    def test_required_region(self):
        with pytest.raises(ValidationError):
            validators.require_region("")


class TestCoordinates:
    @pytest.mark.parametrize("value", [-90, 0, 45.5, 90])
    def test_latitude_in_range(self, value):
        assert validators.validate_latitude(value) == float(value)

    @pytest.mark.parametrize("value", [-90.01, 91, float("nan"), None, True])
    def test_latitude_rejected(self, value):
        with pytest.raises(ValidationError):
            validators.validate_latitude(value)

    def test_longitude_bounds(self):
        assert validators.validate_longitude(-180) == -180.0
        with pytest.raises(ValidationError) as exc_info:
            validators.validate_longitude(180.5)
        assert "out of range" in exc_info.value.message


class TestStrings:
    def test_clean_strings_trims_and_dedupes(self):
        assert validators.clean_strings([" Pike", "Perch", "", "Pike ", None]) == ["Pike", "Perch"]

    def test_split_multi_value(self):
        assert validators.split_multi_value("Pike, Perch,,Pike") == ["Pike", "Perch"]
        assert validators.split_multi_value(None) == []

    def test_blank_contact_info_is_null(self):
        assert validators.normalize_contact_info("  ") is None

    def test_contact_info_too_long(self):
        with pytest.raises(ValidationError):
            validators.normalize_contact_info("x" * 256)

    def test_water_type_is_uppercased(self):
        assert validators.validate_water_type("river") == "RIVER"
        with pytest.raises(ValidationError):
            validators.validate_water_type("OCEAN")


class TestStatus:
    def test_parse_admin_status(self):
        allowed = (LocationStatus.APPROVED, LocationStatus.REJECTED, LocationStatus.HIDDEN)
        assert validators.parse_status("approved", allowed) == LocationStatus.APPROVED

    def test_pending_not_in_admin_set(self):
        allowed = (LocationStatus.APPROVED, LocationStatus.REJECTED, LocationStatus.HIDDEN)
        with pytest.raises(ValidationError) as exc_info:
            validators.parse_status("PENDING", allowed)
        assert exc_info.value.to_response()["allowed"] == ["APPROVED", "REJECTED", "HIDDEN"]

    def test_optional_status(self):
        assert validators.parse_optional_status(None) is None
        assert validators.parse_optional_status("hidden") == LocationStatus.HIDDEN


class TestReviewInput:
    @pytest.mark.parametrize("rating", [1, 3, 5])
    def test_valid_rating(self, rating):
        assert validators.validate_rating(rating) == rating

    @pytest.mark.parametrize("rating", [0, 6, 4.5, "5", True, None])
    def test_invalid_rating(self, rating):
        with pytest.raises(ValidationError):
            validators.validate_rating(rating)

    def test_comment_minimum_after_trim(self):
        assert validators.validate_comment("  nice ") == "nice"
        with pytest.raises(ValidationError):
            validators.validate_comment("  ok  ")


class TestAccountInput:
    def test_email_normalised(self):
        assert validators.normalize_email("  Angler@Example.COM ") == "angler@example.com"

    def test_bad_email(self):
        with pytest.raises(ValidationError):
            validators.normalize_email("not-an-email")

    def test_short_password(self):
        with pytest.raises(ValidationError):
            validators.validate_password("short")

    @pytest.mark.parametrize("name", ["ab", "has space", "x" * 31, "bad!name"])
    def test_bad_display_name(self, name):
        with pytest.raises(ValidationError):
            validators.validate_display_name(name)

    def test_display_name_optional(self):
        assert validators.validate_display_name(None) is None
        assert validators.validate_display_name("pike.hunter_1") == "pike.hunter_1"


class TestPagination:
    def test_defaults(self):
        assert validators.resolve_pagination(None, None, PUBLIC_PAGE_SIZE) == (1, 10, 0)

    def test_offset(self):
        assert validators.resolve_pagination(3, 10, PUBLIC_PAGE_SIZE) == (3, 10, 20)

    def test_limit_capped_and_page_floored(self):
        assert validators.resolve_pagination(0, 500, PUBLIC_PAGE_SIZE) == (1, 50, 0)
        assert validators.resolve_pagination(-2, -1, PUBLIC_PAGE_SIZE) == (1, 10, 0)

    def test_huge_page_is_clamped(self):
        page, limit, offset = validators.resolve_pagination(10**20, 10, PUBLIC_PAGE_SIZE)
        assert page == MAX_REQUEST_INT
        assert offset == (MAX_REQUEST_INT - 1) * 10


class TestLocationId:
    def test_storable_ids_pass(self):
        assert validators.location_id_param(1) == 1
        assert validators.location_id_param(MAX_REQUEST_INT) == MAX_REQUEST_INT

    @pytest.mark.parametrize("location_id", [0, -1, 2**31, 10**20])
    def test_unstorable_ids_are_missing(self, location_id):
        with pytest.raises(NotFoundError):
            validators.location_id_param(location_id)


class TestLengthLimits:
    def test_fish_name_limit(self):
        assert validators.validate_fish_names(["x" * FISH_NAME_MAX_LENGTH]) == ["x" * FISH_NAME_MAX_LENGTH]
        with pytest.raises(ValidationError) as exc_info:
            validators.validate_fish_names(["Pike", "x" * (FISH_NAME_MAX_LENGTH + 1)])
        assert exc_info.value.to_response()["field"] == "fishNames"

    def test_limit_applies_after_trimming(self):
        padded = "  " + "x" * FISH_NAME_MAX_LENGTH + "  "
        assert validators.validate_fish_names([padded]) == ["x" * FISH_NAME_MAX_LENGTH]

    def test_photo_url_limit(self):
        with pytest.raises(ValidationError) as exc_info:
            validators.validate_photo_urls(["http://img/" + "a" * PHOTO_URL_MAX_LENGTH])
        assert exc_info.value.to_response()["field"] == "photoUrls"

    def test_email_limit(self):
        local = "x" * (EMAIL_MAX_LENGTH - len("@example.com"))
        assert validators.normalize_email(f"{local}@example.com") == f"{local}@example.com"
        with pytest.raises(ValidationError) as exc_info:
            validators.normalize_email(f"x{local}@example.com")
        assert exc_info.value.to_response()["field"] == "email"

    def test_password_byte_limit(self):
        assert validators.validate_password("p" * PASSWORD_MAX_BYTES)
        with pytest.raises(ValidationError):
            validators.validate_password("p" * (PASSWORD_MAX_BYTES + 1))
        # multi-byte characters count by encoded size
        with pytest.raises(ValidationError):
            validators.validate_password("ї" * 40)
