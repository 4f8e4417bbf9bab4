"""
Constant definitions

Fixed reference data shared by the API, the services and the seed scripts.
"""

# Administrative region codes accepted for Location.region
REGION_CODES = (
    "VINNYTSIA",
    "VOLYN",
    "DNIPROPETROVSK",
    "DONETSK",
    "ZHYTOMYR",
    "ZAKARPATTIA",
    "ZAPORIZHZHIA",
    "IVANO_FRANKIVSK",
    "KYIV",
    "KIROVOHRAD",
    "LUHANSK",
    "LVIV",
    "MYKOLAIV",
    "ODESA",
    "POLTAVA",
    "RIVNE",
    "SUMY",
    "TERNOPIL",
    "KHARKIV",
    "KHERSON",
    "KHMELNYTSKYI",
    "CHERKASY",
    "CHERNIVTSI",
    "CHERNIHIV",
    "CRIMEA",
)

# Season catalog (code -> display name), never created by users
SEASONS = {
    "SPRING": "Spring",
    "SUMMER": "Summer",
    "AUTUMN": "Autumn",
    "WINTER": "Winter",
}

# Starter fish catalog loaded by scripts/seed_catalog.py
DEFAULT_FISH = (
    "Carp",
    "Crucian carp",
    "Pike",
    "Perch",
    "Zander",
    "Catfish",
    "Bream",
    "Roach",
    "Trout",
    "Salmon",
)

# Field limits
CONTACT_INFO_MAX_LENGTH = 255
TITLE_MAX_LENGTH = 200
FISH_NAME_MAX_LENGTH = 100
PHOTO_URL_MAX_LENGTH = 2048
EMAIL_MAX_LENGTH = 320
REVIEW_COMMENT_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_BYTES = 72  # bcrypt input limit
EMAIL_PATTERN = r"^\S+@\S+\.\S+$"
DISPLAY_NAME_PATTERN = r"^[a-zA-Z0-9._]{3,30}$"

# Largest id or page number accepted from a request (32-bit INTEGER columns)
MAX_REQUEST_INT = 2**31 - 1

# Pagination (default, hard cap) per listing
PUBLIC_PAGE_SIZE = (10, 50)
OWNER_PAGE_SIZE = (20, 100)
ADMIN_PAGE_SIZE = (20, 100)
FAVORITES_PAGE_SIZE = (12, 50)

# Statuses from which an admin may delete a location
DELETABLE_STATUSES = ("HIDDEN",)
