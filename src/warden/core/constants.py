"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# ULID string representation
ULID_LENGTH = 26

# String field lengths
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 255
MAX_URL_LENGTH = 255
MAX_TOKEN_VALUE_LENGTH = 64

# Password requirements
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 32
BCRYPT_ROUNDS = 12

# Token settings
REFRESH_TOKEN_BYTES = 24
TOKEN_TYPE = "Bearer"
TOKEN_SCOPE = "*"

# Permission grant encoding
GRANT_DELIMITER = ","

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"
