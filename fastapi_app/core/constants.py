"""
Константы приложения
"""

# Authentication
MAX_PASSWORD_LENGTH_BYTES = 72  # Ограничение bcrypt
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH_CHARS = 100
MIN_EMAIL_LENGTH = 3
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
VERIFICATION_TOKEN_BYTES = 24  # 32 символа в url-safe base64

# JWT
TOKEN_TYPE_BEARER = "bearer"

# Database
DEFAULT_POOL_SIZE = 10
DEFAULT_MAX_OVERFLOW = 20

# HTTP
HTTP_TIMEOUT_SECONDS = 60

# Analysis input
MAX_CONTENT_LENGTH = 20000

# Uploads
MAX_UPLOAD_FILES = 5
ALLOWED_UPLOAD_TYPES = {"image/jpeg", "image/png", "application/pdf"}
IMAGE_UPLOAD_TYPES = {"image/jpeg", "image/png"}
PDF_CONTENT_TYPE = "application/pdf"
CONTENT_TYPE_ALIASES = {"image/jpg": "image/jpeg"}
