"""
Core модуль с инфраструктурными компонентами
"""

from .auth import (
    VerificationOutcome,
    authenticate_user,
    create_access_token,
    create_user,
    get_current_user,
    refresh_verification_token,
    verify_email_token,
    verify_token,
)
from .constants import (
    ALLOWED_UPLOAD_TYPES,
    HTTP_TIMEOUT_SECONDS,
    MAX_CONTENT_LENGTH,
    MAX_PASSWORD_LENGTH_BYTES,
    MAX_PASSWORD_LENGTH_CHARS,
    MIN_PASSWORD_LENGTH,
    TOKEN_TYPE_BEARER,
)
from .database import create_schema, get_db_session, get_sync_engine
from .email import EmailResult, EmailSender, get_email_sender
from .exceptions import (
    AnalysisError,
    AppException,
    AuthenticationError,
    EmailDeliveryError,
    EmailNotVerifiedError,
    ErrorType,
    ForbiddenError,
    InvalidCredentialsError,
    RateLimitError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)
from .error_handlers import register_error_handlers
from .logging_config import setup_logging
from .storage_client import StorageClient, get_minio_client, get_storage_client_wrapper

__all__ = [
    # Database
    "get_sync_engine",
    "get_db_session",
    "create_schema",
    # Storage
    "get_minio_client",
    "StorageClient",
    "get_storage_client_wrapper",
    # Email
    "EmailSender",
    "EmailResult",
    "get_email_sender",
    # Error Handlers
    "register_error_handlers",
    # Logging
    "setup_logging",
    # Exceptions
    "AppException",
    "StorageError",
    "ErrorType",
    "AnalysisError",
    "EmailDeliveryError",
    "AuthenticationError",
    "UnauthorizedError",
    "ForbiddenError",
    "EmailNotVerifiedError",
    "InvalidCredentialsError",
    "ResourceNotFoundError",
    "ResourceAlreadyExistsError",
    "ValidationError",
    "RateLimitError",
    # Auth
    "VerificationOutcome",
    "create_user",
    "authenticate_user",
    "create_access_token",
    "verify_token",
    "verify_email_token",
    "refresh_verification_token",
    "get_current_user",
    # Constants
    "MAX_PASSWORD_LENGTH_BYTES",
    "MIN_PASSWORD_LENGTH",
    "MAX_PASSWORD_LENGTH_CHARS",
    "TOKEN_TYPE_BEARER",
    "HTTP_TIMEOUT_SECONDS",
    "MAX_CONTENT_LENGTH",
    "ALLOWED_UPLOAD_TYPES",
]
