"""
Schemas модуль с Pydantic моделями
"""

from .auth import (
    MessageOnlyResponse,
    ResendVerificationRequest,
    SignupResponse,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from .requests import AnalyzeRequest, DetectRequest
from .responses import (
    AnalyzeResponse,
    CategoryInfoResponse,
    CategoryListResponse,
    CleanupResponse,
    FileUploadResponse,
    HealthResponse,
    UsageResponse,
)

__all__ = [
    "AnalyzeRequest",
    "DetectRequest",
    "AnalyzeResponse",
    "CategoryInfoResponse",
    "CategoryListResponse",
    "CleanupResponse",
    "FileUploadResponse",
    "HealthResponse",
    "UsageResponse",
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "TokenResponse",
    "SignupResponse",
    "ResendVerificationRequest",
    "MessageOnlyResponse",
]
