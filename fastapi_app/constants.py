"""
Константы приложения
"""

# Chat constants
DEFAULT_CHAT_TITLE = "Новый анализ"
CHAT_TITLE_MAX_CHARS = 50
DEFAULT_CHAT_LIST_LIMIT = 100

# Message roles
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"

# File naming patterns
UPLOAD_OBJECT_PATTERN = "red-flag-detector/{chat_id}/{timestamp}-{filename}"

# HTTP Status Messages
STATUS_HEALTHY = "healthy"
STATUS_DEGRADED = "degraded"
STATUS_DISCONNECTED = "disconnected"
STATUS_CONNECTED = "connected"

# Service names
SERVICE_NAME = "Red Flag Detector"
SERVICE_VERSION = "1.0.0"

# Resource types for exceptions
RESOURCE_USER = "User"
RESOURCE_CHAT = "Chat"
RESOURCE_FILE = "File"
