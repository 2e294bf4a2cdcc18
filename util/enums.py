# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class RiskLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    INVALID_API_KEY = ErrorInfo("Invalid API Key", status.HTTP_401_UNAUTHORIZED)
    INTERNAL_ERROR = ErrorInfo("Internal Error", status.HTTP_502_BAD_GATEWAY)
    MISSING_API_KEY = ErrorInfo(
        "GEMINI_API_KEY not found", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    KNOWLEDGE_BASE_NOT_FOUND = ErrorInfo(
        "Knowledge base not found", status.HTTP_404_NOT_FOUND
    )
    PROMPT_NOT_FOUND = ErrorInfo("Prompt not found", status.HTTP_404_NOT_FOUND)
    PROMPT_INACTIVE = ErrorInfo("Prompt is not active", status.HTTP_400_BAD_REQUEST)
    PROMPT_INVALID = ErrorInfo("Prompt template failed validation", 422)
    STORE_NOT_CONFIGURED = ErrorInfo(
        "Prompt store is not configured", status.HTTP_503_SERVICE_UNAVAILABLE
    )
    STORE_ERROR = ErrorInfo("Store request failed", status.HTTP_502_BAD_GATEWAY)
    REPORT_NOT_FOUND = ErrorInfo("Unknown or expired reportId", status.HTTP_404_NOT_FOUND)
    UNSUPPORTED_DOCUMENT = ErrorInfo(
        "Unsupported document type", status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    )
