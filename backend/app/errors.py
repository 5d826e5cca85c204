from typing import Any, Dict, Optional

# Error codes shared with the frontend
AUTH_UNAUTHORIZED = "AUTH_004"
INVALID_INPUT = "VAL_002"
NOT_FOUND = "DB_002"
AI_SERVICE_ERROR = "AI_001"
INTERNAL_ERROR = "ERR_001"
BAD_REQUEST = "ERR_002"
CONFLICT = "ERR_003"


class AppError(Exception):
    """
    Base class for errors raised by the API layer.

    Attributes:
        code (str): stable error identifier, e.g. 'DB_002'
        message (str): human readable message
        status_code (int): HTTP status returned to the client
        details (Optional[Dict[str, Any]]): extra debugging information
    """
    status_code = 500

    def __init__(
        self,
        code: str,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(f"[{code}] {message}")


class BadRequestError(AppError):
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code=INVALID_INPUT, message=message, details=details)


class UnauthorizedError(AppError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(code=AUTH_UNAUTHORIZED, message=message)


class ForbiddenError(AppError):
    status_code = 403

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(code=AUTH_UNAUTHORIZED, message=message)


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, message: str):
        super().__init__(code=NOT_FOUND, message=message)


class ConflictError(AppError):
    status_code = 409

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code=CONFLICT, message=message, details=details)


class LLMServiceError(AppError):
    """Raised when the completion API call fails or returns nothing usable"""
    status_code = 502

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code=AI_SERVICE_ERROR, message=message, details=details)
