from fastapi import Request
from fastapi.responses import JSONResponse


class DevwatchError(Exception):
    """Base exception for devwatch errors."""

    def __init__(
        self,
        code: str,
        message: str,
        status: int = 500,
        details: dict | None = None,
    ):
        self.code = code
        self.message = message
        self.status = status
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        result = {
            "error": {
                "code": self.code,
                "message": self.message,
                "status": self.status,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class InvalidArgumentError(DevwatchError):
    def __init__(self, message: str = "Invalid argument.", details: dict | None = None):
        super().__init__(code="invalid_argument", message=message, status=400, details=details)


class NotFoundError(DevwatchError):
    def __init__(self, message: str = "Resource not found.", details: dict | None = None):
        super().__init__(code="not_found", message=message, status=404, details=details)


class ConflictError(DevwatchError):
    def __init__(self, message: str = "Resource state conflict.", details: dict | None = None):
        super().__init__(code="conflict", message=message, status=409, details=details)


async def devwatch_error_handler(request: Request, exc: DevwatchError) -> JSONResponse:
    """Global exception handler for DevwatchError and subclasses."""
    return JSONResponse(status_code=exc.status, content=exc.to_dict())
