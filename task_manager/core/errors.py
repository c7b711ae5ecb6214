from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base for errors that map straight onto the response envelope."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        super().__init__(status_code=self.status_code, detail=message or self.default_message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized to access this route. Please login."


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to access this resource"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class Conflict(AppError):
    # duplicate email is answered with 400, not 409
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists"


class Internal(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
