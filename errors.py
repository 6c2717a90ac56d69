# errors.py
from typing import Optional

from fastapi import status


class AppError(Exception):
    """Error reported to the client as ``{"error": message}``."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "All fields are required"


class AlreadyExists(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "User already exists"


class NotFound(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "User not found"


class UserNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid token"


class StoreFailure(AppError):
    message = "Database error"
