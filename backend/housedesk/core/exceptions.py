"""Custom exceptions for application-specific error handling."""

from __future__ import annotations

from typing import Optional, Dict, Any


class HouseDeskException(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 400,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class NotFoundError(HouseDeskException):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "not_found", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="NOT_FOUND", details=details, status_code=404)


class ConflictError(HouseDeskException):
    """Raised when a request conflicts with current state."""

    def __init__(self, message: str = "conflict", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="CONFLICT", details=details, status_code=409)


class BadRequestError(HouseDeskException):
    """Raised when request is invalid."""

    def __init__(self, message: str = "bad_request", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="BAD_REQUEST", details=details, status_code=400)


# ===== TICKET LIFECYCLE EXCEPTIONS =====


class InvalidTransitionError(HouseDeskException):
    """Raised when a ticket cannot move from its current status to the requested one."""

    def __init__(
        self,
        message: str = "invalid_transition",
        *,
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "INVALID_TRANSITION",
        status_code: int = 409,
    ):
        super().__init__(message, error_code=error_code, details=details, status_code=status_code)


class InvalidStatusError(InvalidTransitionError):
    """Raised when a finalize target is not a terminal status."""

    def __init__(self, message: str = "invalid_status", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details, error_code="INVALID_STATUS", status_code=422)


# ===== CLASSIFIER EXCEPTIONS =====


class ClassifierUnavailableError(HouseDeskException):
    """Raised when the text classifier cannot be reached or answers garbage."""

    def __init__(self, message: str = "classifier_unavailable", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="CLASSIFIER_UNAVAILABLE", details=details, status_code=502)


# ===== DATABASE EXCEPTIONS =====


class StorageError(HouseDeskException):
    """Raised when a storage call fails; the request is aborted."""

    def __init__(self, message: str = "storage_error"):
        super().__init__(message, error_code="STORAGE_ERROR", status_code=500)


# ===== AUTHENTICATION/AUTHORIZATION EXCEPTIONS =====


class AuthenticationException(HouseDeskException):
    """Base exception for authentication errors."""


class ExpiredTokenError(AuthenticationException):
    """Raised when token has expired."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, error_code="EXPIRED_TOKEN", status_code=401)


class InsufficientPermissionsError(AuthenticationException):
    """Raised when user lacks required permissions."""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message, error_code="INSUFFICIENT_PERMISSIONS", status_code=403)
