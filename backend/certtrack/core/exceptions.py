"""
Custom Exceptions for CertTrack
===============================

Repositories and services raise these; the API layer maps them to HTTP
responses through a single exception handler (see certtrack.main).

Usage:
    from certtrack.core.exceptions import CertificationNotFoundError

    if not certification:
        raise CertificationNotFoundError(certification_id)
"""

from typing import Optional, Any, Dict


class CertTrackError(Exception):
    """Base exception for all CertTrack errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(CertTrackError):
    """User authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class InvalidCredentialsError(AuthenticationError):
    """Unknown username or wrong password"""

    def __init__(self):
        super().__init__("Invalid credentials")
        self.code = "INVALID_CREDENTIALS"


class InvalidTokenError(AuthenticationError):
    """JWT token is invalid or expired"""

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)
        self.code = "INVALID_TOKEN"


class AuthorizationError(CertTrackError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(CertTrackError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class CertificationNotFoundError(ResourceNotFoundError):
    """Certification not found"""

    def __init__(self, certification_id: str):
        super().__init__("Certification", certification_id)


class UserNotFoundError(ResourceNotFoundError):
    """User not found"""

    def __init__(self, user_id: str):
        super().__init__("User", user_id)


# ============================================
# Conflict Errors (409-type)
# ============================================

class ConflictError(CertTrackError):
    """Resource already exists"""

    status_code = 409

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFLICT", details=details)


class UsernameTakenError(ConflictError):
    """Username already registered"""

    def __init__(self, username: str):
        super().__init__("Username already exists", details={"username": username})
        self.code = "USERNAME_TAKEN"


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(CertTrackError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class MissingFieldError(ValidationError):
    """A required field is missing or blank"""

    def __init__(self, field: str):
        super().__init__(f"Missing required field: {field}", field=field)
        self.code = "MISSING_FIELD"


class InvalidDateRangeError(ValidationError):
    """Expiration date falls before issue date"""

    def __init__(self, issue_date: Any, expiration_date: Any):
        super().__init__(
            "Expiration date must be on or after issue date",
            field="expirationDate"
        )
        self.code = "INVALID_DATE_RANGE"
        self.details.update({
            "issue_date": str(issue_date),
            "expiration_date": str(expiration_date),
        })


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: CertTrackError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "error": error.to_dict()
    }
