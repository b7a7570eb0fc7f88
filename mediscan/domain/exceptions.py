from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors. Carries the HTTP status the API layer maps it to."""

    status_code = 500
    default_message = "Something went wrong!"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class BadRequestError(DomainError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Bad request"


class UnauthorizedError(DomainError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(DomainError):
    """Authenticated but not allowed."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(DomainError):
    """Referenced resource does not exist."""

    status_code = 404
    default_message = "Not found"


class ConflictError(DomainError):
    """Uniqueness violation."""

    status_code = 409
    default_message = "Conflict"


class ExternalServiceError(DomainError):
    """Third-party call failed or returned an unusable answer."""

    status_code = 502
    default_message = "External service failure"


class InvalidCredentialsError(UnauthorizedError):
    """Unknown email, wrong password or locked account. Deliberately indistinguishable."""

    default_message = "Invalid credentials"


class RefreshTokenInvalidError(UnauthorizedError):
    """Refresh token missing, expired or signed with the wrong secret."""

    default_message = "Invalid refresh token"


class ExternalTokenValidationError(UnauthorizedError):
    """Identity provider token could not be verified."""

    default_message = "Invalid identity provider token"


class UserInactiveError(ForbiddenError):
    """Account is soft-deleted."""

    default_message = "User is inactive"


class EmailAlreadyExistsError(ConflictError):
    """Email is already registered."""

    default_message = "User already exists"


class UsernameAlreadyExistsError(ConflictError):
    """Username is already taken."""

    default_message = "Username already in use"


class DisallowedFieldsError(BadRequestError):
    """Update payload contains keys outside the allow-list."""

    def __init__(self, fields: list[str]):
        self.fields = sorted(fields)
        super().__init__(f"Fields not allowed: {', '.join(self.fields)}")


class UserNotFoundError(NotFoundError):
    default_message = "User not found"


class ChatNotFoundError(NotFoundError):
    default_message = "Chat not found"


class HealthRecordNotFoundError(NotFoundError):
    default_message = "Health record not found"


class InvalidRecordTypeError(BadRequestError):
    default_message = "Invalid record type"


class VisionAnalysisError(ExternalServiceError):
    """Vision model call failed or its answer was not valid JSON."""

    default_message = "Failed to parse analysis results"
