# --- Service layer exception classes ---
# Each subclass maps to one HTTP status in main.py's exception handler.


class ServiceError(Exception):
    """General exception class for the service layer."""
    status_code = 400


class ValidationError(ServiceError):
    """Input that is well-formed but violates a business rule or references a missing row."""
    status_code = 400


class AuthenticationError(ServiceError):
    """Missing, invalid or expired credentials."""
    status_code = 401


class AuthorizationError(ServiceError):
    """An authenticated user acting outside their role or ownership."""
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    """Duplicate unique values, already-existing enrollments, rows still referenced elsewhere."""
    status_code = 409
