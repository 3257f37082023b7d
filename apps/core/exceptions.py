"""
Service-layer error taxonomy.

Services raise these instead of returning None so the API layer can map
every failure to one HTTP status. The handlers live in config/urls.py.
"""


class ServiceError(Exception):
    """Base class for expected, caller-facing failures."""
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(ServiceError):
    """Malformed body or shape (e.g. assigned_to is not a list)."""
    status_code = 400
    default_message = "Invalid input"


class Conflict(ServiceError):
    # Reported as 400 to keep the API's status set to 400/401/403/404/500
    status_code = 400
    default_message = "Resource already exists"


class Unauthorized(ServiceError):
    """Missing or invalid credentials or token."""
    status_code = 401
    default_message = "Not authorized"


class Forbidden(ServiceError):
    """Authenticated, but outside the tenant or ownership scope."""
    status_code = 403
    default_message = "Not authorized"


class NotFound(ServiceError):
    status_code = 404
    default_message = "Not found"
