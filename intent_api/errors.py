"""
Service error taxonomy.

Every error the service reports to a caller is a ServiceError carrying its HTTP
status; the handlers in main.py render them as {"success": false, "error": ...}.
"""

from collections.abc import Iterable


class ServiceError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LeadValidationError(ServiceError):
    """A required categorical field is missing or not recognized."""

    status_code = 400

    def __init__(self, field: str, accepted: Iterable[str], value: str | None = None):
        self.field = field
        self.accepted = list(accepted)
        self.value = value
        choices = ", ".join(f'"{a}"' for a in self.accepted)
        if value:
            message = f"Unrecognized value \"{value}\" for '{field}'. Accepted values: {choices}"
        else:
            message = f"Missing required field '{field}'. Accepted values: {choices}"
        super().__init__(message)


class PayloadError(ServiceError):
    """The request body is not a JSON object."""

    status_code = 400


class PayloadTooLarge(ServiceError):
    status_code = 413


class CollaboratorError(ServiceError):
    """An outbound call (LLM, CRM) failed. Never retried here."""

    status_code = 500

    def __init__(self, collaborator: str, cause: str):
        self.collaborator = collaborator
        super().__init__(f"{collaborator} call failed: {cause}")


class RateLimitExceeded(ServiceError):
    status_code = 429

    def __init__(self, retry_after: float):
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded. Retry after {retry_after:.0f} seconds.")


class ProfileError(ValueError):
    """A scoring profile could not be loaded or is internally inconsistent."""
