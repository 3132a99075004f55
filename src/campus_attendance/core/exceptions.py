class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a referenced row does not exist."""

    status_code = 404


# Check-in failures. Each one maps onto the HTTP status returned to the scanner.


class CheckInError(DomainError):
    """Base class for failures of the QR check-in flow."""


class InputMissingError(CheckInError):
    """The scan code or the session-derived student is absent."""


class ScanCodeNotFoundError(CheckInError):
    """No active scan code matches the submitted value."""


class ScanCodeExpiredError(CheckInError):
    """The scan code exists but its expiry is at or before now."""


class LookupFailureError(CheckInError):
    """The session or module behind a valid scan code could not be loaded."""

    status_code = 500


class WriteFailureError(CheckInError):
    """The store rejected the attendance insert."""

    status_code = 500


class DuplicateRecordError(DomainError):
    """Raised by repositories when a unique key rejects an insert."""

    status_code = 409
