"""Errors raised by the nutrition services."""


class NutriLedgerError(Exception):
    """Base class for errors the API maps to client responses."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(NutriLedgerError):
    """Input is well-formed but violates a business rule."""

    status_code = 400


class ForbiddenError(NutriLedgerError):
    """The caller owns the record but the operation is not allowed on it."""

    status_code = 403


class NotFoundError(NutriLedgerError):
    """Record is missing or belongs to another user."""

    status_code = 404


class ConflictError(NutriLedgerError):
    """Write would duplicate a uniquely keyed record."""

    status_code = 409
