"""Exceptions raised by the CountriesDB validator."""


class ValidatorError(Exception):
    """Base exception for validator errors."""


class InvalidConfiguration(ValidatorError, ValueError):
    """The validator was constructed without a usable credential."""


class RequestError(ValidatorError):
    """
    A call to the validation API did not produce a usable response.

    Covers network failures, non-2xx responses and malformed bodies.
    ``status_code`` is None when no response was received.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationFailure(ValidatorError):
    """A batch validation call failed as a whole."""

    def __init__(self, message: str, operation: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.status_code = status_code
