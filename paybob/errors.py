class PayBobError(Exception):
    """Base class for errors raised by PayBob operations."""


class ValidationError(PayBobError):
    """Caller-supplied input violates a precondition. Nothing was written."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class StoreError(PayBobError):
    """The record store could not commit. The attempted change was discarded."""

    def __init__(self, message: str, original: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original = original
