"""JWA errors."""
from typing import Any
from typing import Optional

from jose import exceptions as jose_exceptions


class Error(jose_exceptions.JOSEError):
    """Generic JWA error."""


class NotSupportedError(Error):
    """No algorithm is registered for the requested operation.

    :ivar alg: Requested algorithm identifier.
    :ivar str operation: Requested operation, if known.

    """
    def __init__(self, alg: Any, operation: Optional[str] = None, *args: Any) -> None:
        super().__init__(*args)
        self.alg = alg
        self.operation = operation

    def __str__(self) -> str:
        if self.operation is None:
            return 'Unsupported algorithm: {0!r}'.format(self.alg)
        return 'Unsupported algorithm {0!r} for {1}'.format(self.alg, self.operation)


class DataError(Error):
    """Malformed operation input."""


class ValidationError(Error):
    """Malformed JSON Web Key."""


class ProviderError(Error):
    """Failure reported by the cryptographic provider.

    :ivar error: Underlying exception, if any.

    """
    def __init__(self, message: str, error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.error = error
