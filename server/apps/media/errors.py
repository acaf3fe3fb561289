"""Operation error collection for the media app.

Expected failures (name collisions, non-empty folders, storage refusals)
are never raised. They are recorded in an ``ErrorSink`` owned by the
caller and returned alongside a boolean or count result.
"""

import enum
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import final, override

logger = logging.getLogger(__name__)


class ErrorKind(enum.StrEnum):
    """Category of a recorded operation error."""

    PRECONDITION = 'precondition'
    STORAGE = 'storage'
    BATCH = 'batch'


@final
@dataclass(frozen=True, slots=True)
class OperationError:
    """Human-readable description of one failed operation step."""

    kind: ErrorKind
    message: str

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.message


@final
class ErrorSink:
    """Append-only accumulator of operation errors.

    One sink belongs to one logical operation cycle (typically one
    request). It is never reset by the operations that write to it;
    sharing a sink between concurrent operations is not supported.
    """

    def __init__(self) -> None:
        """Initialize an empty sink."""
        self._errors: list[OperationError] = []

    def add(self, kind: ErrorKind, message: str) -> OperationError:
        """Record an error.

        Args:
            kind: Error category.
            message: Human-readable reason.

        Returns:
            The recorded error.
        """
        error = OperationError(kind=kind, message=message)
        self._errors.append(error)
        logger.warning('Media operation failed (%s): %s', kind, message)
        return error

    def messages(self) -> list[str]:
        """Get recorded messages in the order they were added.

        Returns:
            List of error messages.
        """
        return [error.message for error in self._errors]

    def of_kind(self, kind: ErrorKind) -> list[OperationError]:
        """Get recorded errors of a single category.

        Args:
            kind: Error category to select.

        Returns:
            Matching errors in insertion order.
        """
        return [error for error in self._errors if error.kind == kind]

    def __iter__(self) -> Iterator[OperationError]:
        """Iterate over recorded errors."""
        return iter(tuple(self._errors))

    def __len__(self) -> int:
        """Number of recorded errors."""
        return len(self._errors)
