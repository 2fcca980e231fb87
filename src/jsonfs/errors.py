"""Exceptions raised by jsonfs."""

from __future__ import annotations


class JsonFsError(Exception):
    """Base for all jsonfs errors."""


class InvalidArgumentError(JsonFsError, ValueError):
    """A required argument was missing or empty. Raised before any I/O."""


class StorageError(JsonFsError):
    """A load, save or insert failed.

    The original exception is always chained as ``__cause__``; the attributes
    carry whatever context was known at the point of failure.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str = "",
        item_type: str = "",
        item_id: str = "",
        file_name: str = "",
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.item_type = item_type
        self.item_id = item_id
        self.file_name = file_name

    def causes(self) -> list[BaseException]:
        """Chain of underlying causes, outermost first (self excluded)."""
        chain: list[BaseException] = []
        exc = self.__cause__
        while exc is not None and exc not in chain:
            chain.append(exc)
            exc = exc.__cause__
        return chain

    @property
    def root_cause(self) -> BaseException | None:
        chain = self.causes()
        return chain[-1] if chain else None


def require(value: object, name: str) -> None:
    """Raise InvalidArgumentError if value is None or an empty string."""
    if value is None or (isinstance(value, str) and not value):
        msg = f"{name} is required"
        raise InvalidArgumentError(msg)
