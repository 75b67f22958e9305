from __future__ import annotations


class HeadsetKitError(Exception):
    pass


class InvalidArgumentError(HeadsetKitError, ValueError):
    """Raised on null or empty input to a public (de)serialization call."""


class SchemaViolationError(HeadsetKitError, ValueError):
    """Raised when an environment profile payload does not match the schema."""


class MalformedEntryError(HeadsetKitError, ValueError):
    """
    A single calibration array element could not be parsed.

    `name` is set when the element's name was read before the failure,
    otherwise callers identify the element by `index`.
    """

    def __init__(self, message: str, *, index: int, name: str | None = None) -> None:
        super().__init__(message)
        self.index = index
        self.name = name

    @property
    def label(self) -> str:
        if self.name is not None:
            return f"node named '{self.name}'"
        return f"node {self.index}"


class ReuseError(HeadsetKitError, RuntimeError):
    pass
