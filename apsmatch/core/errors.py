class ApsMatchError(Exception):
    """Base class for errors raised by apsmatch."""


class InvalidMarkValue(ApsMatchError, ValueError):
    """A mark is not numeric or lies outside 0-100."""

    def __init__(self, subject: str, value):
        self.subject = subject
        self.value = value
        super().__init__(f"{subject}: invalid mark {value!r} (expected 0-100)")


class ProfileFormatError(ApsMatchError, ValueError):
    """A profile blob cannot be turned into an academic record."""


class CatalogueError(ApsMatchError):
    """The degree catalogue is missing or malformed."""
