"""Exceptions raised by the dedupe engine."""


class DedupeError(ValueError):
    """Base class for all validation failures raised while deduping."""


class VersionParseError(DedupeError):
    """A version string is not a well-formed semantic version."""

    def __init__(self, version):
        self.version = version
        super().__init__(f"Invalid semantic version: {version!r}")


class InvalidCriteriaError(DedupeError):
    """A criterion value is not one of exact, patch, minor, major or any."""

    def __init__(self, criteria):
        self.criteria = criteria
        super().__init__(
            f"Invalid criteria {criteria!r}, expected one of: exact, patch, minor, major, any"
        )


class MissingFieldError(DedupeError):
    """A package descriptor lacks a required field."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Package descriptor is missing required field: {field}")
