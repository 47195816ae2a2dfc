"""Error taxonomy shared by the validation, filter and aggregation layers."""

from __future__ import annotations


class AnalyticsError(RuntimeError):
    """Base class for errors surfaced to API clients as ``{"error": ...}``."""

    status_code = 500


class ValidationError(AnalyticsError):
    """Raised when request parameters are rejected before any aggregation."""

    status_code = 400


class InvalidDateFormat(ValidationError):
    def __init__(self) -> None:
        super().__init__("Invalid date format")


class InvalidDateRange(ValidationError):
    def __init__(self) -> None:
        super().__init__("Start date cannot be after end date")


class FutureDateRange(ValidationError):
    def __init__(self) -> None:
        super().__init__("Dates cannot be in the future")


class NonNumericRange(ValidationError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field} must be numeric")


class InvertedRange(ValidationError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Minimum {field} cannot be greater than maximum")


class HourOutOfBounds(ValidationError):
    def __init__(self) -> None:
        super().__init__("Hour must be between 0 and 23")


class InvalidParameter(ValidationError):
    """A query parameter outside the validated ranges is malformed."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(message)


class NotFoundError(AnalyticsError):
    status_code = 404

    def __init__(self, message: str = "Endpoint not found") -> None:
        super().__init__(message)


class DataIntegrityError(AnalyticsError):
    """The stored dataset is unreadable or internally inconsistent."""

    status_code = 500


__all__ = [
    "AnalyticsError",
    "DataIntegrityError",
    "FutureDateRange",
    "HourOutOfBounds",
    "InvalidDateFormat",
    "InvalidDateRange",
    "InvalidParameter",
    "InvertedRange",
    "NonNumericRange",
    "NotFoundError",
    "ValidationError",
]
