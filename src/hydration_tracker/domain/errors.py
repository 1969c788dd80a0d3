"""Errors raised by the hydration tracker."""


class HydrationError(Exception):
    """Base class for hydration tracker errors."""


class ValidationError(HydrationError, ValueError):
    """Input rejected before reaching storage."""


class RecordNotFoundError(HydrationError, LookupError):
    """An intake record id does not exist."""

    def __init__(self, record_id: int) -> None:
        super().__init__(f"Intake record {record_id} not found")
        self.record_id = record_id


class StorageError(HydrationError, RuntimeError):
    """The durable storage backend failed."""
