"""Exceptions raised by the record store and record operations."""


class RentalTrackerError(Exception):
    """Base class for every error raised by the tracker."""


class ValidationError(RentalTrackerError):
    """A required field was missing or blank when adding a record."""

    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(f"Missing or invalid fields: {', '.join(self.fields)}")


class StorageReadError(RentalTrackerError):
    """The persisted blob could not be decoded into a record list."""


class StorageWriteError(RentalTrackerError):
    """Writing the record collection to storage failed."""


class RecordNotFoundError(RentalTrackerError):
    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Record not found: {record_id}")


class ExportRefusedError(RentalTrackerError):
    """There is nothing to export."""
