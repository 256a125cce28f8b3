from __future__ import annotations


class StorageError(Exception):
    """Base class for every failure raised by the storage layer."""

    kind = "storage"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class StorageIOError(StorageError):
    kind = "io"

    def __init__(self, error: OSError | str):
        super().__init__(f"IO error: {error}")


class SerializationError(StorageError):
    kind = "serialization"

    def __init__(self, detail: object):
        super().__init__(f"JSON serialization error: {detail}")


class DataDirNotFoundError(StorageError):
    kind = "data_dir_not_found"

    def __init__(self):
        super().__init__("App data directory not found")


class TripNotFoundError(StorageError):
    kind = "trip_not_found"

    def __init__(self, trip_id: str):
        super().__init__(f"Trip not found: {trip_id}")
        self.trip_id = trip_id


class InvalidTripDataError(StorageError):
    # Reserved for semantic validation; no storage operation raises it yet.
    kind = "invalid_trip_data"

    def __init__(self, detail: str):
        super().__init__(f"Invalid trip data: {detail}")
