from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticSerializationError

from .config import resolve_data_dir
from .errors import SerializationError, StorageIOError, TripNotFoundError
from .schemas import KNOWN_TRIP_STATUSES, Trip, TripSummary, UserPreferences, dump_record

logger = logging.getLogger(__name__)

RECORD_SUFFIX = ".json"
TRIPS_DIRNAME = "trips"
CONVERSATIONS_DIRNAME = "conversations"
PREFERENCES_FILENAME = "preferences.json"
RECORD_FILE_MODE = 0o644

RecordT = TypeVar("RecordT", bound=BaseModel)


class StorageManager:
    """Maps trip and preference records onto JSON files under one data directory.

    Layout::

        <data_dir>/trips/<id>.json
        <data_dir>/conversations/
        <data_dir>/preferences.json

    Every call goes straight to disk. No locking is done, so callers that need
    read-modify-write consistency have to serialise access themselves.
    """

    def __init__(self, data_dir: Path | str):
        self._data_dir = Path(data_dir)
        self._trips_dir = self._data_dir / TRIPS_DIRNAME
        self._conversations_dir = self._data_dir / CONVERSATIONS_DIRNAME

        try:
            self._trips_dir.mkdir(parents=True, exist_ok=True)
            self._conversations_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageIOError(exc) from exc

    @classmethod
    def from_environment(cls) -> "StorageManager":
        return cls(resolve_data_dir())

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def trips_dir(self) -> Path:
        return self._trips_dir

    @property
    def conversations_dir(self) -> Path:
        return self._conversations_dir

    @property
    def preferences_path(self) -> Path:
        return self._data_dir / PREFERENCES_FILENAME

    def _trip_path(self, trip_id: str) -> Path:
        return self._trips_dir / f"{trip_id}{RECORD_SUFFIX}"

    def save_trip(self, trip: Trip) -> None:
        if trip.status not in KNOWN_TRIP_STATUSES:
            logger.debug("Saving trip %s with unrecognised status %r", trip.id, trip.status)
        self._write_record(self._trip_path(trip.id), trip)
        logger.debug("Saved trip %s", trip.id)

    def load_trips(self) -> List[Trip]:
        try:
            paths = [path for path in self._trips_dir.iterdir() if path.suffix == RECORD_SUFFIX]
        except OSError as exc:
            raise StorageIOError(exc) from exc

        trips = [self._read_record(path, Trip) for path in paths]
        trips.sort(key=lambda trip: trip.updated_at, reverse=True)
        return trips

    def list_trip_summaries(self) -> List[TripSummary]:
        return [TripSummary.from_trip(trip) for trip in self.load_trips()]

    def load_trip(self, trip_id: str) -> Trip:
        path = self._trip_path(trip_id)
        if not path.exists():
            raise TripNotFoundError(trip_id)
        return self._read_record(path, Trip)

    def delete_trip(self, trip_id: str) -> None:
        path = self._trip_path(trip_id)
        if not path.exists():
            raise TripNotFoundError(trip_id)
        try:
            path.unlink()
        except OSError as exc:
            raise StorageIOError(exc) from exc
        logger.debug("Deleted trip %s", trip_id)

    def trip_exists(self, trip_id: str) -> bool:
        try:
            return self._trip_path(trip_id).is_file()
        except (OSError, ValueError):
            return False

    def save_preferences(self, prefs: UserPreferences) -> None:
        self._write_record(self.preferences_path, prefs)
        logger.debug("Saved preferences")

    def load_preferences(self) -> Optional[UserPreferences]:
        path = self.preferences_path
        if not path.exists():
            return None
        return self._read_record(path, UserPreferences)

    def _read_record(self, path: Path, model: Type[RecordT]) -> RecordT:
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageIOError(exc) from exc
        except UnicodeDecodeError as exc:
            logger.warning("Record file %s is not valid UTF-8", path)
            raise SerializationError(exc) from exc

        try:
            return model.model_validate_json(content)
        except ValidationError as exc:
            logger.warning("Record file %s could not be parsed: %s", path, exc.errors(include_url=False))
            raise SerializationError(exc) from exc

    def _write_record(self, path: Path, record: BaseModel) -> None:
        try:
            payload = dump_record(record)
        except PydanticSerializationError as exc:
            raise SerializationError(exc) from exc

        # Stage next to the target so the rename stays on one filesystem.
        try:
            fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.stem}_", suffix=".tmp")
        except OSError as exc:
            raise StorageIOError(exc) from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            # mkstemp creates the file owner-only; records use the usual 0644.
            os.chmod(tmp_path, RECORD_FILE_MODE)
            os.replace(tmp_path, path)
        except OSError as exc:
            self._discard(tmp_path)
            raise StorageIOError(exc) from exc
        except BaseException:
            self._discard(tmp_path)
            raise

    @staticmethod
    def _discard(tmp_path: str) -> None:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not remove staging file %s: %s", tmp_path, exc)
