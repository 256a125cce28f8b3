from __future__ import annotations

from datetime import datetime, timezone

import pytest

from tripstore.schemas import Trip
from tripstore.storage import StorageManager


def build_trip(trip_id: str = "trip-1", updated_at: datetime | None = None, **overrides) -> Trip:
    payload = {
        "id": trip_id,
        "name": "Kyoto in spring",
        "destination": {
            "name": "Kyoto",
            "country": "Japan",
            "coordinates": {"lat": 35.0116, "lng": 135.7681},
        },
        "duration": {
            "start_date": "2026-04-01T00:00:00.000Z",
            "end_date": "2026-04-03T00:00:00.000Z",
            "days": 3,
        },
        "preferences": {
            "budget": {"min": 500, "max": 1500, "currency": "USD"},
            "interests": ["temples", "food"],
        },
        "itinerary": [
            {
                "day_number": 1,
                "date": "2026-04-01T00:00:00.000Z",
                "activities": [
                    {
                        "id": "act-1",
                        "type": "attraction",
                        "name": "Fushimi Inari",
                        "location": {"name": "Fushimi Inari Taisha", "address": "68 Fukakusa Yabunouchicho"},
                        "time": {"start": "08:00", "end": "10:30", "duration": 150},
                        "cost": 0,
                        "rating": 4.8,
                    }
                ],
                "estimated_budget": 80.5,
            }
        ],
        "status": "planning",
        "created_at": "2026-03-01T09:15:30.123Z",
        "updated_at": updated_at or datetime(2026, 3, 2, 12, 0, 0, 456000, tzinfo=timezone.utc),
    }
    payload.update(overrides)
    return Trip.model_validate(payload)


@pytest.fixture
def store(tmp_path) -> StorageManager:
    return StorageManager(tmp_path / "data")
