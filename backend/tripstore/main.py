from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

from .config import configure_logging, load_cors_origins
from .errors import InvalidTripDataError, StorageError
from .schemas import Trip, TripSummary, UserPreferences
from .storage import StorageManager

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    "trip_not_found": 404,
    "data_dir_not_found": 503,
    "invalid_trip_data": 422,
}


def get_storage(request: Request) -> StorageManager:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise HTTPException(status_code=503, detail="Storage is not initialised")
    return storage


async def storage_error_handler(_: Request, exc: StorageError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(exc.kind, 500)
    if status_code >= 500:
        logger.error("storage_error kind=%s detail=%s", exc.kind, exc)
    return JSONResponse(status_code=status_code, content={"kind": exc.kind, "detail": str(exc)})


def create_app(storage: Optional[StorageManager] = None) -> FastAPI:
    cors_origins = load_cors_origins()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()
        app.state.storage = storage or StorageManager.from_environment()
        logger.info(
            "startup_storage_config data_dir=%s cors_allow_origins=%s",
            app.state.storage.data_dir,
            cors_origins,
        )
        yield

    app = FastAPI(title="Trip Planner Storage API", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StorageError, storage_error_handler)

    @app.post("/trips", status_code=204)
    def create_trip(trip: Trip, store: StorageManager = Depends(get_storage)):
        store.save_trip(trip)
        return Response(status_code=204)

    @app.put("/trips/{trip_id}", status_code=204)
    def update_trip(trip_id: str, trip: Trip, store: StorageManager = Depends(get_storage)):
        if trip.id != trip_id:
            raise InvalidTripDataError(f"body id {trip.id!r} does not match path id {trip_id!r}")
        store.save_trip(trip)
        return Response(status_code=204)

    @app.get("/trips", response_model=List[Trip], response_model_exclude_none=True)
    def list_trips(store: StorageManager = Depends(get_storage)):
        return store.load_trips()

    @app.get("/trip_summaries", response_model=List[TripSummary])
    def list_trip_summaries(store: StorageManager = Depends(get_storage)):
        return store.list_trip_summaries()

    @app.get("/trips/{trip_id}", response_model=Trip, response_model_exclude_none=True)
    def get_trip(trip_id: str, store: StorageManager = Depends(get_storage)):
        return store.load_trip(trip_id)

    @app.delete("/trips/{trip_id}", status_code=204)
    def delete_trip(trip_id: str, store: StorageManager = Depends(get_storage)):
        store.delete_trip(trip_id)
        return Response(status_code=204)

    @app.get("/trips/{trip_id}/exists")
    def trip_exists(trip_id: str, store: StorageManager = Depends(get_storage)):
        return {"exists": store.trip_exists(trip_id)}

    @app.put("/preferences", status_code=204)
    def save_preferences(prefs: UserPreferences, store: StorageManager = Depends(get_storage)):
        store.save_preferences(prefs)
        return Response(status_code=204)

    @app.get("/preferences", response_model=Optional[UserPreferences], response_model_exclude_none=True)
    def get_preferences(store: StorageManager = Depends(get_storage)):
        return store.load_preferences()

    @app.get("/data_dir")
    def get_data_dir(store: StorageManager = Depends(get_storage)):
        return {"data_dir": str(store.data_dir)}

    @app.get("/health")
    def health(store: StorageManager = Depends(get_storage)):
        return {"status": "ok", "data_dir": str(store.data_dir)}

    return app


app = create_app()
