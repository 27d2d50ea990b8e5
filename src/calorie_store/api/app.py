"""FastAPI application factory."""

import logging

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from calorie_store.api.models import PasswordRequest, VerifyRequest
from calorie_store.app_logging import configure_logging
from calorie_store.containers import AppContainer
from calorie_store.domain.errors import (
    CalorieStoreError,
    CorruptSettings,
    DecryptionError,
    RecordNotFound,
    SessionRequired,
    StorageUnavailable,
    ValidationError,
)
from calorie_store.domain.records import DailyRecord, StoredRecord

_STATUS_BY_ERROR: list[tuple[type[CalorieStoreError], int]] = [
    (ValidationError, 422),
    (RecordNotFound, status.HTTP_404_NOT_FOUND),
    (StorageUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
    (DecryptionError, status.HTTP_401_UNAUTHORIZED),
    (SessionRequired, status.HTTP_401_UNAUTHORIZED),
    (CorruptSettings, status.HTTP_409_CONFLICT),
]

_MEDIA_TYPES = {"csv": "text/csv", "json": "application/json"}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Calorie Store")
    app.state.container = container

    @app.exception_handler(CalorieStoreError)
    async def store_error_handler(
        request: Request, exc: CalorieStoreError
    ) -> JSONResponse:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        for error_type, code in _STATUS_BY_ERROR:
            if isinstance(exc, error_type):
                status_code = code
                break
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Store error on %s: %s", request.url.path, exc)
        content: dict[str, object] = {
            "success": False,
            "error": type(exc).__name__,
            "detail": str(exc),
        }
        if isinstance(exc, ValidationError):
            content["fields"] = [
                {"field": error.field, "message": error.message}
                for error in exc.field_errors
            ]
        return JSONResponse(status_code=status_code, content=content)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/storage/ready")
    def storage_ready() -> dict[str, str]:
        """Create the data folder layout if needed."""
        container.record_store.ensure_ready()
        return {"dataPath": str(container.settings.root)}

    @app.post("/session/password")
    def set_password(payload: PasswordRequest) -> dict[str, bool]:
        """Start a session with a new password."""
        container.session_manager.set_password(payload.password, payload.remember)
        return {"success": True}

    @app.post("/session/verify")
    def verify_password(payload: VerifyRequest) -> dict[str, bool]:
        """Check a password against the stored settings."""
        session = container.session_manager.verify_password(payload.password)
        return {"valid": session is not None}

    @app.get("/session/saved-password")
    def get_saved_password() -> dict[str, str | None]:
        """Return the remembered password, if any."""
        return {"password": container.session_manager.get_saved_password()}

    @app.delete("/session/saved-password")
    def clear_saved_password() -> dict[str, bool]:
        """Forget the remembered password."""
        return {"success": container.session_manager.clear_saved_password()}

    @app.post("/session/logout")
    def logout() -> dict[str, bool]:
        """End the active session."""
        container.session_manager.logout()
        return {"success": True}

    @app.get("/entries")
    def list_entries(
        start: str | None = None, end: str | None = None
    ) -> dict[str, object]:
        """Return records in a date range, most recent first."""
        session = container.session_manager.require_session()
        records = container.record_store.list_records(session, start, end)
        return {"entries": [_render(record) for record in records]}

    @app.get("/entries/{date}")
    def get_entry(date: str) -> dict[str, object]:
        """Return the record for a date."""
        session = container.session_manager.require_session()
        return _render(container.record_store.get(date, session))

    @app.put("/entries")
    def save_entry(entry: dict[str, object]) -> dict[str, object]:
        """Create or replace the record for the entry's date."""
        session = container.session_manager.require_session()
        record_id = container.record_store.save(entry, session)
        return {"success": True, "id": record_id}

    @app.delete("/entries/{date}")
    def delete_entry(date: str) -> dict[str, bool]:
        """Delete the record for a date."""
        container.session_manager.require_session()
        container.record_store.delete(date)
        return {"success": True}

    @app.get("/app-data")
    def get_app_data() -> dict[str, object]:
        """Return the settings document."""
        session = container.session_manager.require_session()
        return container.settings_service.load(session).to_json_dict()

    @app.put("/app-data")
    def save_app_data(document: dict[str, object]) -> dict[str, bool]:
        """Replace the settings document."""
        session = container.session_manager.require_session()
        container.settings_service.save(document, session)
        return {"success": True}

    @app.get("/search")
    def search_entries(
        q: str | None = None, tags: list[str] = Query(default=[])  # noqa: B008
    ) -> dict[str, object]:
        """Search notes, food names and tags across every record."""
        session = container.session_manager.require_session()
        records = container.search_service.search(session, q, tags)
        return {"entries": [_render(record) for record in records]}

    @app.get("/export")
    def export_entries(
        export_format: str = Query(alias="format"),
        start: str | None = None,
        end: str | None = None,
    ) -> PlainTextResponse:
        """Return a CSV or JSON export of a date range."""
        session = container.session_manager.require_session()
        if export_format not in _MEDIA_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported export format: {export_format}",
            )
        content = container.export_service.export(session, export_format, start, end)
        return PlainTextResponse(content, media_type=_MEDIA_TYPES[export_format])

    @app.get("/library/foods")
    def top_foods(limit: int = 20) -> dict[str, object]:
        """Return the most used saved foods."""
        session = container.session_manager.require_session()
        foods = container.library_service.top_foods(session, limit)
        return {"foods": [food.to_json_dict() for food in foods]}

    @app.post("/library/foods")
    def add_food(food: dict[str, object]) -> dict[str, object]:
        """Add or replace a saved food."""
        session = container.session_manager.require_session()
        saved = container.library_service.add_saved_food(session, food)
        return saved.to_json_dict()

    @app.delete("/library/foods/{food_id}")
    def remove_food(food_id: str) -> dict[str, bool]:
        """Remove a saved food."""
        session = container.session_manager.require_session()
        return {"success": container.library_service.remove_saved_food(session, food_id)}

    @app.post("/library/foods/{food_id}/use")
    def use_food(food_id: str) -> dict[str, object]:
        """Count one more use of a saved food."""
        session = container.session_manager.require_session()
        food = container.library_service.record_food_use(session, food_id)
        if food is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return food.to_json_dict()

    @app.post("/library/recent-meals")
    def remember_meal(meal: dict[str, object]) -> dict[str, object]:
        """Push a meal onto the recent meals list."""
        session = container.session_manager.require_session()
        recent = container.library_service.remember_meal(session, meal)
        return {"recentMeals": [item.to_json_dict() for item in recent]}

    @app.get("/library/weights")
    def weight_history() -> dict[str, object]:
        """Return weigh-ins oldest first."""
        session = container.session_manager.require_session()
        history = container.library_service.weight_history(session)
        return {"weightHistory": [item.to_json_dict() for item in history]}

    @app.post("/library/weights")
    def add_weight(entry: dict[str, object]) -> dict[str, object]:
        """Record a weigh-in."""
        session = container.session_manager.require_session()
        history = container.library_service.add_weight_entry(session, entry)
        return {"weightHistory": [item.to_json_dict() for item in history]}

    @app.delete("/library/weights/{date}")
    def remove_weight(date: str) -> dict[str, bool]:
        """Remove the weigh-in for a date."""
        session = container.session_manager.require_session()
        return {"success": container.library_service.remove_weight_entry(session, date)}

    return app


def _render(record: StoredRecord) -> dict[str, object]:
    if isinstance(record, DailyRecord):
        return {**record.to_json_dict(), "id": record.date, "readable": True}
    return {
        "id": record.date,
        "date": record.date,
        "readable": False,
        "reason": record.reason,
    }
