"""Dependency container wiring for the application."""

from dataclasses import dataclass

from calorie_store.adapters.cipher import PasswordCipher
from calorie_store.adapters.file_document_repository import FileDocumentRepository
from calorie_store.adapters.file_record_repository import FileRecordRepository
from calorie_store.adapters.record_codec import RecordCodec
from calorie_store.config import PASSWORD_FILE, SETTINGS_FILE, Settings
from calorie_store.services.export import ExportService
from calorie_store.services.library import LibraryService
from calorie_store.services.records import RecordStore
from calorie_store.services.search import SearchService
from calorie_store.services.sessions import SessionManager
from calorie_store.services.settings_document import SettingsDocumentService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_manager: SessionManager
    record_store: RecordStore
    settings_service: SettingsDocumentService
    library_service: LibraryService
    search_service: SearchService
    export_service: ExportService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    root = resolved_settings.root
    cipher = PasswordCipher(iterations=resolved_settings.kdf_iterations)
    record_store = RecordStore(
        repository=FileRecordRepository(root),
        codec=RecordCodec(cipher),
    )
    settings_service = SettingsDocumentService(
        repository=FileDocumentRepository(root / SETTINGS_FILE),
        cipher=cipher,
    )
    session_manager = SessionManager(
        settings_service=settings_service,
        password_repository=FileDocumentRepository(root / PASSWORD_FILE),
        cipher=cipher,
        app_identity=resolved_settings.app_identity,
    )
    return AppContainer(
        settings=resolved_settings,
        session_manager=session_manager,
        record_store=record_store,
        settings_service=settings_service,
        library_service=LibraryService(
            settings_service=settings_service,
            recent_meals_limit=resolved_settings.recent_meals_limit,
        ),
        search_service=SearchService(record_store),
        export_service=ExportService(record_store),
    )
