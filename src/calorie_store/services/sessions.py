"""Login session lifecycle and password verification."""

import logging
from dataclasses import dataclass, field

from calorie_store.adapters.cipher import PasswordCipher
from calorie_store.domain.errors import (
    CorruptSettings,
    DecryptionError,
    SessionRequired,
    StorageUnavailable,
)
from calorie_store.domain.sessions import SessionContext
from calorie_store.services.settings_document import (
    DocumentRepository,
    SettingsDocumentService,
)

logger = logging.getLogger(__name__)


@dataclass
class SessionManager:
    """Owns the active session and the optional remembered password.

    Passwords are verified by decrypting the settings document, so no
    separate credential store exists. A remembered password is encrypted
    under the application identity, never under itself.
    """

    settings_service: SettingsDocumentService
    password_repository: DocumentRepository
    cipher: PasswordCipher = field(default_factory=PasswordCipher)
    app_identity: str = "calorie-tracker"
    current: SessionContext | None = field(default=None, init=False)

    def set_password(self, password: str, remember: bool = False) -> SessionContext:
        """Start a session with a password, optionally remembering it."""
        session = self._start(password)
        if remember:
            try:
                self.password_repository.write(
                    self.cipher.encrypt(password, self.app_identity)
                )
            except StorageUnavailable:
                logger.warning("Could not save the remembered password file")
        return session

    def verify_password(self, candidate: str) -> SessionContext | None:
        """Start a session if the candidate decrypts the settings document.

        With no settings document yet, any password is accepted. On failure
        no session is active afterwards.
        """
        if not self.settings_service.exists():
            logger.info("No settings document yet, accepting the first password")
            return self._start(candidate)
        try:
            self.settings_service.read_payload(SessionContext(password=candidate))
        except CorruptSettings:
            logger.info("Password verification failed")
            self.current = None
            return None
        return self._start(candidate)

    def get_saved_password(self) -> str | None:
        """Return the remembered password, or None if there is none."""
        try:
            blob = self.password_repository.read()
        except StorageUnavailable:
            logger.warning("Could not read the remembered password file")
            return None
        if blob is None:
            return None
        try:
            return self.cipher.decrypt(blob, self.app_identity)
        except DecryptionError:
            logger.warning("Remembered password file is unreadable")
            return None

    def clear_saved_password(self) -> bool:
        """Forget the remembered password; a missing file counts as success."""
        try:
            self.password_repository.delete()
        except StorageUnavailable:
            logger.warning("Could not delete the remembered password file")
            return False
        return True

    def logout(self) -> None:
        """End the active session."""
        self.current = None

    def require_session(self) -> SessionContext:
        """Return the active session or raise ``SessionRequired``."""
        if self.current is None:
            raise SessionRequired("No active session")
        return self.current

    def _start(self, password: str) -> SessionContext:
        self.current = SessionContext(password=password)
        return self.current
