"""Domain model for a login session."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SessionContext:
    """Credentials for one login session.

    A ``password`` of None means records are written and read as plaintext.
    The password is excluded from ``repr`` so it cannot leak into logs.
    """

    password: str | None = field(default=None, repr=False)

    @property
    def encrypted(self) -> bool:
        """Return True when the session encrypts what it writes."""
        return self.password is not None


def password_of(session: SessionContext | None) -> str | None:
    """Return the session password, treating a missing session as plaintext."""
    return session.password if session is not None else None
