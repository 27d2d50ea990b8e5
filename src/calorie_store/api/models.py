"""Request models for the local HTTP API."""

from pydantic import BaseModel


class PasswordRequest(BaseModel):
    """Password submitted by the UI."""

    password: str
    remember: bool = False


class VerifyRequest(BaseModel):
    password: str
