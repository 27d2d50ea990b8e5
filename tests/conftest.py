"""Shared test fixtures."""

import base64
import hashlib
import os
from dataclasses import dataclass, field

import pytest
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from calorie_store.adapters.cipher import PasswordCipher
from calorie_store.adapters.record_codec import RecordCodec
from calorie_store.config import Settings
from calorie_store.containers import AppContainer, build_container
from calorie_store.domain.sessions import SessionContext
from calorie_store.services.records import RecordRepository, RecordStore

TEST_ITERATIONS = 1_000
PASSWORD = "correct horse battery staple"

Food = tuple[str, float, float, float, float]


def make_record(  # noqa: PLR0913
    date: str,
    foods: tuple[Food, ...] = (("Oatmeal", 300, 10, 50, 6),),
    *,
    notes: str | None = None,
    tags: tuple[str, ...] = (),
    weight: float | None = None,
    exercise_calories: float | None = None,
    glasses: float = 8,
) -> dict[str, object]:
    """Build a raw daily record as the UI would submit it."""
    record: dict[str, object] = {
        "date": date,
        "meals": [
            {
                "id": f"meal-{date}",
                "mealType": "breakfast",
                "time": "08:00",
                "foods": [
                    {
                        "name": name,
                        "calories": calories,
                        "protein": protein,
                        "carbs": carbs,
                        "fats": fats,
                    }
                    for name, calories, protein, carbs, fats in foods
                ],
            }
        ],
        "water": {"glasses": glasses, "ounces": glasses * 8},
        "tags": list(tags),
    }
    if notes is not None:
        record["notes"] = notes
    if weight is not None:
        record["weight"] = weight
    if exercise_calories is not None:
        record["exercise"] = {
            "id": f"exercise-{date}",
            "type": "3G",
            "caloriesBurned": exercise_calories,
            "duration": 45,
        }
    return record


def encrypt_legacy(plaintext: str, password: str) -> str:
    """Encrypt like the earlier tracker versions (OpenSSL ``Salted__`` blobs)."""
    salt = os.urandom(8)
    derived = b""
    block = b""
    while len(derived) < 48:
        block = hashlib.md5(block + password.encode("utf-8") + salt).digest()  # noqa: S324
        derived += block
    key, iv = derived[:32], derived[32:48]
    padder = padding.PKCS7(128).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return base64.b64encode(b"Salted__" + salt + ciphertext).decode("ascii")


@dataclass
class InMemoryRecordRepository(RecordRepository):
    """In-memory record repository for tests."""

    files: dict[str, str] = field(default_factory=dict)
    unreadable: set[str] = field(default_factory=set)

    def ensure_ready(self) -> None:
        return None

    def list_dates(self) -> list[str]:
        return list(self.files)

    def read(self, date: str) -> str | None:
        if date in self.unreadable:
            raise PermissionError(f"cannot read {date}")
        return self.files.get(date)

    def write(self, date: str, text: str) -> None:
        self.files[date] = text

    def delete(self, date: str) -> bool:
        return self.files.pop(date, None) is not None


@pytest.fixture
def cipher() -> PasswordCipher:
    return PasswordCipher(iterations=TEST_ITERATIONS)


@pytest.fixture
def codec(cipher: PasswordCipher) -> RecordCodec:
    return RecordCodec(cipher)


@pytest.fixture
def session() -> SessionContext:
    return SessionContext(password=PASSWORD)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(data_path=tmp_path / "data", kdf_iterations=TEST_ITERATIONS)


@pytest.fixture
def container(settings: Settings) -> AppContainer:
    built = build_container(settings)
    built.record_store.ensure_ready()
    return built


@pytest.fixture
def record_store(container: AppContainer) -> RecordStore:
    return container.record_store


@pytest.fixture
def memory_store(codec: RecordCodec) -> RecordStore:
    return RecordStore(repository=InMemoryRecordRepository(), codec=codec)
