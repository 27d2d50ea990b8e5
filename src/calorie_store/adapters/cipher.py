"""Password-based symmetric encryption for record bodies.

Blobs are base64 text. New blobs use PBKDF2-HMAC-SHA256 and AES-256-GCM:

    magic      : 4 bytes   -> b"CST1"
    iterations : u32 (big-endian)
    salt       : 16 bytes
    nonce      : 12 bytes
    ciphertext : remaining bytes (includes the GCM tag)

Blobs in the OpenSSL ``Salted__`` layout written by earlier versions of the
tracker (AES-256-CBC, key and IV from EVP_BytesToKey with MD5) can still be
decrypted so an existing data folder stays readable.
"""

import base64
import binascii
import hashlib
import os
import struct
from dataclasses import dataclass

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from calorie_store.domain.errors import DecryptionError

MAGIC = b"CST1"
LEGACY_MAGIC = b"Salted__"
DEFAULT_ITERATIONS = 100_000
MAX_ITERATIONS = 10_000_000
_SALT_LEN = 16
_NONCE_LEN = 12
_TAG_LEN = 16
_HEADER = struct.Struct(">4sI")


def _derive_key(password: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(), length=32, salt=salt, iterations=iterations
    )
    return kdf.derive(password.encode("utf-8"))


@dataclass(frozen=True)
class PasswordCipher:
    """Encrypts strings under a key derived from a password."""

    iterations: int = DEFAULT_ITERATIONS

    def encrypt(self, plaintext: str, password: str) -> str:
        """Encrypt with a fresh salt and nonce embedded in the blob."""
        salt = os.urandom(_SALT_LEN)
        nonce = os.urandom(_NONCE_LEN)
        key = _derive_key(password, salt, self.iterations)
        ciphertext = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
        raw = _HEADER.pack(MAGIC, self.iterations) + salt + nonce + ciphertext
        return base64.b64encode(raw).decode("ascii")

    def decrypt(self, blob: str, password: str) -> str:
        """Decrypt a blob, raising ``DecryptionError`` on any failure."""
        try:
            raw = base64.b64decode(blob.strip(), validate=True)
        except (binascii.Error, ValueError):
            raise DecryptionError("Ciphertext is not valid base64") from None
        if raw.startswith(LEGACY_MAGIC):
            plain = _decrypt_legacy(raw, password)
        elif raw.startswith(MAGIC):
            plain = _decrypt_current(raw, password)
        else:
            raise DecryptionError("Unrecognized ciphertext format")
        try:
            return plain.decode("utf-8")
        except UnicodeDecodeError:
            raise DecryptionError("Decrypted payload is not UTF-8") from None


def _decrypt_current(raw: bytes, password: str) -> bytes:
    body_start = _HEADER.size + _SALT_LEN + _NONCE_LEN
    if len(raw) < body_start + _TAG_LEN:
        raise DecryptionError("Ciphertext is truncated")
    _, iterations = _HEADER.unpack_from(raw)
    if not 0 < iterations <= MAX_ITERATIONS:
        raise DecryptionError("Ciphertext header is invalid")
    salt = raw[_HEADER.size : _HEADER.size + _SALT_LEN]
    nonce = raw[_HEADER.size + _SALT_LEN : body_start]
    key = _derive_key(password, salt, iterations)
    try:
        return AESGCM(key).decrypt(nonce, raw[body_start:], None)
    except InvalidTag:
        raise DecryptionError("Wrong password or corrupted ciphertext") from None


def _evp_bytes_to_key(password: bytes, salt: bytes) -> tuple[bytes, bytes]:
    derived = b""
    block = b""
    while len(derived) < 48:
        block = hashlib.md5(block + password + salt).digest()  # noqa: S324
        derived += block
    return derived[:32], derived[32:48]


def _decrypt_legacy(raw: bytes, password: str) -> bytes:
    salt = raw[8:16]
    ciphertext = raw[16:]
    if len(salt) != 8 or not ciphertext or len(ciphertext) % 16:
        raise DecryptionError("Ciphertext is truncated")
    key, iv = _evp_bytes_to_key(password.encode("utf-8"), salt)
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(128).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError:
        raise DecryptionError("Wrong password or corrupted ciphertext") from None
