"""PBKDF2-HMAC-SHA256 password hasher adapter."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import re
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Final

from student_bank.application.ports.password_hasher_port import PasswordHasherPort
from student_bank.domain.auth.credentials import CredentialFormatError
from student_bank.domain.auth.secret_buffer import SecretBuffer

DEFAULT_ITERATIONS: Final = 120_000
DEFAULT_KEY_LENGTH_BITS: Final = 256
DEFAULT_SALT_LENGTH: Final = 16

MAX_ITERATIONS: Final = 2**31 - 1

_SEPARATOR: Final = ":"
_DIGITS_PATTERN: Final = re.compile(r"[0-9]+")

RandomBytes = Callable[[int], bytes]


@dataclass(frozen=True)
class CredentialEncoding:
    """Parsed `iterations:salt:key` credential, salt and key base64 encoded."""

    iterations: int
    salt: bytes = field(repr=False)
    key: bytes = field(repr=False)

    @classmethod
    def parse(cls, encoded: str) -> CredentialEncoding:
        """Parse one stored credential or raise `CredentialFormatError`."""

        parts = encoded.split(_SEPARATOR)
        if len(parts) != 3:
            raise CredentialFormatError("credential must have exactly 3 fields")

        iterations_text, salt_text, key_text = parts
        if _DIGITS_PATTERN.fullmatch(iterations_text) is None:
            raise CredentialFormatError("credential iteration count is not a decimal integer")
        iterations = int(iterations_text)
        if not 0 < iterations <= MAX_ITERATIONS:
            raise CredentialFormatError("credential iteration count is out of range")

        salt = _decode_base64(salt_text, field_name="salt")
        key = _decode_base64(key_text, field_name="key")
        return cls(iterations=iterations, salt=salt, key=key)

    def format(self) -> str:
        return _SEPARATOR.join(
            (
                str(self.iterations),
                base64.b64encode(self.salt).decode("ascii"),
                base64.b64encode(self.key).decode("ascii"),
            )
        )


def _decode_base64(value: str, *, field_name: str) -> bytes:
    try:
        decoded = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise CredentialFormatError(f"credential {field_name} is not valid base64") from exc
    if not decoded:
        raise CredentialFormatError(f"credential {field_name} is empty")
    return decoded


class Pbkdf2PasswordHasher(PasswordHasherPort):
    """Password hashing adapter using PBKDF2 with HMAC-SHA256.

    The random source is injected so tests can pin salts; production code
    keeps the default `secrets.token_bytes`.
    """

    def __init__(
        self,
        *,
        random_bytes: RandomBytes = secrets.token_bytes,
        iterations: int = DEFAULT_ITERATIONS,
        key_length_bits: int = DEFAULT_KEY_LENGTH_BITS,
        salt_length: int = DEFAULT_SALT_LENGTH,
    ) -> None:
        if not 0 < iterations <= MAX_ITERATIONS:
            raise ValueError("iterations must be positive and fit in 31 bits")
        if key_length_bits <= 0 or key_length_bits % 8:
            raise ValueError("key_length_bits must be a positive multiple of 8")
        if salt_length <= 0:
            raise ValueError("salt_length must be positive")
        self._random_bytes = random_bytes
        self._iterations = iterations
        self._key_length = key_length_bits // 8
        self._salt_length = salt_length

    @property
    def iterations(self) -> int:
        return self._iterations

    def hash_password(self, password: SecretBuffer | bytearray) -> str:
        with SecretBuffer.coerce(password) as secret:
            salt = self._random_bytes(self._salt_length)
            key = _pbkdf2(secret, salt, self._iterations, self._key_length)
        return CredentialEncoding(iterations=self._iterations, salt=salt, key=key).format()

    def verify_password(
        self,
        *,
        password: SecretBuffer | bytearray,
        password_hash: str,
    ) -> bool:
        with SecretBuffer.coerce(password) as secret:
            stored = CredentialEncoding.parse(password_hash)
            # Stored key length wins so older records keep verifying.
            try:
                candidate = _pbkdf2(secret, stored.salt, stored.iterations, len(stored.key))
            except (OverflowError, ValueError) as exc:
                raise CredentialFormatError("credential parameters are not derivable") from exc
            return hmac.compare_digest(candidate, stored.key)


def _pbkdf2(secret: SecretBuffer, salt: bytes, iterations: int, key_length: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", secret.raw, salt, iterations, dklen=key_length)
