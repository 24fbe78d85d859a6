"""Port for password hashing and verification."""

from __future__ import annotations

from typing import Protocol

from student_bank.domain.auth.secret_buffer import SecretBuffer


class PasswordHasherPort(Protocol):
    """Password hashing/verification contract.

    Implementations wipe the given secret before returning, on every path.
    """

    def hash_password(self, password: SecretBuffer | bytearray) -> str:
        """Derive a storable credential encoding from a raw secret."""

    def verify_password(
        self,
        *,
        password: SecretBuffer | bytearray,
        password_hash: str,
    ) -> bool:
        """Verify a raw secret against a stored credential encoding.

        Raises `CredentialFormatError` when `password_hash` is malformed.
        """
