"""Customer account model with field validation and credential handling."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from student_bank.domain.auth.credentials import (
    CredentialFormatError,
    is_valid_age,
    is_valid_loan_limit,
    is_valid_password,
    is_valid_student_id,
    is_valid_username,
)
from student_bank.domain.auth.secret_buffer import SecretBuffer

if TYPE_CHECKING:
    from student_bank.application.ports.password_hasher_port import PasswordHasherPort

logger = logging.getLogger(__name__)


class CustomerAccount:
    """One bank customer: identity, loan limit and hashed credential.

    Setters validate before applying and report rejection with `False`,
    leaving the previous value in place. The raw password is never stored;
    `password_hash` is either empty or an encoding produced by the hasher.
    """

    def __init__(
        self,
        *,
        password_hasher: PasswordHasherPort,
        username: str = "",
        age: int = 0,
        student_id: int = 0,
        current_loan_limit: int = 0,
        password_hash: str = "",
    ) -> None:
        self._password_hasher = password_hasher
        self._username = username
        self._age = age
        self._student_id = student_id
        self._current_loan_limit = current_loan_limit
        self._password_hash = password_hash

    @classmethod
    def blank(cls, *, password_hasher: PasswordHasherPort) -> CustomerAccount:
        """Return an empty account to be populated through the setters."""

        return cls(password_hasher=password_hasher)

    @property
    def username(self) -> str:
        return self._username

    @property
    def age(self) -> int:
        return self._age

    @property
    def student_id(self) -> int:
        return self._student_id

    @property
    def current_loan_limit(self) -> int:
        return self._current_loan_limit

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def has_password(self) -> bool:
        return bool(self._password_hash.strip())

    def set_username(self, username: str | None) -> bool:
        if username is None or not is_valid_username(username):
            return False
        self._username = username
        return True

    def set_age(self, age: int) -> bool:
        if not is_valid_age(age):
            return False
        self._age = age
        return True

    def set_student_id(self, student_id: int) -> bool:
        if not is_valid_student_id(student_id):
            return False
        self._student_id = student_id
        return True

    def set_current_loan_limit(self, loan_limit: int) -> bool:
        if not is_valid_loan_limit(loan_limit):
            return False
        self._current_loan_limit = loan_limit
        return True

    def withdraw(self, amount: int) -> bool:
        """Draw `amount` from the loan limit; overdrawing is rejected."""

        return self.set_current_loan_limit(self._current_loan_limit - amount)

    def set_password(self, password: SecretBuffer | bytearray | str) -> bool:
        """Hash and store a new password when it satisfies the policy.

        The secret is wiped whether or not it is accepted.
        """

        with SecretBuffer.coerce(password) as secret:
            if not is_valid_password(secret):
                return False
            self._password_hash = self._password_hasher.hash_password(secret)
        return True

    def verify_password(self, candidate: SecretBuffer | bytearray | str) -> bool:
        """Return whether candidate matches the stored credential.

        A missing or corrupted stored credential denies access instead of raising.
        """

        with SecretBuffer.coerce(candidate) as secret:
            if not self.has_password:
                return False
            try:
                return self._password_hasher.verify_password(
                    password=secret,
                    password_hash=self._password_hash,
                )
            except CredentialFormatError:
                logger.warning("stored credential is malformed username=%s", self._username)
                return False

    def __repr__(self) -> str:
        return (
            f"CustomerAccount(username={self._username!r}, age={self._age}, "
            f"student_id={self._student_id}, current_loan_limit={self._current_loan_limit})"
        )
