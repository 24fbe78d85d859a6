"""Shared validation rules for customer identity and credential inputs."""

from __future__ import annotations

import re
from typing import Final

from student_bank.domain.auth.secret_buffer import SecretBuffer

MIN_USERNAME_LENGTH: Final = 6
MIN_AGE: Final = 18
STUDENT_ID_DIGITS: Final = 7
MIN_PASSWORD_LENGTH: Final = 8
MAX_PASSWORD_LENGTH: Final = 50

_USERNAME_PATTERN: Final = re.compile(r"[A-Za-z]+")


class CredentialFormatError(ValueError):
    """Raised when a stored credential encoding cannot be interpreted."""


def is_valid_username(username: str) -> bool:
    """Return whether username is non-blank, letters only and long enough."""

    if not username.strip():
        return False
    return (
        _USERNAME_PATTERN.fullmatch(username) is not None
        and len(username) >= MIN_USERNAME_LENGTH
    )


def is_valid_age(age: int) -> bool:
    return age >= MIN_AGE


def is_valid_student_id(student_id: int) -> bool:
    """Return whether the id magnitude has exactly seven decimal digits."""

    return len(str(abs(student_id))) == STUDENT_ID_DIGITS


def is_valid_loan_limit(loan_limit: int) -> bool:
    return loan_limit >= 0


def is_valid_password(password: SecretBuffer) -> bool:
    """Apply the password policy without copying the secret out of its buffer."""

    if password.is_empty():
        return False
    if not MIN_PASSWORD_LENGTH <= len(password) <= MAX_PASSWORD_LENGTH:
        return False
    return not password.contains_space()
