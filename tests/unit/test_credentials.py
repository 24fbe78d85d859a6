from __future__ import annotations

import pytest

from student_bank.domain.auth.credentials import (
    is_valid_age,
    is_valid_loan_limit,
    is_valid_password,
    is_valid_student_id,
    is_valid_username,
)
from student_bank.domain.auth.secret_buffer import SecretBuffer


@pytest.mark.parametrize(
    ("username", "expected"),
    [
        ("abcdef", True),
        ("JohnDoe", True),
        ("ab", False),
        ("abcde", False),
        ("abc123", False),
        ("abc def", False),
        ("", False),
        ("      ", False),
        ("abcdef\n", False),
        ("josé_ab", False),
    ],
)
def test_username_rules(username: str, expected: bool) -> None:
    assert is_valid_username(username) is expected


def test_age_threshold() -> None:
    assert not is_valid_age(17)
    assert is_valid_age(18)


@pytest.mark.parametrize(
    ("student_id", "expected"),
    [
        (1234567, True),
        (-1234567, True),
        (123456, False),
        (12345678, False),
        (0, False),
    ],
)
def test_student_id_must_have_seven_digits(student_id: int, expected: bool) -> None:
    assert is_valid_student_id(student_id) is expected


def test_loan_limit_must_not_be_negative() -> None:
    assert is_valid_loan_limit(0)
    assert not is_valid_loan_limit(-1)


@pytest.mark.parametrize(
    ("password", "expected"),
    [
        ("12345678", True),
        ("x" * 50, True),
        ("é" * 50, True),
        ("1234567", False),
        ("x" * 51, False),
        ("has a space", False),
        ("", False),
    ],
)
def test_password_policy(password: str, expected: bool) -> None:
    assert is_valid_password(SecretBuffer.from_text(password)) is expected
