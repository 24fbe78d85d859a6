from __future__ import annotations

import pytest

from student_bank.domain.auth.secret_buffer import SecretBuffer


def test_len_counts_characters_not_utf8_bytes() -> None:
    secret = SecretBuffer.from_text("pässwörd")

    assert len(secret) == 8
    assert len(secret.raw) == 10


def test_context_manager_wipes_on_normal_exit() -> None:
    raw = bytearray(b"correct-horse")

    with SecretBuffer(raw) as secret:
        assert not secret.is_wiped

    assert raw == bytearray(len(raw))
    assert secret.is_wiped


def test_context_manager_wipes_when_body_raises() -> None:
    secret = SecretBuffer.from_text("correct-horse")

    with pytest.raises(RuntimeError):
        with secret:
            raise RuntimeError("boom")

    assert secret.is_wiped


def test_coerce_wraps_bytearray_in_place_and_converts_text() -> None:
    raw = bytearray(b"abc")
    wrapped = SecretBuffer.coerce(raw)
    wrapped.wipe()

    assert raw == bytearray(3)
    assert SecretBuffer.coerce(wrapped) is wrapped
    assert bytes(SecretBuffer.coerce("xyz").raw) == b"xyz"


def test_coerce_rejects_immutable_bytes() -> None:
    with pytest.raises(TypeError):
        SecretBuffer.coerce(b"immutable")  # type: ignore[arg-type]


def test_raw_view_is_read_only() -> None:
    secret = SecretBuffer.from_text("abc")

    with pytest.raises(TypeError):
        secret.raw[0] = 0


def test_contains_space_and_empty_checks() -> None:
    assert SecretBuffer.from_text("has space").contains_space()
    assert not SecretBuffer.from_text("nospace").contains_space()
    assert SecretBuffer(bytearray()).is_empty()


def test_matches_compares_contents() -> None:
    assert SecretBuffer.from_text("same-value").matches(SecretBuffer.from_text("same-value"))
    assert not SecretBuffer.from_text("same-value").matches(SecretBuffer.from_text("other"))


def test_repr_does_not_leak_secret() -> None:
    assert "hunter" not in repr(SecretBuffer.from_text("hunter22"))


def test_len_counts_astral_characters_once() -> None:
    secret = SecretBuffer.from_text("\U0001F600" * 8)

    assert len(secret) == 8
    assert len(secret.raw) == 32
