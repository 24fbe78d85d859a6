"""Short-lived, wipeable holder for raw secret characters."""

from __future__ import annotations

import hmac
from types import TracebackType

_SPACE = ord(" ")


class SecretBuffer:
    """Own the UTF-8 bytes of one raw secret and zero them on release.

    Use as a context manager so every exit path wipes the backing storage:

        with SecretBuffer.from_text(password) as secret:
            hasher.hash_password(secret)
    """

    __slots__ = ("_data",)

    def __init__(self, data: bytearray) -> None:
        if not isinstance(data, bytearray):
            raise TypeError("secret data must be a bytearray")
        self._data = data

    @classmethod
    def from_text(cls, text: str) -> SecretBuffer:
        """Copy text into a fresh buffer owned by the caller."""

        return cls(bytearray(text.encode("utf-8")))

    @classmethod
    def coerce(cls, value: SecretBuffer | bytearray | str) -> SecretBuffer:
        """Return a buffer for any accepted secret form.

        A `bytearray` is wrapped in place so wiping the result also wipes it.
        """

        if isinstance(value, SecretBuffer):
            return value
        if isinstance(value, bytearray):
            return cls(value)
        if isinstance(value, str):
            return cls.from_text(value)
        raise TypeError(f"unsupported secret type: {type(value).__name__}")

    @property
    def raw(self) -> memoryview:
        """Read-only view over the secret bytes."""

        return memoryview(self._data).toreadonly()

    @property
    def is_wiped(self) -> bool:
        return not any(self._data)

    def __len__(self) -> int:
        """Number of Unicode code points; astral characters count once."""

        # Count code points, skipping UTF-8 continuation bytes.
        return sum(1 for byte in self._data if byte & 0xC0 != 0x80)

    def is_empty(self) -> bool:
        return not self._data

    def contains_space(self) -> bool:
        return _SPACE in self._data

    def matches(self, other: SecretBuffer) -> bool:
        """Compare two secrets without exposing either as text."""

        return hmac.compare_digest(self._data, other._data)

    def wipe(self) -> None:
        """Overwrite every byte with zero, keeping the length."""

        for index in range(len(self._data)):
            self._data[index] = 0

    def __enter__(self) -> SecretBuffer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.wipe()

    def __repr__(self) -> str:
        return "SecretBuffer(<redacted>)"
