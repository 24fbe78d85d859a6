"""Port for loading and saving the whole customer account set."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class StoredAccount:
    """Persisted account fields, already validated when first written."""

    username: str
    age: int
    student_id: int
    current_loan_limit: int
    password_hash: str


class AccountRepositoryPort(Protocol):
    """Account storage contract."""

    def load_all(self) -> list[StoredAccount]:
        """Return every readable stored account, skipping malformed records."""

    def save_all(self, accounts: Sequence[StoredAccount]) -> bool:
        """Overwrite storage with exactly `accounts` and report success."""
