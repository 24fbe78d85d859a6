"""Flat-file account repository, one `|`-delimited record per line."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from student_bank.application.ports.account_repository_port import (
    AccountRepositoryPort,
    StoredAccount,
)

logger = logging.getLogger(__name__)

FIELD_DELIMITER: Final = "|"
_MIN_FIELDS: Final = 5
_INTEGER_PATTERN: Final = re.compile(r"[+-]?[0-9]+")


def format_account_line(account: StoredAccount) -> str:
    """Serialize one account as `username|age|studentId|loan|credential`."""

    return FIELD_DELIMITER.join(
        (
            account.username,
            str(account.age),
            str(account.student_id),
            str(account.current_loan_limit),
            account.password_hash,
        )
    )


def parse_account_line(line: str) -> StoredAccount | None:
    """Parse one stored line, or return None when it is blank or malformed.

    Everything from the fifth field on is the credential, so a delimiter
    inside it survives the round trip.
    """

    if not line.strip():
        return None

    parts = [part.strip() for part in line.split(FIELD_DELIMITER)]
    if len(parts) < _MIN_FIELDS:
        return None

    age = _parse_int(parts[1])
    student_id = _parse_int(parts[2])
    loan_limit = _parse_int(parts[3])
    if age is None or student_id is None or loan_limit is None:
        return None

    return StoredAccount(
        username=parts[0],
        age=age,
        student_id=student_id,
        current_loan_limit=loan_limit,
        password_hash=FIELD_DELIMITER.join(parts[4:]).strip(),
    )


def _decode_account_line(raw_line: bytes) -> StoredAccount | None:
    try:
        line = raw_line.decode("utf-8")
    except UnicodeDecodeError:
        return None
    return parse_account_line(line)


def _parse_int(value: str) -> int | None:
    if _INTEGER_PATTERN.fullmatch(value) is None:
        return None
    return int(value)


class FlatFileAccountRepository(AccountRepositoryPort):
    """Read and rewrite the whole account set in a single text file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load_all(self) -> list[StoredAccount]:
        if not self._path.exists():
            logger.info("account storage not found path=%s", self._path)
            return []

        accounts: list[StoredAccount] = []
        content = self._path.read_bytes()
        for line_number, raw_line in enumerate(content.splitlines(), start=1):
            if not raw_line.strip():
                continue
            account = _decode_account_line(raw_line)
            if account is None:
                logger.warning(
                    "skipping malformed account record path=%s line=%d",
                    self._path,
                    line_number,
                )
                continue
            accounts.append(account)

        logger.debug("loaded accounts path=%s count=%d", self._path, len(accounts))
        return accounts

    def save_all(self, accounts: Sequence[StoredAccount]) -> bool:
        content = "\n".join(format_account_line(account) for account in accounts)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(content, encoding="utf-8")
        except OSError:
            logger.exception("failed to save account storage path=%s", self._path)
            return False

        logger.info("saved accounts path=%s count=%d", self._path, len(accounts))
        return True
