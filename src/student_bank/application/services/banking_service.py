"""Application service for customer sign-up, sign-in and loan operations."""

from __future__ import annotations

import logging
import re
from contextlib import ExitStack
from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from student_bank.application.ports.account_repository_port import (
    AccountRepositoryPort,
    StoredAccount,
)
from student_bank.application.ports.password_hasher_port import PasswordHasherPort
from student_bank.domain.accounts.customer_account import CustomerAccount
from student_bank.domain.auth.secret_buffer import SecretBuffer

logger = logging.getLogger(__name__)

DEFAULT_LOAN_LIMIT: Final = 100

_INTEGER_PATTERN: Final = re.compile(r"[+-]?[0-9]+")

SecretInput = SecretBuffer | bytearray | str


class SignUpOutcome(StrEnum):
    """Supported account creation outcomes."""

    CREATED = "created"
    USERNAME_TAKEN = "username_taken"
    INVALID_USERNAME = "invalid_username"
    INVALID_AGE = "invalid_age"
    INVALID_STUDENT_ID = "invalid_student_id"
    INVALID_PASSWORD = "invalid_password"
    STORAGE_FAILED = "storage_failed"


class SignInOutcome(StrEnum):
    """Supported authentication outcomes."""

    SUCCESS = "success"
    INVALID_CREDENTIALS = "invalid_credentials"


class WithdrawalOutcome(StrEnum):
    """Supported withdrawal outcomes."""

    COMPLETED = "completed"
    INVALID_AMOUNT = "invalid_amount"
    STORAGE_FAILED = "storage_failed"


class PasswordChangeOutcome(StrEnum):
    """Supported password change outcomes."""

    CHANGED = "changed"
    WRONG_CURRENT_PASSWORD = "wrong_current_password"
    CONFIRMATION_MISMATCH = "confirmation_mismatch"
    INVALID_PASSWORD = "invalid_password"
    STORAGE_FAILED = "storage_failed"


@dataclass(frozen=True)
class SignUpResult:
    """Account creation result model."""

    outcome: SignUpOutcome
    account: CustomerAccount | None = None


@dataclass(frozen=True)
class SignInResult:
    """Authentication result model."""

    outcome: SignInOutcome
    account: CustomerAccount | None = None


class NotSignedInError(PermissionError):
    """Raised when a session-only operation runs without a signed-in customer."""

    def __init__(self) -> None:
        super().__init__("no customer is signed in")


def parse_int(value: str) -> int | None:
    """Parse user-entered integer text, returning None when it is not one."""

    stripped = value.strip()
    if _INTEGER_PATTERN.fullmatch(stripped) is None:
        return None
    return int(stripped)


class BankingService:
    """Hold the in-memory account set and the current customer session.

    Every mutation persists the whole account set. A failed save is reported
    to the caller; the in-memory change is kept.
    """

    def __init__(
        self,
        *,
        accounts: AccountRepositoryPort,
        password_hasher: PasswordHasherPort,
        default_loan_limit: int = DEFAULT_LOAN_LIMIT,
    ) -> None:
        if default_loan_limit < 0:
            raise ValueError("default_loan_limit must not be negative")
        self._accounts = accounts
        self._password_hasher = password_hasher
        self._default_loan_limit = default_loan_limit
        self._customers: list[CustomerAccount] = []
        self._current: CustomerAccount | None = None

    @property
    def customers(self) -> tuple[CustomerAccount, ...]:
        return tuple(self._customers)

    @property
    def current_account(self) -> CustomerAccount | None:
        return self._current

    def reload(self) -> None:
        """Replace the in-memory account set with the stored one."""

        self._customers = [self._to_account(record) for record in self._accounts.load_all()]
        if self._current is not None:
            self._current = self._find(self._current.username)

    def username_exists(self, username: str) -> bool:
        return self._find(username) is not None

    def sign_up(
        self,
        *,
        username: str,
        age: str,
        student_id: str,
        password: SecretInput,
    ) -> SignUpResult:
        """Validate and create one account, then persist the account set."""

        with SecretBuffer.coerce(password) as secret:
            self.reload()
            username = username.strip()
            if self.username_exists(username):
                return SignUpResult(outcome=SignUpOutcome.USERNAME_TAKEN)

            account = CustomerAccount.blank(password_hasher=self._password_hasher)
            if not account.set_username(username):
                return SignUpResult(outcome=SignUpOutcome.INVALID_USERNAME)

            parsed_age = parse_int(age)
            if parsed_age is None or not account.set_age(parsed_age):
                return SignUpResult(outcome=SignUpOutcome.INVALID_AGE)

            parsed_id = parse_int(student_id)
            if parsed_id is None or not account.set_student_id(parsed_id):
                return SignUpResult(outcome=SignUpOutcome.INVALID_STUDENT_ID)

            if not account.set_password(secret):
                return SignUpResult(outcome=SignUpOutcome.INVALID_PASSWORD)

        account.set_current_loan_limit(self._default_loan_limit)
        self._customers.append(account)
        if not self._save():
            return SignUpResult(outcome=SignUpOutcome.STORAGE_FAILED, account=account)

        logger.info("account created username=%s", account.username)
        return SignUpResult(outcome=SignUpOutcome.CREATED, account=account)

    def sign_in(self, *, username: str, password: SecretInput) -> SignInResult:
        """Authenticate against freshly loaded storage and open a session."""

        with SecretBuffer.coerce(password) as secret:
            self.reload()
            account = self._find(username.strip())
            if account is None or not account.verify_password(secret):
                logger.info("sign-in failed username=%s", username.strip())
                return SignInResult(outcome=SignInOutcome.INVALID_CREDENTIALS)

        self._current = account
        logger.info("sign-in succeeded username=%s", account.username)
        return SignInResult(outcome=SignInOutcome.SUCCESS, account=account)

    def sign_out(self) -> None:
        self._current = None

    def check_balance(self) -> int:
        return self._require_current().current_loan_limit

    def withdraw(self, amount: str | int) -> WithdrawalOutcome:
        """Draw an amount from the signed-in customer's loan limit."""

        account = self._require_current()
        if isinstance(amount, bool):
            return WithdrawalOutcome.INVALID_AMOUNT
        parsed = amount if isinstance(amount, int) else parse_int(amount)
        if parsed is None or parsed <= 0 or parsed > account.current_loan_limit:
            return WithdrawalOutcome.INVALID_AMOUNT
        if not account.withdraw(parsed):
            return WithdrawalOutcome.INVALID_AMOUNT
        if not self._save():
            return WithdrawalOutcome.STORAGE_FAILED

        logger.info(
            "withdrawal completed username=%s remaining=%d",
            account.username,
            account.current_loan_limit,
        )
        return WithdrawalOutcome.COMPLETED

    def change_password(
        self,
        *,
        current: SecretInput,
        new: SecretInput,
        confirmation: SecretInput,
    ) -> PasswordChangeOutcome:
        """Replace the signed-in customer's password after re-authentication."""

        account = self._require_current()
        with ExitStack() as stack:
            current_secret = stack.enter_context(SecretBuffer.coerce(current))
            new_secret = stack.enter_context(SecretBuffer.coerce(new))
            confirmation_secret = stack.enter_context(SecretBuffer.coerce(confirmation))

            if not account.verify_password(current_secret):
                return PasswordChangeOutcome.WRONG_CURRENT_PASSWORD
            if not new_secret.matches(confirmation_secret):
                return PasswordChangeOutcome.CONFIRMATION_MISMATCH
            if not account.set_password(confirmation_secret):
                return PasswordChangeOutcome.INVALID_PASSWORD

        if not self._save():
            return PasswordChangeOutcome.STORAGE_FAILED

        logger.info("password changed username=%s", account.username)
        return PasswordChangeOutcome.CHANGED

    def _require_current(self) -> CustomerAccount:
        if self._current is None:
            raise NotSignedInError()
        return self._current

    def _find(self, username: str) -> CustomerAccount | None:
        for account in self._customers:
            if account.username == username:
                return account
        return None

    def _save(self) -> bool:
        return self._accounts.save_all([self._to_stored(account) for account in self._customers])

    def _to_account(self, record: StoredAccount) -> CustomerAccount:
        # Stored fields were validated when written and are not re-checked.
        return CustomerAccount(
            password_hasher=self._password_hasher,
            username=record.username,
            age=record.age,
            student_id=record.student_id,
            current_loan_limit=record.current_loan_limit,
            password_hash=record.password_hash,
        )

    @staticmethod
    def _to_stored(account: CustomerAccount) -> StoredAccount:
        return StoredAccount(
            username=account.username,
            age=account.age,
            student_id=account.student_id,
            current_loan_limit=account.current_loan_limit,
            password_hash=account.password_hash,
        )
