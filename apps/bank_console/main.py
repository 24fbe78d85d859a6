"""bank-console entrypoint and menu wiring."""

from __future__ import annotations

import getpass
import logging
from collections.abc import Callable

from student_bank.application.services.banking_service import (
    BankingService,
    PasswordChangeOutcome,
    SignInOutcome,
    SignUpOutcome,
    WithdrawalOutcome,
)
from student_bank.config.settings import Settings, load_settings
from student_bank.domain.auth.secret_buffer import SecretBuffer
from student_bank.infrastructure.logging import configure_logging
from student_bank.infrastructure.security.password_hasher import Pbkdf2PasswordHasher
from student_bank.infrastructure.storage.account_file_repository import (
    FlatFileAccountRepository,
)

logger = logging.getLogger(__name__)

ReadLine = Callable[[str], str]
ReadSecret = Callable[[str], SecretBuffer]
Write = Callable[[str], None]

_SIGN_UP_MESSAGES: dict[SignUpOutcome, str] = {
    SignUpOutcome.CREATED: "Account created successfully.",
    SignUpOutcome.USERNAME_TAKEN: "Username already exists.",
    SignUpOutcome.INVALID_USERNAME: "Username must be at least 6 letters (A-Z only).",
    SignUpOutcome.INVALID_AGE: "You must be 18 or older.",
    SignUpOutcome.INVALID_STUDENT_ID: "Student ID must be exactly 7 digits.",
    SignUpOutcome.INVALID_PASSWORD: "Password must be 8-50 characters with no spaces.",
    SignUpOutcome.STORAGE_FAILED: "Account could not be saved. Please contact tech support!",
}

_WITHDRAWAL_MESSAGES: dict[WithdrawalOutcome, str] = {
    WithdrawalOutcome.COMPLETED: "Withdrawal successful.",
    WithdrawalOutcome.INVALID_AMOUNT: "Loan amount is invalid!",
    WithdrawalOutcome.STORAGE_FAILED: "Withdrawal wasn't processed, please contact tech support!",
}

_PASSWORD_CHANGE_MESSAGES: dict[PasswordChangeOutcome, str] = {
    PasswordChangeOutcome.CHANGED: "Password changed successfully.",
    PasswordChangeOutcome.WRONG_CURRENT_PASSWORD: "Current password is incorrect.",
    PasswordChangeOutcome.CONFIRMATION_MISMATCH: "New passwords do not match.",
    PasswordChangeOutcome.INVALID_PASSWORD: "Password must be 8-50 characters with no spaces.",
    PasswordChangeOutcome.STORAGE_FAILED: "Password was not saved, please contact tech support!",
}


def build_banking_service(settings: Settings) -> BankingService:
    """Build banking service with file-backed storage and PBKDF2 hashing."""

    return BankingService(
        accounts=FlatFileAccountRepository(settings.account_storage_path),
        password_hasher=Pbkdf2PasswordHasher(iterations=settings.password_hash_iterations),
        default_loan_limit=settings.default_loan_limit,
    )


def read_secret_from_terminal(prompt: str) -> SecretBuffer:
    """Read a password without echo and hand it over as a wipeable buffer."""

    return SecretBuffer.from_text(getpass.getpass(prompt))


class ConsoleApp:
    """Text menus over the banking service: home screen and account screen."""

    def __init__(
        self,
        service: BankingService,
        *,
        read_line: ReadLine = input,
        read_secret: ReadSecret = read_secret_from_terminal,
        write: Write = print,
    ) -> None:
        self._service = service
        self._read_line = read_line
        self._read_secret = read_secret
        self._write = write

    def run(self) -> None:
        """Loop over the home menu until the user quits."""

        while True:
            self._write("\nFAAFO BANK\n  1) Sign in\n  2) Sign up\n  3) Quit")
            choice = self._read_line("> ").strip()
            if choice == "1":
                if self.sign_in():
                    self.account_menu()
            elif choice == "2":
                self.sign_up()
            elif choice == "3":
                return
            else:
                self._write("Please choose 1, 2 or 3.")

    def sign_in(self) -> bool:
        username = self._read_line("Username: ")
        password = self._read_secret("Password: ")
        result = self._service.sign_in(username=username, password=password)
        if result.outcome is not SignInOutcome.SUCCESS or result.account is None:
            self._write("Invalid username or password.")
            return False
        self._write(f"Welcome {result.account.username}")
        return True

    def sign_up(self) -> None:
        username = self._read_line("Username: ")
        age = self._read_line("Age: ")
        student_id = self._read_line("Student ID: ")
        password = self._read_secret("Password: ")
        result = self._service.sign_up(
            username=username,
            age=age,
            student_id=student_id,
            password=password,
        )
        self._write(_SIGN_UP_MESSAGES[result.outcome])

    def account_menu(self) -> None:
        """Loop over the signed-in menu until the customer signs out."""

        while True:
            self._write(
                "\n  1) Check balance\n  2) Withdrawal\n  3) Change password\n  4) Log out"
            )
            choice = self._read_line("> ").strip()
            if choice == "1":
                self._write(f"Your current loan limit is ${self._service.check_balance()}")
            elif choice == "2":
                self.withdraw()
            elif choice == "3":
                self.change_password()
            elif choice == "4":
                self._service.sign_out()
                return
            else:
                self._write("Please choose 1, 2, 3 or 4.")

    def withdraw(self) -> None:
        self._write(f"Loan limit: ${self._service.check_balance()}")
        amount = self._read_line("Withdrawal amount $").strip()
        confirm = self._read_line(f"Are you sure you want to take out ${amount}? [y/N] ")
        if confirm.strip().lower() not in {"y", "yes"}:
            self._write("Withdrawal cancelled.")
            return
        self._write(_WITHDRAWAL_MESSAGES[self._service.withdraw(amount)])

    def change_password(self) -> None:
        current = self._read_secret("Current password: ")
        new = self._read_secret("New password: ")
        confirmation = self._read_secret("Confirm new password: ")
        outcome = self._service.change_password(
            current=current,
            new=new,
            confirmation=confirmation,
        )
        self._write(_PASSWORD_CHANGE_MESSAGES[outcome])


def main() -> None:
    """Run the interactive banking console."""

    settings = load_settings()
    configure_logging(level=settings.log_level, log_file=settings.log_file)
    logger.info("starting bank console storage=%s", settings.account_storage_path)
    try:
        ConsoleApp(build_banking_service(settings)).run()
    except (EOFError, KeyboardInterrupt):
        logger.info("bank console interrupted")


if __name__ == "__main__":
    main()
