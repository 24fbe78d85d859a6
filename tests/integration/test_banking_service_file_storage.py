from __future__ import annotations

from pathlib import Path

from student_bank.application.services.banking_service import (
    BankingService,
    SignInOutcome,
    SignUpOutcome,
    WithdrawalOutcome,
)
from student_bank.infrastructure.security.password_hasher import Pbkdf2PasswordHasher
from student_bank.infrastructure.storage.account_file_repository import (
    FlatFileAccountRepository,
)


def _service(path: Path) -> BankingService:
    return BankingService(
        accounts=FlatFileAccountRepository(path),
        password_hasher=Pbkdf2PasswordHasher(iterations=1_000),
    )


def test_accounts_survive_a_new_service_instance(tmp_path: Path) -> None:
    path = tmp_path / "data" / "accountstorage.txt"
    first = _service(path)
    assert (
        first.sign_up(
            username="aliceblue",
            age="20",
            student_id="1234567",
            password="correct-horse",
        ).outcome
        is SignUpOutcome.CREATED
    )
    first.sign_in(username="aliceblue", password="correct-horse")
    assert first.withdraw("15") is WithdrawalOutcome.COMPLETED
    stored_before = path.read_text(encoding="utf-8")

    second = _service(path)
    result = second.sign_in(username="aliceblue", password="correct-horse")

    assert result.outcome is SignInOutcome.SUCCESS
    assert second.check_balance() == 85
    second.reload()
    assert second.customers[0].password_hash == stored_before.split("|", 4)[4]


def test_malformed_line_does_not_block_sign_in(tmp_path: Path) -> None:
    path = tmp_path / "accountstorage.txt"
    seed = _service(path)
    seed.sign_up(username="aliceblue", age="20", student_id="1234567", password="correct-horse")
    path.write_text(
        "garbage-without-fields\n" + path.read_text(encoding="utf-8") + "\nbob|x|y|z|w",
        encoding="utf-8",
    )

    service = _service(path)
    result = service.sign_in(username="aliceblue", password="correct-horse")

    assert result.outcome is SignInOutcome.SUCCESS
    assert [account.username for account in service.customers] == ["aliceblue"]


def test_invalid_utf8_line_does_not_block_sign_in(tmp_path: Path) -> None:
    path = tmp_path / "accountstorage.txt"
    seed = _service(path)
    seed.sign_up(username="aliceblue", age="20", student_id="1234567", password="correct-horse")
    path.write_bytes(b"\xff\xfebad|20|1234567|1|x\n" + path.read_bytes())

    result = _service(path).sign_in(username="aliceblue", password="correct-horse")

    assert result.outcome is SignInOutcome.SUCCESS
