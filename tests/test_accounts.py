from argon2 import PasswordHasher

from inkwell.auth.passwords import needs_rehash, verify_password
from inkwell.auth.users import Accounts, check_login_form
from inkwell.core.results import Err, Invalid, Ok, StoreFailure, UsernameTaken
from inkwell.infra.database import Database
from inkwell.infra.user_repo import UserRepo


def test_register_creates_user_with_hashed_password(user_repo):
    result = Accounts(user_repo).register("alice_01", "Passw0rd!")
    assert isinstance(result, Ok)
    stored = user_repo.get_by_username("alice_01")
    assert stored.id == result.value.id
    assert stored.password_hash != "Passw0rd!"


def test_register_reports_taken_username_with_other_violations(user_repo, make_user):
    make_user("alice_01")
    result = Accounts(user_repo).register("alice_01", "weak")
    assert isinstance(result, Err) and isinstance(result.error, Invalid)
    assert "Username already exists" in result.error.violations
    assert "Password must be at least 8 characters long" in result.error.violations


def test_register_rejects_short_username(user_repo):
    result = Accounts(user_repo).register("ab", "Passw0rd!")
    assert "Username must be at least 3 characters long" in result.error.violations
    assert user_repo.get_by_username("ab") is None


def test_store_reports_late_uniqueness_conflict(user_repo):
    assert isinstance(user_repo.create("carol", "h"), Ok)
    assert user_repo.create("carol", "h") == Err(UsernameTaken())


def test_store_failure_is_a_result_not_an_exception(tmp_path):
    broken = UserRepo(Database(tmp_path))  # a directory, not a database file
    assert broken.create("dave", "h") == Err(StoreFailure())


def test_authenticate(user_repo):
    accounts = Accounts(user_repo)
    accounts.register("alice_01", "Passw0rd!")
    assert accounts.authenticate("alice_01", "Passw0rd!").username == "alice_01"
    assert accounts.authenticate("alice_01", "passw0rd!") is None
    assert accounts.authenticate("nobody", "Passw0rd!") is None


def test_check_login_form():
    assert check_login_form("alice", "pw") == []
    assert check_login_form(" ", "") == ["Invalid username", "Invalid password"]


def test_login_upgrades_outdated_hash(user_repo):
    weak = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1).hash("Passw0rd!")
    user_repo.create("erin", weak)

    assert Accounts(user_repo).authenticate("erin", "Passw0rd!") is not None

    upgraded = user_repo.get_by_username("erin").password_hash
    assert upgraded != weak
    assert not needs_rehash(upgraded)
    assert verify_password(upgraded, "Passw0rd!")
