#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from inkwell.auth.users import Accounts
from inkwell.config import load_settings
from inkwell.core.results import Ok
from inkwell.infra.database import Database
from inkwell.infra.user_repo import UserRepo


def main() -> None:
    settings = load_settings()
    db = Database(settings.db_path, timeout=settings.db_timeout)
    db.init_schema()
    accounts = Accounts(UserRepo(db))

    username = input("Username: ").strip()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    result = accounts.register(username, pw1)
    if not isinstance(result, Ok):
        err = result.error
        messages = getattr(err, "violations", None) or [getattr(err, "message", "Could not create user")]
        raise SystemExit("\n".join(messages))
    print(f"OK -> {result.value.username} (id={result.value.id}) in {settings.db_path}")


if __name__ == "__main__":
    main()
