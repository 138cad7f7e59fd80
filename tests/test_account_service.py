"""Tests for the account service."""

import pytest
from sqlalchemy.orm import sessionmaker

from account_api.errors import ValidationError
from account_api.models.personal_access_token import PersonalAccessToken
from account_api.models.user import User
from account_api.services import accounts
from account_api.services.accounts import AccountService
from account_api.services.auth import get_password_hash, verify_password


def registration(name="Gabriel Nunes", email="g@example.org", password="Secret1!"):
    return {
        "name": name,
        "email": email,
        "password": password,
        "password_confirmation": password,
    }


def test_password_hash_round_trip():
    hashed = get_password_hash("Secret1!")
    assert hashed != "Secret1!"
    assert hashed.startswith("$2")
    assert verify_password("Secret1!", hashed)
    assert not verify_password("Secret2!", hashed)


def test_password_hash_is_salted():
    assert get_password_hash("Secret1!") != get_password_hash("Secret1!")


def test_register_hashes_password(db):
    user = AccountService(db).register(registration())

    assert user.id is not None
    assert user.password != "Secret1!"
    assert verify_password("Secret1!", user.password)


def test_register_reports_both_taken_fields(db):
    service = AccountService(db)
    service.register(registration())

    with pytest.raises(ValidationError) as exc_info:
        service.register(registration())

    assert exc_info.value.errors == {
        "name": ["The name has already been taken."],
        "email": ["The email has already been taken."],
    }
    assert db.query(User).count() == 1


def test_register_maps_store_uniqueness_violation(db, monkeypatch):
    """A duplicate that slips past the rules is reported, not raised as a crash."""
    service = AccountService(db)

    def hash_after_concurrent_insert(password):
        # Another request commits the same email between validation and commit
        other = sessionmaker(bind=db.get_bind())()
        other.add(User(name="Someone Else", email="g@example.org", password="fake"))
        other.commit()
        other.close()
        return get_password_hash(password)

    monkeypatch.setattr(accounts, "get_password_hash", hash_after_concurrent_insert)

    with pytest.raises(ValidationError) as exc_info:
        service.register(registration())

    assert exc_info.value.errors == {"email": ["The email has already been taken."]}
    assert db.query(User).count() == 1


def test_register_strips_name_and_lowercases_email(db):
    user = AccountService(db).register(
        registration(name="  Gabriel Nunes  ", email="Gabriel@Example.ORG")
    )

    assert user.name == "Gabriel Nunes"
    assert user.email == "gabriel@example.org"


def test_register_rejects_email_differing_only_in_case(db):
    service = AccountService(db)
    service.register(registration())

    with pytest.raises(ValidationError) as exc_info:
        service.register(registration(name="Someone Else", email="G@Example.org"))

    assert exc_info.value.errors == {"email": ["The email has already been taken."]}


def test_register_rejects_non_string_name(db):
    with pytest.raises(ValidationError) as exc_info:
        AccountService(db).register(registration(name=["abc"]))

    assert exc_info.value.errors == {"name": ["The name must be a string."]}
    assert db.query(User).count() == 0


def test_authenticate_returns_new_token(db):
    service = AccountService(db)
    user = service.register(registration())

    new_token = service.authenticate(
        {"email": "g@example.org", "password": "Secret1!", "device_name": "IOS"}
    )

    assert new_token.access_token.user_id == user.id
    assert new_token.plain_text_token.startswith(f"{new_token.access_token.id}|")
    assert db.query(PersonalAccessToken).count() == 1


def test_authenticate_ignores_email_case(db):
    service = AccountService(db)
    user = service.register(registration())

    new_token = service.authenticate(
        {"email": "G@EXAMPLE.ORG", "password": "Secret1!", "device_name": "IOS"}
    )

    assert new_token.access_token.user_id == user.id


def test_authenticate_failure_writes_nothing(db):
    service = AccountService(db)
    service.register(registration())

    with pytest.raises(ValidationError) as exc_info:
        service.authenticate({"email": "g@example.org", "password": "nope", "device_name": "IOS"})

    assert exc_info.value.errors == {"email": ["The provided credentials are incorrect."]}
    assert db.query(PersonalAccessToken).count() == 0


def test_me_returns_user(db):
    service = AccountService(db)
    user = service.register(registration())
    assert service.me(user) is user


def test_change_email_rejects_taken_address_when_enforced(db):
    """With uniqueness enforced, a taken address is rejected before any write."""
    service = AccountService(db, change_email_require_unique=True)
    user = service.register(registration())
    service.register(registration(name="Other User", email="other@example.org"))

    with pytest.raises(ValidationError) as exc_info:
        service.change_email(user, {"email": "other@example.org"})

    assert exc_info.value.errors == {"email": ["The email has already been taken."]}
    db.refresh(user)
    assert user.email == "g@example.org"


def test_change_email_to_own_address_with_uniqueness(db):
    service = AccountService(db, change_email_require_unique=True)
    user = service.register(registration())

    updated = service.change_email(user, {"email": "g@example.org"})
    assert updated.email == "g@example.org"


def test_change_email_uniqueness_off_by_default(db):
    service = AccountService(db)
    assert service.change_email_require_unique is False


def test_logout_is_idempotent(db):
    service = AccountService(db)
    user = service.register(registration())
    credentials = {"email": "g@example.org", "password": "Secret1!", "device_name": "IOS"}
    service.authenticate(credentials)
    service.authenticate({**credentials, "device_name": "Android"})

    assert service.logout(user) == 2
    assert service.logout(user) == 0
    assert db.query(PersonalAccessToken).count() == 0
