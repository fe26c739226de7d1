"""
Tests for UserManager and RoleManager.
"""
import pytest

from identity_server.database import ApplicationSession
from identity_server.identity import (
    Claim,
    RoleManager,
    UserManager,
    hash_password,
    verify_password,
)
from identity_server.models import ApplicationUser, Role, RoleClaim, UserRole


@pytest.fixture
def db():
    session = ApplicationSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def users(db):
    return UserManager(db)


@pytest.fixture
def roles(db):
    return RoleManager(db)


def _new_user(name="alice", email="alice@example.com") -> ApplicationUser:
    return ApplicationUser(user_name=name, email=email)


def test_hash_password_truncates_long_passwords():
    long_password = "x" * 100
    hashed = hash_password(long_password)
    assert hashed != long_password
    assert verify_password(long_password, hashed)
    assert not verify_password("y" * 100, hashed)


def test_create_user_normalizes_and_hashes(users):
    result = users.create(_new_user(), "secret123")
    assert result.succeeded
    user = users.find_by_name("ALICE")
    assert user is not None
    assert user.normalized_user_name == "ALICE"
    assert user.normalized_email == "ALICE@EXAMPLE.COM"
    assert user.password_hash != "secret123"
    assert user.security_stamp
    assert users.check_password(user, "secret123")
    assert not users.check_password(user, "wrong")


def test_create_user_duplicate_name_fails(users):
    assert users.create(_new_user(), "secret123").succeeded
    result = users.create(_new_user(name="Alice", email="other@example.com"), "secret123")
    assert not result.succeeded
    assert result.errors[0].code == "DuplicateUserName"


def test_create_user_short_password_fails(users):
    result = users.create(_new_user(), "abc")
    assert not result.succeeded
    assert result.errors[0].code == "PasswordTooShort"
    assert users.find_by_name("alice") is None


def test_user_claims_are_stored_in_order(users):
    users.create(_new_user(), "secret123")
    user = users.find_by_name("alice")
    users.add_claims(user, [Claim("name", "alice"), Claim("email", "alice@example.com")])
    users.add_claim(user, Claim("IsUser", "true"))
    assert users.get_claims(user) == [
        Claim("name", "alice"),
        Claim("email", "alice@example.com"),
        Claim("IsUser", "true"),
    ]


def test_add_to_roles(users, roles):
    roles.create(Role(name="User"))
    roles.create(Role(name="Editor"))
    users.create(_new_user(), "secret123")
    user = users.find_by_name("alice")

    assert users.add_to_roles(user, ["User", "editor"]).succeeded
    assert users.get_roles(user) == ["Editor", "User"]

    again = users.add_to_roles(user, ["User"])
    assert not again.succeeded
    assert again.errors[0].code == "UserAlreadyInRole"


def test_add_to_unknown_role_raises(users):
    users.create(_new_user(), "secret123")
    user = users.find_by_name("alice")
    with pytest.raises(ValueError, match="Role Missing does not exist"):
        users.add_to_roles(user, ["Missing"])
    assert users.get_roles(user) == []


def test_delete_user_removes_claims_and_memberships(db, users, roles):
    roles.create(Role(name="User"))
    users.create(_new_user(), "secret123")
    user = users.find_by_name("alice")
    users.add_claim(user, Claim("name", "alice"))
    users.add_to_roles(user, ["User"])

    users.delete(user)

    assert users.find_by_name("alice") is None
    assert db.query(UserRole).count() == 0
    assert roles.find_by_name("User") is not None


def test_create_role_duplicate_fails(roles):
    assert roles.create(Role(name="Administrator")).succeeded
    result = roles.create(Role(name="administrator"))
    assert not result.succeeded
    assert result.errors[0].code == "DuplicateRoleName"


def test_role_claims_add_and_remove(roles):
    roles.create(Role(name="Editor"))
    role = roles.find_by_name("Editor")
    assert roles.add_claim(role, Claim("permission", "todo.read")).succeeded
    assert roles.add_claim(role, Claim("other", "todo.read")).succeeded

    duplicate = roles.add_claim(role, Claim("permission", "todo.read"))
    assert not duplicate.succeeded
    assert duplicate.errors[0].code == "DuplicateRoleClaim"
    assert not roles.add_claim(role, Claim("permission", "")).succeeded

    roles.remove_claim(role, Claim("permission", "todo.read"))
    assert roles.get_claims(role) == [Claim("other", "todo.read")]


def test_delete_role_removes_claims(db, roles):
    roles.create(Role(name="Editor"))
    role = roles.find_by_name("Editor")
    roles.add_claim(role, Claim("permission", "todo.read"))

    roles.delete(role)

    assert roles.find_by_name("Editor") is None
    assert db.query(RoleClaim).count() == 0
    assert roles.roles() == []
