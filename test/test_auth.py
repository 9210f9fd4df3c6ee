import pytest

from conftest import run, seeded_store

from bsm.domain.errors import AuthorizationError
from bsm.repositories.passwords import hash_password, is_hashed, verify_password
from bsm.services.auth_service import AuthService


def test_authenticate_seeded_admin():
    store = seeded_store()

    assert run(store.authenticate_user("admin", "wrongpass")) is None
    user = run(store.authenticate_user("admin", "admin123"))

    assert user is not None
    assert user.username == "admin"
    assert user.role == "admin"


def test_passwords_are_stored_hashed():
    store = seeded_store()
    user = run(store.add_user("vendedor2", "Segredo#1", "Vendedor Dois", "user"))

    assert is_hashed(user.password)
    assert "Segredo#1" not in user.password
    assert run(store.authenticate_user("vendedor2", "Segredo#1")) == user


def test_password_update_is_rehashed():
    store = seeded_store()
    run(store.update_user("2", password="nova-senha"))

    assert run(store.authenticate_user("vendedor1", "senha123")) is None
    assert run(store.authenticate_user("vendedor1", "nova-senha")) is not None


def test_user_listing_hides_admins():
    store = seeded_store()

    usernames = [u.username for u in run(store.get_users())]

    assert usernames == ["vendedor1"]
    assert run(store.get_user("1")).role == "admin"


def test_verify_password_rejects_plain_and_malformed_values():
    assert verify_password("admin123", "admin123") is False
    assert verify_password("pbkdf2_sha256$x$zz$00", "admin123") is False
    assert verify_password(hash_password("abc", rounds=1000), "abc") is True


def test_login_session_and_logout():
    auth = AuthService(seeded_store())

    with pytest.raises(AuthorizationError, match="Invalid username or password"):
        run(auth.login("admin", "wrongpass"))
    assert auth.current_user is None

    user = run(auth.login(" admin ", "admin123"))
    assert auth.current_user == user
    assert auth.is_admin is True

    auth.logout()
    assert auth.current_user is None
    assert auth.is_admin is False


def test_only_admin_can_manage_users():
    auth = AuthService(seeded_store())
    admin = run(auth.login("admin", "admin123"))
    seller = run(auth.login("vendedor1", "senha123"))

    created = run(auth.create_user(admin, "vendedor2", "senha456", "Vendedor Dois"))
    assert created.role == "user"

    with pytest.raises(AuthorizationError):
        run(auth.create_user(seller, "vendedor3", "senha789", "Vendedor Tres"))
    with pytest.raises(AuthorizationError, match="Unknown role"):
        run(auth.create_user(admin, "chef", "senha000", "Chef", role="owner"))


def test_permission_matrix():
    auth = AuthService(provider=None)
    store = seeded_store()
    admin = run(store.get_user("1"))
    seller = run(store.get_user("2"))

    assert auth.can(admin, "manage_users") is True
    assert auth.can(seller, "manage_users") is False
    assert auth.can(admin, "change_settings") is True
    assert auth.can(seller, "change_settings") is False
    assert auth.can(seller, "unknown_action") is False
    with pytest.raises(AuthorizationError, match="Login required"):
        auth.require_action(None, "change_settings")


def test_admin_cannot_delete_own_account():
    auth = AuthService(seeded_store())
    admin = run(auth.login("admin", "admin123"))

    with pytest.raises(AuthorizationError):
        run(auth.delete_user(admin, admin.id))
    assert run(auth.delete_user(admin, "2")).username == "vendedor1"
