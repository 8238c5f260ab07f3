import logging

import pytest

from tickettrack.errors import (
    AuthError,
    ErrorCode,
    InvalidCredentials,
    InvalidEmail,
    ProfileCreationError,
    ProfileNotFound,
    RoleMissing,
    ServiceError,
    SignOutError,
    UserNotFound,
    ValidationError,
)
from tickettrack.models.enums import UserRole
from tickettrack.models.user import UserProfile


# ---------------------------------------------------------------------------
# register
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("role", ["client", "admin"])
def test_register_creates_profile_with_requested_role(auth_service, directory, role):
    identity = auth_service.register("ada@example.com", "secret1", "Ada", role)

    profile = directory.profiles[identity.id]
    assert profile.role == UserRole(role)
    assert profile.name == "Ada"
    assert profile.email == "ada@example.com"


def test_register_signs_the_new_identity_in(auth_service, session_store):
    identity = auth_service.register("ada@example.com", "secret1", "Ada", "client")

    assert session_store.current_identity() == identity


def test_register_normalizes_email_and_trims_name(auth_service, directory):
    identity = auth_service.register("  Ada@Example.COM ", "secret1", "  Ada  ", "client")

    assert identity.email == "ada@example.com"
    assert directory.profiles[identity.id].name == "Ada"


@pytest.mark.parametrize("role", ["superuser", "Client", ""])
def test_register_rejects_unknown_role_before_any_remote_call(auth_service, session_store, role):
    with pytest.raises(ValidationError):
        auth_service.register("ada@example.com", "secret1", "Ada", role)

    assert session_store.create_calls == 0


def test_register_rejects_short_password(auth_service, session_store):
    with pytest.raises(ValidationError) as excinfo:
        auth_service.register("ada@example.com", "12345", "Ada", "client")

    assert "6 characters" in excinfo.value.message
    assert session_store.create_calls == 0


@pytest.mark.parametrize(
    "email, password, name",
    [("", "secret1", "Ada"), ("ada@example.com", "", "Ada"), ("ada@example.com", "secret1", "   ")],
)
def test_register_requires_every_field(auth_service, session_store, email, password, name):
    with pytest.raises(ValidationError) as excinfo:
        auth_service.register(email, password, name, "client")

    assert excinfo.value.message == "All fields are required."
    assert session_store.create_calls == 0


def test_register_duplicate_email_is_auth_error(auth_service, register):
    register("ada@example.com")

    with pytest.raises(AuthError) as excinfo:
        auth_service.register("ada@example.com", "secret1", "Ada", "client")

    assert excinfo.value.code == ErrorCode.EMAIL_ALREADY_EXISTS


def test_register_profile_failure_leaves_identity_without_profile(
    auth_service, session_store, directory, caplog,
):
    directory.fail_put = True

    with caplog.at_level(logging.ERROR):
        with pytest.raises(ProfileCreationError):
            auth_service.register("ada@example.com", "secret1", "Ada", "client")

    assert session_store.current_identity() is not None
    assert directory.profiles == {}
    assert any(getattr(r, "event", None) == "PROFILE_CREATION_FAILED" for r in caplog.records)


def test_register_profile_not_readable_back_is_creation_error(auth_service, directory):
    directory.visible_after_reads = 1

    with pytest.raises(ProfileCreationError):
        auth_service.register("ada@example.com", "secret1", "Ada", "client")


def test_register_logs_audit_event(register, caplog):
    with caplog.at_level(logging.INFO):
        register("ada@example.com")

    assert any(getattr(r, "event", None) == "REGISTER" for r in caplog.records)


# ---------------------------------------------------------------------------
# authenticate / end_session
# ---------------------------------------------------------------------------


def test_authenticate_wrong_password_is_invalid_credentials(auth_service, session_store, register):
    register("x@x.com", password="right1")
    session_store.end_session()

    with pytest.raises(InvalidCredentials) as excinfo:
        auth_service.authenticate("x@x.com", "wrong")

    assert excinfo.value.message == "Incorrect password."
    assert session_store.current_identity() is None


def test_authenticate_unknown_email_is_user_not_found(auth_service):
    with pytest.raises(UserNotFound) as excinfo:
        auth_service.authenticate("nobody@x.com", "whatever")

    assert excinfo.value.code == ErrorCode.USER_NOT_FOUND


def test_authenticate_requires_email_and_password(auth_service):
    with pytest.raises(ValidationError) as excinfo:
        auth_service.authenticate("", "secret1")

    assert excinfo.value.message == "Email and password are required."


def test_authenticate_success(auth_service, session_store, register, caplog):
    identity = register("x@x.com", password="right1")
    session_store.end_session()

    with caplog.at_level(logging.INFO):
        signed_in = auth_service.authenticate(" X@x.com ", "right1")

    assert signed_in == identity
    assert auth_service.current_identity() == identity
    assert any(getattr(r, "event", None) == "LOGIN" for r in caplog.records)


def test_authenticate_network_failure(auth_service, session_store, monkeypatch):
    def _down(email, password):
        raise ConnectionError("connection refused")

    monkeypatch.setattr(session_store, "authenticate_identity", _down)

    with pytest.raises(AuthError) as excinfo:
        auth_service.authenticate("x@x.com", "secret1")

    assert excinfo.value.code == ErrorCode.NETWORK_ERROR


def test_auth_error_classified_from_message_when_code_missing(auth_service, session_store, monkeypatch):
    def _bad_email(email, password):
        raise Exception("AuthApiError: email_address_invalid")

    monkeypatch.setattr(session_store, "authenticate_identity", _bad_email)

    with pytest.raises(InvalidEmail):
        auth_service.authenticate("x@x", "secret1")


def test_unrecognised_auth_error_keeps_its_message(auth_service, session_store, monkeypatch):
    def _odd(email, password):
        raise Exception("Signups not allowed for this instance")

    monkeypatch.setattr(session_store, "authenticate_identity", _odd)

    with pytest.raises(AuthError) as excinfo:
        auth_service.authenticate("x@x.com", "secret1")

    assert excinfo.value.message == "Signups not allowed for this instance"
    assert excinfo.value.code == ErrorCode.AUTH_ERROR


def test_end_session_clears_identity(auth_service, session_store, register, caplog):
    register("x@x.com")

    with caplog.at_level(logging.INFO):
        auth_service.end_session()

    assert session_store.current_identity() is None
    assert any(getattr(r, "event", None) == "LOGOUT" for r in caplog.records)


def test_end_session_failure_is_sign_out_error(auth_service, session_store, register):
    register("x@x.com")
    session_store.fail_sign_out = True

    with pytest.raises(SignOutError) as excinfo:
        auth_service.end_session()

    assert excinfo.value.message == "Failed to sign out."


# ---------------------------------------------------------------------------
# resolve_role
# ---------------------------------------------------------------------------


def test_resolve_role_succeeds_once_profile_becomes_visible(auth_service, directory, register, sleeps):
    identity = register("ada@example.com", role="admin")
    directory.get_calls = 0
    directory.visible_after_reads = 2

    assert auth_service.resolve_role(identity.id) == UserRole.ADMIN
    assert directory.get_calls == 3
    assert sleeps == [0.5, 0.5]


def test_resolve_role_gives_up_after_three_retries(auth_service, directory, sleeps):
    with pytest.raises(ProfileNotFound) as excinfo:
        auth_service.resolve_role("missing-user")

    assert excinfo.value.message == "User profile not found."
    assert directory.get_calls == 4
    assert sleeps == [0.5, 0.5, 0.5]


def test_resolve_role_with_zero_retries_reads_once(auth_service, directory, sleeps):
    with pytest.raises(ProfileNotFound):
        auth_service.resolve_role("missing-user", retries=0)

    assert directory.get_calls == 1
    assert sleeps == []


def test_resolve_role_unknown_role_value_is_role_missing(auth_service, directory):
    directory.profiles["u1"] = UserProfile(id="u1", email="a@b.c", name="A", role="superuser")

    with pytest.raises(RoleMissing):
        auth_service.resolve_role("u1")


def test_resolve_role_requires_id(auth_service):
    with pytest.raises(ValidationError):
        auth_service.resolve_role("")


def test_resolve_role_directory_outage_is_network_error(auth_service, directory, sleeps):
    directory.fail_get = True

    with pytest.raises(ServiceError) as excinfo:
        auth_service.resolve_role("u1")

    assert excinfo.value.code == ErrorCode.NETWORK_ERROR
    assert sleeps == []
