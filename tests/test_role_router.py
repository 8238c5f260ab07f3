import pytest

from tickettrack.models.enums import RouteMode
from tickettrack.models.user import UserProfile


@pytest.fixture()
def modes(router):
    seen = []
    router.add_listener(lambda state: seen.append(state.mode))
    return seen


def test_start_without_identity_routes_to_sign_in(router, modes):
    router.start()

    assert modes == [RouteMode.RESOLVING, RouteMode.UNAUTHENTICATED]
    assert router.state.error is None


def test_start_with_existing_session_resolves_role(router, modes, register, runner):
    register("a@example.com", role="client")

    router.start()
    assert router.state.mode is RouteMode.RESOLVING

    runner.run_all()
    assert modes == [RouteMode.RESOLVING, RouteMode.CLIENT]
    assert router.state.identity.email == "a@example.com"


def test_sign_up_routes_once_profile_is_written(router, modes, register, runner):
    router.start()

    register("admin@example.com", role="admin")
    runner.run_all()

    assert router.state.mode is RouteMode.ADMIN
    assert modes[-2:] == [RouteMode.RESOLVING, RouteMode.ADMIN]


def test_missing_profile_forces_sign_out(router, session_store, runner, sleeps):
    router.start()
    session_store.create_identity("ghost@example.com", "secret1")

    runner.run_all()

    assert router.state.mode is RouteMode.UNAUTHENTICATED
    assert router.state.error == "User profile not found."
    assert session_store.current_identity() is None
    assert len(sleeps) == 3


def test_missing_role_forces_sign_out(router, session_store, directory, runner):
    router.start()
    identity = session_store.create_identity("norole@example.com", "secret1")
    directory.profiles[identity.id] = UserProfile(id=identity.id, email=identity.email, name="N", role=None)

    runner.run_all()

    assert router.state.mode is RouteMode.UNAUTHENTICATED
    assert router.state.error == "User role not found."
    assert session_store.current_identity() is None


def test_failed_forced_sign_out_still_leaves_app_unauthenticated(router, session_store, runner):
    router.start()
    session_store.create_identity("ghost@example.com", "secret1")
    session_store.fail_sign_out = True

    runner.run_all()

    assert router.state.mode is RouteMode.UNAUTHENTICATED
    assert router.state.error == "User profile not found."


def test_sign_out_returns_to_unauthenticated(router, modes, register, runner, auth_service):
    register("a@example.com")
    router.start()
    runner.run_all()

    auth_service.end_session()

    assert modes[-2:] == [RouteMode.RESOLVING, RouteMode.UNAUTHENTICATED]
    assert router.state.identity is None
    assert router.state.role is None


def test_result_for_superseded_session_is_dropped(router, register, runner, auth_service):
    router.start()
    register("a@example.com")
    auth_service.end_session()

    runner.run_all()

    assert router.state.mode is RouteMode.UNAUTHENTICATED


def test_listener_failure_does_not_stop_routing(router, modes):
    def _broken(state):
        raise RuntimeError("listener bug")

    router.add_listener(_broken)
    router.start()

    assert router.state.mode is RouteMode.UNAUTHENTICATED
    assert modes[-1] is RouteMode.UNAUTHENTICATED


def test_removed_listener_is_not_called(router):
    seen = []
    remove = router.add_listener(seen.append)
    remove()
    remove()

    router.start()

    assert seen == []


def test_stop_detaches_from_session(router, modes, register, runner):
    router.start()
    router.stop()
    count = len(modes)

    register("a@example.com")
    runner.run_all()

    assert len(modes) == count
    assert router.state.mode is RouteMode.UNAUTHENTICATED


def test_start_twice_subscribes_once(router, session_store, modes):
    router.start()
    router.start()

    assert len(session_store._listeners) == 1


def test_forced_sign_out_routes_to_sign_in_once_with_error(router, session_store, runner):
    states = []
    router.add_listener(states.append)
    router.start()
    session_store.create_identity("ghost@example.com", "secret1")
    states.clear()

    runner.run_all()

    signed_out = [s for s in states if s.mode is RouteMode.UNAUTHENTICATED]
    assert len(signed_out) == 1
    assert signed_out[0].error == "User profile not found."
    assert states[-1] is signed_out[0]


def test_late_sign_out_notification_keeps_error(router, session_store, runner, monkeypatch):
    # The store clears the session without notifying; the event arrives later.
    def _quiet_end_session():
        session_store._identity = None

    router.start()
    session_store.create_identity("ghost@example.com", "secret1")
    monkeypatch.setattr(session_store, "end_session", _quiet_end_session)
    runner.run_all()
    states = []
    router.add_listener(states.append)

    session_store._set(None)

    assert states == []
    assert router.state.mode is RouteMode.UNAUTHENTICATED
    assert router.state.error == "User profile not found."
