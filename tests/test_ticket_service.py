import logging

import pytest

from tickettrack.errors import (
    ErrorCode,
    InvalidStatus,
    NotAuthenticated,
    ServiceError,
    TicketNotFound,
    ValidationError,
)
from tickettrack.models.enums import TicketStatus, TicketType


@pytest.fixture()
def client_a(register):
    return register("a@example.com", role="client", name="Alice")


# ---------------------------------------------------------------------------
# submit_ticket
# ---------------------------------------------------------------------------


def test_submitted_ticket_is_open_and_owned_by_creator(ticket_service, ticket_store, client_a):
    ticket_id = ticket_service.submit_ticket("Crash on launch", "App crashes", "bug")

    ticket = ticket_store.tickets[ticket_id]
    assert ticket.status == TicketStatus.OPEN
    assert ticket.client_id == client_a.id
    assert ticket.client_name == "Alice"
    assert ticket.client_email == "a@example.com"
    assert ticket.type == TicketType.BUG


def test_submit_trims_title_and_description(ticket_service, ticket_store, client_a):
    ticket_id = ticket_service.submit_ticket("  Dark mode  ", "\n Please \n", "feature")

    ticket = ticket_store.tickets[ticket_id]
    assert ticket.title == "Dark mode"
    assert ticket.description == "Please"


def test_submit_requires_sign_in(ticket_service, ticket_store):
    with pytest.raises(NotAuthenticated):
        ticket_service.submit_ticket("Crash", "Details", "bug")

    assert ticket_store.tickets == {}


@pytest.mark.parametrize(
    "title, description, ticket_type",
    [("", "d", "bug"), ("   ", "d", "bug"), ("t", "", "bug"), ("t", "d", "")],
)
def test_submit_rejects_blank_fields(ticket_service, ticket_store, client_a, title, description, ticket_type):
    with pytest.raises(ValidationError) as excinfo:
        ticket_service.submit_ticket(title, description, ticket_type)

    assert excinfo.value.message == "All fields are required."
    assert ticket_store.tickets == {}


def test_submit_title_length_limit(ticket_service, ticket_store, client_a):
    ticket_service.submit_ticket("x" * 100, "d", "bug")

    with pytest.raises(ValidationError):
        ticket_service.submit_ticket("x" * 101, "d", "bug")

    assert len(ticket_store.tickets) == 1


def test_submit_rejects_unknown_type(ticket_service, client_a):
    with pytest.raises(ValidationError) as excinfo:
        ticket_service.submit_ticket("t", "d", "question")

    assert "bug" in excinfo.value.message


def test_submit_falls_back_to_email_when_profile_lookup_fails(
    ticket_service, ticket_store, directory, client_a,
):
    directory.fail_get = True

    ticket_id = ticket_service.submit_ticket("t", "d", "bug")

    assert ticket_store.tickets[ticket_id].client_name == "a@example.com"


def test_submit_store_outage_is_normalized(ticket_service, ticket_store, client_a):
    ticket_store.fail_create = True

    with pytest.raises(ServiceError) as excinfo:
        ticket_service.submit_ticket("t", "d", "bug")

    assert excinfo.value.code == ErrorCode.NETWORK_ERROR


def test_submit_logs_audit_event(ticket_service, client_a, caplog):
    with caplog.at_level(logging.INFO):
        ticket_id = ticket_service.submit_ticket("t", "d", "bug")

    events = [r for r in caplog.records if getattr(r, "event", None) == "TICKET_CREATED"]
    assert events and events[0].ticket_id == ticket_id


# ---------------------------------------------------------------------------
# set_ticket_status / get_ticket
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("status", ["done", "OPEN", "in_progress", ""])
def test_invalid_status_performs_no_mutation(ticket_service, ticket_store, client_a, status):
    ticket_id = ticket_service.submit_ticket("t", "d", "bug")

    with pytest.raises(InvalidStatus) as excinfo:
        ticket_service.set_ticket_status(ticket_id, status)

    assert excinfo.value.message == "Status must be one of: open, in-progress, resolved, closed"
    assert ticket_store.update_calls == []
    assert ticket_store.tickets[ticket_id].status == TicketStatus.OPEN


@pytest.mark.parametrize("status", ["open", "in-progress", "resolved", "closed"])
def test_set_status_accepts_every_status(ticket_service, ticket_store, client_a, status):
    ticket_id = ticket_service.submit_ticket("t", "d", "bug")

    ticket_service.set_ticket_status(ticket_id, status)

    ticket = ticket_store.tickets[ticket_id]
    assert ticket.status == TicketStatus(status)
    assert ticket.updated_at is not None


def test_set_status_requires_ticket_id(ticket_service, ticket_store):
    with pytest.raises(ValidationError):
        ticket_service.set_ticket_status("  ", "open")

    assert ticket_store.update_calls == []


def test_set_status_unknown_ticket(ticket_service):
    with pytest.raises(TicketNotFound):
        ticket_service.set_ticket_status("nope", "closed")


def test_get_ticket(ticket_service, client_a):
    ticket_id = ticket_service.submit_ticket("t", "d", "feature")

    assert ticket_service.get_ticket(ticket_id).id == ticket_id
    with pytest.raises(TicketNotFound):
        ticket_service.get_ticket("nope")


# ---------------------------------------------------------------------------
# watch_own_tickets / watch_all_tickets
# ---------------------------------------------------------------------------


def test_own_tickets_never_include_other_clients(ticket_service, session_store, register):
    register("a@example.com")
    ticket_service.submit_ticket("A's ticket", "d", "bug")
    session_store.end_session()
    bob = register("b@example.com")
    ticket_service.submit_ticket("B's ticket", "d", "feature")

    deliveries = []
    ticket_service.watch_own_tickets(deliveries.append)

    assert [t.title for t in deliveries[-1]] == ["B's ticket"]
    assert all(t.client_id == bob.id for batch in deliveries for t in batch)


def test_own_list_filters_even_if_store_ignores_client_filter(
    ticket_service, ticket_store, session_store, register,
):
    register("a@example.com")
    ticket_service.submit_ticket("A's ticket", "d", "bug")
    session_store.end_session()
    register("b@example.com")
    ticket_service.submit_ticket("B's ticket", "d", "bug")

    def _unfiltered(client_id, on_data, on_error):
        on_data(ticket_store._ordered(None))
        return object()

    ticket_store.subscribe = _unfiltered
    deliveries = []
    ticket_service.watch_own_tickets(deliveries.append)

    assert [t.title for t in deliveries[0]] == ["B's ticket"]


def test_all_tickets_delivers_full_set_newest_first(ticket_service, session_store, register):
    register("a@example.com")
    first = ticket_service.submit_ticket("first", "d", "bug")
    session_store.end_session()
    register("b@example.com")
    second = ticket_service.submit_ticket("second", "d", "bug")

    deliveries = []
    ticket_service.watch_all_tickets(deliveries.append)

    assert [t.id for t in deliveries[-1]] == [second, first]


def test_watch_own_without_identity(ticket_service):
    errors = []

    with pytest.raises(NotAuthenticated):
        ticket_service.watch_own_tickets(lambda tickets: None, errors.append)

    assert len(errors) == 1 and isinstance(errors[0], NotAuthenticated)


def test_unsubscribe_twice_is_harmless(ticket_service, ticket_store, client_a):
    deliveries = []
    subscription = ticket_service.watch_own_tickets(deliveries.append)
    subscription()
    subscription()
    ticket_service.submit_ticket("after cancel", "d", "bug")

    assert deliveries == [[]]
    assert ticket_store.subscriptions == []


def test_subscription_errors_are_normalized(ticket_service, ticket_store, client_a):
    errors = []
    ticket_service.watch_own_tickets(lambda tickets: None, errors.append)

    ticket_store.fail_live(TimeoutError("read timed out"))

    assert len(errors) == 1
    assert isinstance(errors[0], ServiceError)
    assert errors[0].code == ErrorCode.NETWORK_ERROR


def test_subscription_setup_failure_raises(ticket_service, ticket_store, client_a):
    ticket_store.fail_subscribe = True

    with pytest.raises(ServiceError):
        ticket_service.watch_all_tickets(lambda tickets: None)


# ---------------------------------------------------------------------------
# End-to-end scenario
# ---------------------------------------------------------------------------


def test_client_ticket_flows_to_admin_and_status_pushes_back(
    ticket_service, session_store, register,
):
    client = register("a@example.com", role="client", name="A")
    client_view = []
    ticket_service.watch_own_tickets(client_view.append)

    ticket_id = ticket_service.submit_ticket("Crash on launch", "App crashes", "bug")

    own = client_view[-1]
    assert [(t.id, t.status) for t in own] == [(ticket_id, TicketStatus.OPEN)]
    assert own[0].client_id == client.id

    # Admin signs in on another device; the client's subscription stays live.
    register("admin@example.com", role="admin", name="Admin")
    admin_view = []
    ticket_service.watch_all_tickets(admin_view.append)
    assert ticket_id in [t.id for t in admin_view[-1]]

    pushes_before = len(client_view)
    ticket_service.set_ticket_status(ticket_id, "resolved")

    assert len(client_view) == pushes_before + 1
    assert client_view[-1][0].status == TicketStatus.RESOLVED
