from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from tickettrack.live_query import LiveQuery
from tickettrack.models.enums import TicketStatus, TicketType, UserRole
from tickettrack.models.ticket import TicketDraft
from tickettrack.models.user import UserProfile
from tickettrack.repositories import ProfileRepository, TicketRepository

TICKET_ROW = {
    "id": "t1",
    "title": "Crash on launch",
    "description": "App crashes",
    "type": "bug",
    "status": "open",
    "client_id": "u1",
    "client_name": "Alice",
    "client_email": "alice@example.com",
    "created_at": "2024-01-01T10:00:00+00:00",
    "updated_at": None,
}


@pytest.fixture()
def db():
    return MagicMock()


@pytest.fixture()
def table(db):
    return db.supabase.table.return_value


def respond(data):
    return SimpleNamespace(data=data)


# ---------------------------------------------------------------------------
# ProfileRepository
# ---------------------------------------------------------------------------


def test_profile_get_reads_one_row(db, table, logger):
    table.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = respond(
        {"id": "u1", "email": "a@b.c", "name": "A", "role": "admin", "created_at": None}
    )
    repo = ProfileRepository(db=db, logger=logger)

    profile = repo.get("u1")

    assert profile.role == UserRole.ADMIN
    db.supabase.table.assert_called_with("profiles")
    table.select.return_value.eq.assert_called_once_with("id", "u1")


@pytest.mark.parametrize("response", [None, respond(None), respond([])])
def test_profile_get_missing_row(db, table, logger, response):
    table.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = response
    repo = ProfileRepository(db=db, logger=logger)

    assert repo.get("u1") is None


def test_profile_put_leaves_created_at_to_database(db, table, logger):
    repo = ProfileRepository(db=db, logger=logger, table="people")

    repo.put(UserProfile(id="u1", email="a@b.c", name="A", role=UserRole.CLIENT))

    db.supabase.table.assert_called_with("people")
    table.insert.assert_called_once_with({"id": "u1", "email": "a@b.c", "name": "A", "role": "client"})


# ---------------------------------------------------------------------------
# TicketRepository
# ---------------------------------------------------------------------------


def test_ticket_create_returns_new_id(db, table, logger):
    table.insert.return_value.execute.return_value = respond([{**TICKET_ROW, "id": "new-id"}])
    repo = TicketRepository(db=db, logger=logger)
    draft = TicketDraft(
        title="Crash on launch",
        description="App crashes",
        type=TicketType.BUG,
        client_id="u1",
        client_name="Alice",
        client_email="alice@example.com",
    )

    assert repo.create(draft) == "new-id"
    row = table.insert.call_args.args[0]
    assert row["status"] == "open"
    assert "created_at" not in row


def test_ticket_create_without_returned_row_fails(db, table, logger):
    table.insert.return_value.execute.return_value = respond([])
    repo = TicketRepository(db=db, logger=logger)
    draft = TicketDraft(
        title="t", description="d", type=TicketType.FEATURE,
        client_id="u1", client_name="A", client_email="a@b.c",
    )

    with pytest.raises(ValueError):
        repo.create(draft)


def test_ticket_update_stamps_updated_at(db, table, logger):
    table.update.return_value.eq.return_value.execute.return_value = respond([TICKET_ROW])
    repo = TicketRepository(db=db, logger=logger)

    assert repo.update("t1", {"status": "resolved"}) is True
    payload = table.update.call_args.args[0]
    assert payload["status"] == "resolved"
    assert "updated_at" in payload
    table.update.return_value.eq.assert_called_once_with("id", "t1")


def test_ticket_update_no_matching_row(db, table, logger):
    table.update.return_value.eq.return_value.execute.return_value = respond([])
    repo = TicketRepository(db=db, logger=logger)

    assert repo.update("missing", {"status": "closed"}) is False


def test_list_ordered_filters_by_client_and_sorts_newest_first(db, table, logger):
    query = table.select.return_value
    query.eq.return_value.order.return_value.execute.return_value = respond([TICKET_ROW])
    repo = TicketRepository(db=db, logger=logger)

    tickets = repo.list_ordered("u1")

    assert [t.status for t in tickets] == [TicketStatus.OPEN]
    query.eq.assert_called_once_with("client_id", "u1")
    query.eq.return_value.order.assert_called_once_with("created_at", desc=True)


def test_list_ordered_all(db, table, logger):
    query = table.select.return_value
    query.order.return_value.execute.return_value = respond([])
    repo = TicketRepository(db=db, logger=logger)

    assert repo.list_ordered() == []
    query.eq.assert_not_called()


def test_subscribe_returns_running_live_query(db, table, logger):
    table.select.return_value.order.return_value.execute.return_value = respond([TICKET_ROW])
    repo = TicketRepository(db=db, logger=logger, poll_interval_s=0.01, max_poll_interval_s=0.01)
    received = []

    subscription = repo.subscribe(None, received.append, lambda exc: None)
    try:
        assert isinstance(subscription, LiveQuery)
        assert subscription.active
        snapshot = next(subscription.snapshots(timeout=2.0))
        assert [t.id for t in snapshot] == ["t1"]
    finally:
        subscription.cancel()
