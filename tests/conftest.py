import os

# Console-only logging for the test run; must be set before config loads.
os.environ["LOG_FILE"] = ""
os.environ["SUPABASE_URL"] = ""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from tickettrack.config import reset_config
from tickettrack.logger import StructuredLogger
from tickettrack.models.enums import TicketStatus
from tickettrack.models.ticket import Ticket, TicketDraft
from tickettrack.models.user import Identity
from tickettrack.services.auth_service import AuthService
from tickettrack.services.role_router import RoleRouter
from tickettrack.services.ticket_service import TicketService


# ---------------------------------------------------------------------------
# In-memory stand-ins for the hosted services
# ---------------------------------------------------------------------------


class FakeAuthApiError(Exception):
    """Shaped like the auth SDK's API error: a message plus a ``code``."""

    def __init__(self, message, code=None):
        super().__init__(message)
        self.code = code


class FakeSessionStore:
    def __init__(self):
        self._accounts = {}  # email -> (password, Identity)
        self._identity = None
        self._listeners = []
        self.fail_sign_out = False
        self.create_calls = 0

    def on_session_change(self, callback):
        self._listeners.append(callback)

        def _unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _unsubscribe

    def current_identity(self):
        return self._identity

    def create_identity(self, email, password):
        self.create_calls += 1
        if email in self._accounts:
            raise FakeAuthApiError("User already registered", code="user_already_exists")
        identity = Identity(id=str(uuid.uuid4()), email=email)
        self._accounts[email] = (password, identity)
        self._set(identity)
        return identity

    def authenticate_identity(self, email, password):
        if email not in self._accounts:
            raise FakeAuthApiError("User not found", code="user_not_found")
        stored_password, identity = self._accounts[email]
        if password != stored_password:
            raise FakeAuthApiError("Invalid login credentials", code="invalid_credentials")
        self._set(identity)
        return identity

    def end_session(self):
        if self.fail_sign_out:
            raise ConnectionError("network down")
        self._set(None)

    def _set(self, identity):
        self._identity = identity
        for listener in list(self._listeners):
            listener(identity)


class FakeDirectory:
    """Profiles table.  ``visible_after_reads`` simulates replication lag."""

    def __init__(self):
        self.profiles = {}
        self.visible_after_reads = 0
        self.fail_put = False
        self.fail_get = False
        self.get_calls = 0

    def get(self, user_id):
        self.get_calls += 1
        if self.fail_get:
            raise ConnectionError("directory unreachable")
        if self.get_calls <= self.visible_after_reads:
            return None
        return self.profiles.get(user_id)

    def put(self, profile):
        if self.fail_put:
            raise ValueError("insert rejected")
        self.profiles[profile.id] = profile


class FakeSubscription:
    def __init__(self, store, client_id, on_data, on_error):
        self._store = store
        self.client_id = client_id
        self.on_data = on_data
        self.on_error = on_error
        self.active = True
        self.cancel_calls = 0

    def cancel(self):
        self.cancel_calls += 1
        if self.active:
            self.active = False
            self._store.subscriptions.remove(self)

    def __call__(self):
        self.cancel()


class FakeTicketStore:
    """Tickets table that pushes the full ordered list to every live subscriber."""

    def __init__(self):
        self.tickets = {}
        self.subscriptions = []
        self.update_calls = []
        self.fail_create = False
        self.fail_subscribe = False
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def create(self, draft: TicketDraft) -> str:
        if self.fail_create:
            raise ConnectionError("insert timed out")
        self._clock += timedelta(seconds=1)
        ticket_id = f"t{len(self.tickets) + 1}"
        self.tickets[ticket_id] = Ticket(id=ticket_id, created_at=self._clock, **draft.model_dump())
        self._push()
        return ticket_id

    def get(self, ticket_id):
        return self.tickets.get(ticket_id)

    def update(self, ticket_id, changes):
        self.update_calls.append((ticket_id, dict(changes)))
        ticket = self.tickets.get(ticket_id)
        if ticket is None:
            return False
        self.tickets[ticket_id] = ticket.model_copy(
            update={
                "status": TicketStatus(changes["status"]),
                "updated_at": datetime.now(timezone.utc),
            }
        )
        self._push()
        return True

    def subscribe(self, client_id, on_data, on_error):
        if self.fail_subscribe:
            raise ConnectionError("subscription refused")
        subscription = FakeSubscription(self, client_id, on_data, on_error)
        self.subscriptions.append(subscription)
        on_data(self._ordered(client_id))
        return subscription

    def fail_live(self, exc):
        for subscription in list(self.subscriptions):
            subscription.on_error(exc)

    def _ordered(self, client_id):
        rows = [t for t in self.tickets.values() if client_id is None or t.client_id == client_id]
        return sorted(rows, key=lambda t: t.created_at, reverse=True)

    def _push(self):
        for subscription in list(self.subscriptions):
            subscription.on_data(self._ordered(subscription.client_id))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _fresh_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture()
def logger():
    return StructuredLogger(name="tickettrack.test")


@pytest.fixture()
def session_store():
    return FakeSessionStore()


@pytest.fixture()
def directory():
    return FakeDirectory()


@pytest.fixture()
def ticket_store():
    return FakeTicketStore()


@pytest.fixture()
def sleeps():
    return []


@pytest.fixture()
def auth_service(session_store, directory, logger, sleeps):
    return AuthService(
        session_store=session_store,
        directory=directory,
        logger=logger,
        role_lookup_retries=3,
        role_lookup_delay_s=0.5,
        sleep=sleeps.append,
    )


@pytest.fixture()
def ticket_service(session_store, directory, ticket_store, logger):
    return TicketService(
        session_store=session_store,
        directory=directory,
        tickets=ticket_store,
        logger=logger,
    )


class DeferredRunner:
    """Background runner that holds work until ``run_all()``."""

    def __init__(self):
        self.pending = []

    def __call__(self, work):
        self.pending.append(work)

    def run_all(self):
        while self.pending:
            self.pending.pop(0)()


@pytest.fixture()
def runner():
    return DeferredRunner()


@pytest.fixture()
def router(session_store, auth_service, logger, runner):
    return RoleRouter(
        session_store=session_store,
        auth_service=auth_service,
        logger=logger,
        run_in_background=runner,
    )


@pytest.fixture()
def register(auth_service):
    """Create an account and its profile; leaves it signed in."""

    def _register(email, role="client", name="Test User", password="secret1"):
        return auth_service.register(email, password, name, role)

    return _register
