"""
Supabase Schema.

Postgres DDL for the hosted project: the ``profiles`` and ``tickets``
tables, their constraints, the ``updated_at`` trigger, and the
row-level-security policies that enforce who may read and change
what.  The client never re-checks these rules.

Run against the project once (SQL editor or ``psql``)::

    python -m tickettrack.schema > schema.sql
"""

from __future__ import annotations

from string import Template

from tickettrack.config import AppConfig, get_config
from tickettrack.models.enums import TicketStatus, TicketType, UserRole
from tickettrack.models.ticket import TITLE_MAX_LENGTH

_SCHEMA_TEMPLATE: Template = Template("""\
-- TicketTrack schema

create table if not exists public.$profiles (
    id          uuid primary key references auth.users (id),
    email       text not null,
    name        text not null,
    role        text not null check (role in ($roles)),
    created_at  timestamptz not null default now()
);

create table if not exists public.$tickets (
    id            uuid primary key default gen_random_uuid(),
    title         text not null check (char_length(title) between 1 and $title_max),
    description   text not null check (char_length(description) > 0),
    type          text not null check (type in ($types)),
    status        text not null default 'open' check (status in ($statuses)),
    client_id     uuid not null references auth.users (id),
    client_name   text not null,
    client_email  text not null,
    created_at    timestamptz not null default now(),
    updated_at    timestamptz
);

create index if not exists ${tickets}_client_created_idx
    on public.$tickets (client_id, created_at desc);

-- client_id and created_at are fixed once written; updated_at is server time.
create or replace function public.${tickets}_before_update()
returns trigger language plpgsql as $$$$
begin
    new.client_id := old.client_id;
    new.created_at := old.created_at;
    new.updated_at := now();
    return new;
end;
$$$$;

drop trigger if exists ${tickets}_before_update on public.$tickets;
create trigger ${tickets}_before_update
    before update on public.$tickets
    for each row execute function public.${tickets}_before_update();

create or replace function public.is_admin()
returns boolean language sql stable security definer as $$$$
    select exists (
        select 1 from public.$profiles
        where id = auth.uid() and role = 'admin'
    );
$$$$;

alter table public.$profiles enable row level security;
alter table public.$tickets enable row level security;

create policy "profiles: insert own" on public.$profiles
    for insert with check (id = auth.uid());
create policy "profiles: read own or admin" on public.$profiles
    for select using (id = auth.uid() or public.is_admin());

create policy "tickets: client inserts own open ticket" on public.$tickets
    for insert with check (client_id = auth.uid() and status = 'open');
create policy "tickets: read own or admin" on public.$tickets
    for select using (client_id = auth.uid() or public.is_admin());
create policy "tickets: admin updates" on public.$tickets
    for update using (public.is_admin()) with check (public.is_admin());
""")


def _sql_list(values: list[str]) -> str:
    return ", ".join(f"'{value}'" for value in values)


def render_schema(config: AppConfig) -> str:
    """Return the DDL for the tables named in *config*."""
    return _SCHEMA_TEMPLATE.substitute(
        profiles=config.PROFILES_TABLE,
        tickets=config.TICKETS_TABLE,
        roles=_sql_list([r.value for r in UserRole]),
        types=_sql_list([t.value for t in TicketType]),
        statuses=_sql_list([s.value for s in TicketStatus]),
        title_max=TITLE_MAX_LENGTH,
    )


if __name__ == "__main__":
    print(render_schema(get_config()))
