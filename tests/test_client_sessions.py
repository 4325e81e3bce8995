from datetime import timedelta

from restodesk.models import utc_now

from tests.helpers import DEMO_PASSWORD


def test_session_lookup_by_token(system):
    client = system.open_session()
    assert system.get_session(client.token) is client
    assert system.get_session("unknown") is None
    assert system.get_session(None) is None


def test_idle_session_expires_on_lookup(system):
    client = system.open_session()
    assert client.controller.login("john", DEMO_PASSWORD)

    client.last_seen = utc_now() - system.session_ttl - timedelta(seconds=1)

    assert system.get_session(client.token) is None
    assert system.session_count == 0
    assert not client.controller.is_authenticated


def test_lookup_keeps_active_session_alive(system):
    client = system.open_session()
    client.last_seen = utc_now() - system.session_ttl + timedelta(minutes=1)

    assert system.get_session(client.token) is client
    assert utc_now() - client.last_seen < timedelta(minutes=1)


def test_opening_a_session_prunes_idle_ones(system):
    stale = [system.open_session() for _ in range(3)]
    for client in stale:
        client.last_seen = utc_now() - system.session_ttl - timedelta(minutes=5)

    fresh = system.open_session()

    assert system.session_count == 1
    assert system.get_session(fresh.token) is fresh
    assert all(system.get_session(client.token) is None for client in stale)


def test_prune_with_explicit_now(system):
    client = system.open_session()
    assert system.prune_sessions(now=client.last_seen + system.session_ttl) == 0
    assert system.prune_sessions(now=client.last_seen + system.session_ttl + timedelta(seconds=1)) == 1
    assert system.session_count == 0
