"""
Supabase client accessor tests.
"""

import threading
import time

import pytest

from erp_ui import config
from erp_ui.lib import clients
from erp_ui.lib.clients import Lazy, LazyMap


def test_lazy_builds_once():
    """Test that every call returns the same instance."""
    calls = []
    holder = Lazy(lambda: calls.append(1) or object(), "test handle")

    first = holder.get()

    assert holder.get() is first
    assert len(calls) == 1


def test_lazy_concurrent_first_access():
    """Test that concurrent first callers share one construction."""
    calls = []

    def factory():
        calls.append(1)
        time.sleep(0.05)
        return object()

    holder = Lazy(factory, "test handle")
    results = []
    threads = [threading.Thread(target=lambda: results.append(holder.get())) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(calls) == 1
    assert len({id(result) for result in results}) == 1


def test_lazy_reset():
    """Test that reset() forces a new construction."""
    holder = Lazy(object, "test handle")
    first = holder.get()

    holder.reset()

    assert holder.get() is not first


def test_create_supabase_requires_configuration():
    """Test that a client cannot be built without URL and key."""
    with pytest.raises(ValueError, match="SUPABASE_URL"):
        clients.create_supabase(config.Settings())


def test_create_supabase_options(monkeypatch):
    """Test that the client is built with persistence and auto-refresh."""
    captured = {}

    def fake_create_client(url, key, options=None):
        captured.update(url=url, key=key, options=options)
        return object()

    monkeypatch.setattr(clients, "create_client", fake_create_client)
    settings = config.Settings(
        supabase_url="https://project.supabase.co", supabase_anon_key="eyJkey"
    )

    clients.create_supabase(settings)

    assert captured["url"] == "https://project.supabase.co"
    assert captured["key"] == "eyJkey"
    assert captured["options"].auto_refresh_token is True
    assert captured["options"].persist_session is True
    assert captured["options"].headers["X-Client-Info"] == config.CLIENT_INFO


def test_supabase_accessor_is_per_session(monkeypatch):
    """Test that clients.supabase() returns one client per browser session."""
    built = []
    monkeypatch.setattr(clients, "create_supabase", lambda settings: built.append(1) or object())
    clients.reset()
    try:
        first = clients.supabase("token-a")
        assert clients.supabase("token-a") is first
        assert clients.supabase("token-b") is not first
        assert len(built) == 2

        clients.release("token-a")
        assert clients.supabase("token-a") is not first
        assert len(built) == 3
    finally:
        clients.reset()


def test_lazy_map_builds_once_per_key():
    calls = []
    handles = LazyMap(lambda key: calls.append(key) or object(), "test handle")

    first = handles.get("a")

    assert handles.get("a") is first
    assert handles.get("b") is not first
    assert calls == ["a", "b"]
    assert len(handles) == 2


def test_lazy_map_pop_and_clear():
    handles = LazyMap(lambda key: object(), "test handle")
    first = handles.get("a")
    handles.get("b")

    assert handles.pop("a") is first
    assert handles.pop("a") is None
    assert len(handles) == 1

    handles.clear()
    assert len(handles) == 0


def test_lazy_map_concurrent_first_use():
    """Test that concurrent first callers of one key share one handle."""
    calls = []

    def factory(key):
        time.sleep(0.01)
        calls.append(key)
        return object()

    handles = LazyMap(factory, "slow handle")
    results = []
    threads = [threading.Thread(target=lambda: results.append(handles.get("k"))) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert calls == ["k"]
    assert all(result is results[0] for result in results)
