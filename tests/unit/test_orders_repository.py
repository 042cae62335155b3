from unittest.mock import MagicMock

from storefront.orders import repository

def _client_returning(rows):
    client = MagicMock()
    query = client.table.return_value
    query.upsert.return_value.execute.return_value = MagicMock(data=rows)
    return client, query

def test_insert_uses_upsert_keyed_by_session(monkeypatch):
    client, query = _client_returning([{"id": 1, "stripe_checkout_session_id": "cs_1"}])
    monkeypatch.setattr(repository.supabase_client, "get_service_supabase", lambda: client)

    created = repository.insert_order_if_absent({"stripe_checkout_session_id": "cs_1"})

    assert created["id"] == 1
    client.table.assert_called_with("orders")
    query.upsert.assert_called_once_with(
        {"stripe_checkout_session_id": "cs_1"},
        on_conflict="stripe_checkout_session_id",
        ignore_duplicates=True,
    )

def test_insert_returns_none_on_duplicate(monkeypatch):
    client, _ = _client_returning([])
    monkeypatch.setattr(repository.supabase_client, "get_service_supabase", lambda: client)
    assert repository.insert_order_if_absent({"stripe_checkout_session_id": "cs_1"}) is None

def test_user_orders_tolerate_errors(monkeypatch):
    def _boom():
        raise RuntimeError("db down")
    monkeypatch.setattr(repository.supabase_client, "get_service_supabase", _boom)
    assert repository.list_user_orders("user-1") == []
    assert repository.get_order_by_number("ord-1") is None

def test_user_orders_empty_user():
    assert repository.list_user_orders("") == []

def test_get_order_by_session_id(fake_supabase):
    fake_supabase.tables["orders"] = [{"id": 3, "stripe_checkout_session_id": "cs_3"}]
    assert repository.get_order_by_session_id("cs_3")["id"] == 3
    names = [c[0] for c in fake_supabase.queries[-1].calls]
    assert "eq" in names
