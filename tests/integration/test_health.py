def test_health_root(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

def test_health_supabase(client, monkeypatch, fake_supabase):
    monkeypatch.setattr("storefront.config.SUPABASE_URL", None)
    monkeypatch.setattr("storefront.config.STRIPE_SECRET_KEY", "sk_test_x")
    monkeypatch.setattr("storefront.config.STRIPE_WEBHOOK_SECRET", None)
    fake_supabase.tables["products"] = [{"id": "A"}]

    data = client.get("/health/supabase").json()
    assert data["connect_ok"] is True
    assert data["tables"]["products"] == {"ok": True, "rows": 1}
    assert data["stripe"] == {"secret_key": True, "webhook_secret": False}
    assert "sk_test_x" not in str(data)

def test_health_rate_limit_disabled_in_tests(client):
    data = client.get("/health/rate-limit").json()
    assert data["enabled"] is False
