import os

# Avant l'import de l'app: pas de Redis pendant les tests
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")
os.environ.setdefault("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver")

import hashlib
import hmac
import json
import time
from typing import Any, Dict, Generator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from storefront.app import app as fastapi_app
from storefront.utils.security import require_user

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


class Resp:
    def __init__(self, data=None, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Chaîne postgrest factice: toute méthode renvoie self, execute() renvoie les lignes prévues."""

    def __init__(self, table_name: str, rows=None):
        self.table_name = table_name
        self.rows = rows or []
        self.calls = []

    def __getattr__(self, name):
        def _method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return _method

    def execute(self):
        return Resp(data=list(self.rows))


class FakeSupabase:
    def __init__(self, tables: Dict[str, Any] | None = None):
        self.tables = tables or {}
        self.queries = []
        self.auth = MagicMock()

    def table(self, name: str) -> FakeQuery:
        q = FakeQuery(name, self.tables.get(name, []))
        self.queries.append(q)
        return q


def sign_payload(payload: bytes, secret: str, timestamp: int | None = None) -> str:
    """En-tête Stripe-Signature au format Stripe (t=<ts>,v1=<hmac-sha256>)."""
    ts = timestamp or int(time.time())
    signed = f"{ts}.{payload.decode('utf-8')}".encode("utf-8")
    sig = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={sig}"


def make_event(event_type: str, obj: Dict[str, Any], event_id: str = "evt_test_1") -> bytes:
    return json.dumps({"id": event_id, "object": "event", "type": event_type, "data": {"object": obj}}).encode("utf-8")


@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

# Simuler un utilisateur authentifié pour les endpoints protégés
@pytest.fixture(autouse=True)
def _override_require_user(app):
    fake_user: Dict[str, Any] = {
        "id": "test-user",
        "email": "test@example.com",
        "metadata": {"full_name": "Test User"},
    }
    app.dependency_overrides[require_user] = lambda: fake_user
    try:
        yield fake_user
    finally:
        app.dependency_overrides.pop(require_user, None)

# Aucun accès réseau Supabase pendant les tests
@pytest.fixture(autouse=True)
def fake_supabase(monkeypatch):
    fake = FakeSupabase()
    monkeypatch.setattr("storefront.infra.supabase_client.get_supabase", lambda: fake)
    monkeypatch.setattr("storefront.infra.supabase_client.get_service_supabase", lambda: fake)
    return fake

# Aucun appel Stripe réel: chaque test remplace ce dont il a besoin
@pytest.fixture(autouse=True)
def _no_stripe_network(monkeypatch):
    def _blocked(*args, **kwargs):
        raise AssertionError("Appel Stripe non mocké")
    for name in ("find_customer_id", "create_session", "list_line_items", "retrieve_invoice"):
        monkeypatch.setattr(f"storefront.payments.stripe_client.{name}", _blocked)

@pytest.fixture()
def webhook_secret(monkeypatch):
    secret = "whsec_test_secret"
    monkeypatch.setattr("storefront.config.STRIPE_WEBHOOK_SECRET", secret)
    return secret

@pytest.fixture()
def sign():
    return sign_payload

@pytest.fixture()
def event_payload():
    return make_event
