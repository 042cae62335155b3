import pytest

from storefront.checkout import service
from storefront.checkout.models import CheckoutItem, CheckoutMetadata

PRODUCTS = {
    "A": {"id": "A", "name": "Produit A", "price": 19.99, "stock": 5},
    "B": {"id": "B", "name": "Produit B", "price": 5.0, "stock": 1},
}

@pytest.fixture()
def catalog(monkeypatch):
    monkeypatch.setattr(service, "get_products_map", lambda ids, **kw: {i: PRODUCTS[i] for i in ids if i in PRODUCTS})

def _meta():
    return CheckoutMetadata(orderNumber="ord-42", customerName="Ada", customerEmail="ada@example.com")

def test_fill_cart_uses_catalog_prices(catalog):
    cart = service.fill_cart([CheckoutItem(id="A", quantity=2), CheckoutItem(id="B")])
    assert cart.get_total_price() == pytest.approx(44.98)
    assert [g["quantity"] for g in cart.get_grouped_items()] == [2, 1]

def test_fill_cart_unknown_product(catalog):
    with pytest.raises(ValueError, match="introuvable"):
        service.fill_cart([CheckoutItem(id="Z")])

def test_fill_cart_insufficient_stock(catalog):
    with pytest.raises(ValueError, match="Stock insuffisant"):
        service.fill_cart([CheckoutItem(id="B", quantity=2)])

def test_create_session_empty_cart_never_calls_stripe():
    with pytest.raises(ValueError):
        service.create_checkout_session([], _meta())

def test_create_session_links_existing_customer(monkeypatch, catalog):
    captured = {}
    monkeypatch.setattr(service.stripe_client, "find_customer_id", lambda email: "cus_1")

    def _create(**params):
        captured.update(params)
        return {"id": "cs_test_1", "url": "https://checkout.stripe.test/cs_test_1"}

    monkeypatch.setattr(service.stripe_client, "create_session", _create)
    monkeypatch.setattr(service.config, "BASE_URL", "https://shop.test")

    cart = service.fill_cart([CheckoutItem(id="A", quantity=2), CheckoutItem(id="B")])
    session = service.create_checkout_session(cart.get_grouped_items(), _meta())

    assert session["url"].startswith("https://")
    assert captured["customer"] == "cus_1"
    assert [li["price_data"]["unit_amount"] for li in captured["line_items"]] == [1999, 500]
    assert captured["metadata"]["orderNumber"] == "ord-42"
    assert captured["success_url"].startswith("https://shop.test/success?session_id=")

def test_create_session_provider_error_propagates(monkeypatch, catalog):
    monkeypatch.setattr(service.stripe_client, "find_customer_id", lambda email: None)

    def _boom(**params):
        raise RuntimeError("stripe down")

    monkeypatch.setattr(service.stripe_client, "create_session", _boom)
    cart = service.fill_cart([CheckoutItem(id="A")])
    with pytest.raises(RuntimeError, match="stripe down"):
        service.create_checkout_session(cart.get_grouped_items(), _meta())

def test_fill_cart_catalog_outage_propagates(monkeypatch):
    def _down():
        raise RuntimeError("supabase unreachable")
    monkeypatch.setattr("storefront.infra.supabase_client.get_supabase", _down)
    with pytest.raises(RuntimeError, match="supabase unreachable"):
        service.fill_cart([CheckoutItem(id="A")])

def test_resolve_metadata_guest_drops_client_user_id():
    meta = CheckoutMetadata(customerName="Ada", customerEmail="ada@example.com", userId="victim-user")
    resolved = service.resolve_metadata(meta, None)
    assert resolved.user_id is None
    assert resolved.customer_email == "ada@example.com"

def test_resolve_metadata_uses_authenticated_identity():
    user = {"id": "user-42", "email": "real@example.com", "metadata": {"full_name": "Real User"}}
    meta = CheckoutMetadata(orderNumber="ord-1", userId="victim-user")
    resolved = service.resolve_metadata(meta, user)
    assert resolved.user_id == "user-42"
    assert resolved.customer_email == "real@example.com"
    assert resolved.customer_name == "Real User"
    assert resolved.order_number == "ord-1"

def test_resolve_metadata_keeps_provided_contact_fields():
    user = {"id": "user-42", "email": "real@example.com", "metadata": {"full_name": "Real User"}}
    meta = CheckoutMetadata(customerName="Ada", customerEmail="ada@example.com")
    resolved = service.resolve_metadata(meta, user)
    assert resolved.user_id == "user-42"
    assert resolved.customer_email == "ada@example.com"
    assert resolved.customer_name == "Ada"
