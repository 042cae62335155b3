import pytest

from storefront.cart import CartStore

def _product(pid, price, stock=10, discount=0, name=None):
    return {"id": pid, "name": name or f"Produit {pid}", "price": price, "stock": stock, "discount": discount}

def test_add_and_remove_items():
    cart = CartStore()
    a = _product("A", 10.0)
    assert cart.add_item(a) is True
    assert cart.add_item(a) is True
    assert cart.get_item_count("A") == 2

    cart.remove_item("A")
    assert cart.get_item_count("A") == 1
    cart.remove_item("A")
    assert cart.get_item_count("A") == 0
    assert len(cart) == 0

def test_add_item_rejected_when_out_of_stock():
    cart = CartStore()
    assert cart.add_item(_product("Z", 9.99, stock=0)) is False
    assert cart.get_grouped_items() == []

def test_add_item_rejected_beyond_available_stock():
    cart = CartStore()
    p = _product("B", 5.0, stock=2)
    assert cart.add_item(p, 2) is True
    assert cart.add_item(p) is False
    assert cart.get_item_count("B") == 2

def test_totals_and_grouping_keep_insertion_order():
    cart = CartStore()
    cart.add_item(_product("A", 19.99), 2)
    cart.add_item(_product("B", 5.00), 1)

    assert cart.get_total_price() == pytest.approx(44.98)
    grouped = cart.get_grouped_items()
    assert [g["product"]["id"] for g in grouped] == ["A", "B"]
    assert [g["quantity"] for g in grouped] == [2, 1]

def test_subtotal_adds_back_discount_percentage():
    cart = CartStore()
    cart.add_item(_product("A", 80.0, discount=25), 1)
    assert cart.get_total_price() == pytest.approx(80.0)
    assert cart.get_subtotal_price() == pytest.approx(100.0)

def test_delete_and_reset():
    cart = CartStore()
    cart.add_item(_product("A", 1.0), 3)
    cart.add_item(_product("B", 2.0))
    cart.delete_cart_product("A")
    assert cart.get_item_count("A") == 0
    assert cart.get_item_count("B") == 1
    cart.reset_cart()
    assert cart.get_grouped_items() == []
