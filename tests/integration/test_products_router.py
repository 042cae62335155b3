def test_list_products(client, fake_supabase):
    fake_supabase.tables["products"] = [{"id": "A", "name": "Produit A", "slug": "produit-a", "price": 10}]
    r = client.get("/api/v1/products")
    assert r.status_code == 200
    assert r.json()["items"][0]["slug"] == "produit-a"

def test_product_by_slug_not_found(client, fake_supabase):
    fake_supabase.tables["products"] = []
    r = client.get("/api/v1/products/inconnu")
    assert r.status_code == 404
    assert r.json()["detail"] == "Produit introuvable"

def test_product_by_slug(client, fake_supabase):
    fake_supabase.tables["products"] = [{"id": "A", "slug": "produit-a"}]
    r = client.get("/api/v1/products/produit-a")
    assert r.status_code == 200
    assert r.json()["id"] == "A"

def test_catalog_errors_return_empty_list(client, monkeypatch):
    def _boom():
        raise RuntimeError("supabase down")
    monkeypatch.setattr("storefront.infra.supabase_client.get_supabase", _boom)
    r = client.get("/api/v1/brands")
    assert r.status_code == 200
    assert r.json() == {"items": []}
