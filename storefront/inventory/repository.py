"""
Accès au stock produit (table products, colonne stock) via le client service-role.
Les erreurs Supabase remontent: l'appelant décide de les contenir.
"""
from typing import Optional
import storefront.infra.supabase_client as supabase_client

# module storefront.inventory.repository
def get_product_stock(product_id: str) -> Optional[dict]:
    """Retourne {id, stock} ou None si le produit n'existe pas."""
    res = (
        supabase_client.get_service_supabase()
        .table("products")
        .select("id, stock")
        .eq("id", product_id)
        .limit(1)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def set_product_stock(product_id: str, stock: int) -> None:
    (
        supabase_client.get_service_supabase()
        .table("products")
        .update({"stock": stock})
        .eq("id", product_id)
        .execute()
    )
