"""
Accès données catalogue (tables products, categories, brands).
Les lectures sont tolérantes: [] / None en cas d'erreur, avec log.
"""
from typing import Any, Dict, Iterable, List, Optional
import logging

import storefront.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = "id, name, slug, description, price, discount, stock, images, status, variant, category_ids, brand_id"

# module storefront.products.repository
def fetch_products_by_ids(ids: List[str], strict: bool = False) -> List[dict]:
    """
    Récupère les produits par leurs IDs.
    - Retourne [] si ids vide ou en cas d’erreur.
    - strict=True: l'erreur Supabase remonte (checkout: panne amont != produit inconnu).
    """
    if not ids:
        return []
    try:
        res = (
            supabase_client.get_supabase()
            .table("products")
            .select(PRODUCT_COLUMNS)
            .in_("id", [str(i) for i in ids])
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("products.repository.fetch_products_by_ids failed ids=%s", ids)
        if strict:
            raise
        return []

def get_products_map(ids: Iterable[str], strict: bool = False) -> Dict[str, Dict[str, Any]]:
    """Retourne un dict {id: produit} à partir d’une liste d’IDs."""
    products = fetch_products_by_ids(list(dict.fromkeys(str(i) for i in ids)), strict=strict)
    return {str(p.get("id")): p for p in products}

def list_products(variant: Optional[str] = None, limit: int = 100) -> List[dict]:
    try:
        query = supabase_client.get_supabase().table("products").select(PRODUCT_COLUMNS)
        if variant:
            query = query.eq("variant", variant)
        res = query.order("name").limit(limit).execute()
        return res.data or []
    except Exception:
        logger.exception("products.repository.list_products failed variant=%s", variant)
        return []

def list_deal_products(limit: int = 20) -> List[dict]:
    """Produits mis en avant (status 'hot')."""
    try:
        res = (
            supabase_client.get_supabase()
            .table("products")
            .select(PRODUCT_COLUMNS)
            .eq("status", "hot")
            .order("name")
            .limit(limit)
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("products.repository.list_deal_products failed")
        return []

def get_product_by_slug(slug: str) -> Optional[dict]:
    try:
        res = (
            supabase_client.get_supabase()
            .table("products")
            .select(PRODUCT_COLUMNS)
            .eq("slug", slug)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("products.repository.get_product_by_slug failed slug=%s", slug)
        return None

def list_categories(limit: Optional[int] = None) -> List[dict]:
    """
    Catégories triées par titre, avec productCount (nombre de produits qui la référencent).
    """
    try:
        client = supabase_client.get_supabase()
        query = client.table("categories").select("id, title, slug, description").order("title")
        if limit:
            query = query.limit(limit)
        categories = query.execute().data or []
        refs = client.table("products").select("category_ids").execute().data or []
    except Exception:
        logger.exception("products.repository.list_categories failed")
        return []
    counts: Dict[str, int] = {}
    for row in refs:
        for cid in row.get("category_ids") or []:
            counts[str(cid)] = counts.get(str(cid), 0) + 1
    return [{**c, "productCount": counts.get(str(c.get("id")), 0)} for c in categories]

def list_products_by_category(slug: str) -> List[dict]:
    try:
        client = supabase_client.get_supabase()
        rows = client.table("categories").select("id").eq("slug", slug).limit(1).execute().data or []
        if not rows:
            return []
        res = (
            client.table("products")
            .select(PRODUCT_COLUMNS)
            .contains("category_ids", [rows[0]["id"]])
            .order("name")
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("products.repository.list_products_by_category failed slug=%s", slug)
        return []

def list_brands() -> List[dict]:
    try:
        res = supabase_client.get_supabase().table("brands").select("id, title, slug").order("title").execute()
        return res.data or []
    except Exception:
        logger.exception("products.repository.list_brands failed")
        return []
