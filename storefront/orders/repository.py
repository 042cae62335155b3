"""
Accès données pour la feature 'orders' (table orders).
- Écritures via service-role; les erreurs remontent (le webhook renvoie 400 et Stripe relivre).
- Lectures utilisateur tolérantes: [] / None en cas d'erreur.
"""
from typing import Any, Dict, List, Optional
import logging

import storefront.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

SESSION_KEY = "stripe_checkout_session_id"

# module storefront.orders.repository
def get_order_by_session_id(session_id: str) -> Optional[dict]:
    res = (
        supabase_client.get_service_supabase()
        .table("orders")
        .select("*")
        .eq(SESSION_KEY, session_id)
        .limit(1)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def insert_order_if_absent(order: Dict[str, Any]) -> Optional[dict]:
    """
    Création conditionnelle keyed par stripe_checkout_session_id (contrainte unique).
    - Retourne la ligne créée, ou None si une commande existait déjà pour cette session.
    """
    res = (
        supabase_client.get_service_supabase()
        .table("orders")
        .upsert(order, on_conflict=SESSION_KEY, ignore_duplicates=True)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def list_user_orders(user_id: str, limit: int = 50) -> List[dict]:
    """Commandes de l'utilisateur connecté, plus récentes d'abord."""
    if not user_id:
        return []
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select("*")
            .eq("user_id", user_id)
            .order("order_date", desc=True)
            .limit(limit)
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("orders.repository.list_user_orders failed user_id=%s", user_id)
        return []

def get_order_by_number(order_number: str) -> Optional[dict]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table("orders")
            .select("*")
            .eq("order_number", order_number)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("orders.repository.get_order_by_number failed order_number=%s", order_number)
        return None
