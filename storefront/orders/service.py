"""
Matérialisation des commandes: session Stripe payée -> ligne 'orders' -> ajustement du stock.

Rôles:
- Relire les line_items depuis Stripe (jamais depuis la requête client).
- Ignorer (avec log corrélé à la session) les lignes sans id produit catalogue.
- Créer la commande une seule fois par session: une relivraison du webhook renvoie
  la commande existante sans nouvel ajustement de stock.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4
import logging

from storefront.inventory import service as inventory_service
from storefront.payments import stripe_client
from storefront.payments.metadata import extract_metadata_from_session
from storefront.orders import repository

logger = logging.getLogger(__name__)

PAID = "paid"
ADDRESS_FIELDS = ("state", "zip", "city", "address", "name")

# module storefront.orders.service
def to_major_units(amount: Optional[int]) -> float:
    """Centimes -> unités (amount / 100); 0 si absent."""
    return amount / 100 if amount else 0

def product_id_from_line_item(item: Dict[str, Any]) -> Optional[str]:
    """Lit price.product.metadata.id (produit déplié par expand=data.price.product)."""
    product = ((item or {}).get("price") or {}).get("product")
    if not isinstance(product, dict):
        return None
    return ((product.get("metadata") or {}).get("id") or "").strip() or None

def build_order_products(
    line_items: List[Dict[str, Any]],
    session_id: Optional[str] = None,
) -> Tuple[List[Dict[str, Any]], List[Tuple[str, int]]]:
    """
    Construit (products, stock_updates) à partir des line_items Stripe.
    - Chaque entrée reçoit une clé unique (uuid4) pour le tableau.
    - Les lignes sans id produit sont ignorées et ne touchent pas au stock.
    """
    products: List[Dict[str, Any]] = []
    stock_updates: List[Tuple[str, int]] = []
    for item in line_items:
        product_id = product_id_from_line_item(item)
        quantity = int(item.get("quantity") or 0)
        if not product_id:
            logger.warning(
                "orders.materialize skipped line item session_id=%s line_item_id=%s description=%r",
                session_id, item.get("id"), item.get("description"),
            )
            continue
        products.append({"key": str(uuid4()), "product_id": product_id, "quantity": quantity})
        stock_updates.append((product_id, quantity))
    return products, stock_updates

def _invoice_summary(invoice: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not invoice:
        return None
    return {
        "id": invoice.get("id"),
        "number": invoice.get("number"),
        "hosted_invoice_url": invoice.get("hosted_invoice_url"),
    }

def _address_snapshot(address: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not address:
        return None
    return {field: address.get(field) for field in ADDRESS_FIELDS}

def build_order(
    session: Dict[str, Any],
    products: List[Dict[str, Any]],
    invoice: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Assemble la ligne 'orders' (noms de champs = contrat public lu par le reporting)."""
    meta = extract_metadata_from_session(session)
    total_details = session.get("total_details") or {}
    return {
        "order_number": meta["order_number"],
        "stripe_checkout_session_id": session.get("id"),
        "stripe_payment_intent_id": session.get("payment_intent"),
        "customer_name": meta["customer_name"],
        "stripe_customer_id": meta["customer_email"],
        "user_id": meta["user_id"],
        "email": meta["customer_email"],
        "currency": session.get("currency"),
        "amount_discount": to_major_units(total_details.get("amount_discount")),
        "products": products,
        "total_price": to_major_units(session.get("amount_total")),
        "status": PAID,
        "order_date": datetime.now(timezone.utc).isoformat(),
        "invoice": _invoice_summary(invoice),
        "address": _address_snapshot(meta["address"]),
    }

def materialize_order(session: Dict[str, Any], invoice: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Crée la commande pour une session payée puis ajuste le stock.
    - Idempotent par session: relivraison -> commande existante, pas de second décrément.
    - Les erreurs Stripe/Supabase remontent à l'appelant (webhook -> 400 -> relivraison).
    """
    session_id = session.get("id")
    if not session_id:
        raise ValueError("Session Stripe sans identifiant")

    existing = repository.get_order_by_session_id(session_id)
    if existing:
        logger.info("orders.materialize duplicate delivery session_id=%s order_id=%s", session_id, existing.get("id"))
        return existing

    line_items = stripe_client.list_line_items(session_id)
    products, stock_updates = build_order_products(line_items, session_id)
    order = build_order(session, products, invoice)

    created = repository.insert_order_if_absent(order)
    if not created:
        # une livraison concurrente a créé la commande entre-temps
        logger.info("orders.materialize concurrent insert session_id=%s", session_id)
        return repository.get_order_by_session_id(session_id) or order

    logger.info(
        "orders.materialize created session_id=%s order_id=%s order_number=%s products=%s skipped=%s",
        session_id, created.get("id"), order["order_number"], len(products), len(line_items) - len(products),
    )
    stock = inventory_service.adjust_stock_levels(stock_updates, session_id=session_id)
    logger.info("orders.materialize stock session_id=%s result=%s", session_id, stock)
    return created
