"""Couche service du webhook Stripe.
Rôles:
- Ignorer (acquitter) les événements autres que checkout.session.completed.
- Récupérer la facture si la session en référence une (best-effort).
- Déléguer la création de la commande au matérialiseur.
"""
from typing import Any, Dict, Optional
import logging

from storefront.orders import service as orders_service
from storefront.payments import stripe_client
from storefront.payments.stripe_client import CHECKOUT_COMPLETED

logger = logging.getLogger(__name__)

def fetch_invoice(session: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Facture de la session, ou None.
    - Un échec Stripe ici n'empêche pas la commande: la facture n'est qu'un enrichissement.
    """
    invoice_ref = session.get("invoice")
    if not invoice_ref:
        return None
    if isinstance(invoice_ref, dict):
        return invoice_ref
    try:
        return stripe_client.retrieve_invoice(invoice_ref)
    except Exception as e:
        logger.warning("webhooks.invoice retrieval failed session_id=%s invoice=%s error=%s", session.get("id"), invoice_ref, e)
        return None

def fulfill_checkout_session(session: Dict[str, Any]) -> Dict[str, Any]:
    invoice = fetch_invoice(session)
    return orders_service.materialize_order(session, invoice)

def handle_event(event: Dict[str, Any]) -> Dict[str, Any]:
    """Traite un événement vérifié; lève si la matérialisation échoue."""
    event_type = (event or {}).get("type")
    if event_type != CHECKOUT_COMPLETED:
        logger.info("webhooks.event ignored type=%s id=%s", event_type, (event or {}).get("id"))
        return {"received": True}
    session = ((event.get("data") or {}).get("object")) or {}
    order = fulfill_checkout_session(session)
    logger.info("webhooks.event fulfilled session_id=%s order_id=%s", session.get("id"), (order or {}).get("id"))
    return {"received": True}
