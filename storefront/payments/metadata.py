"""
Sérialisation/désérialisation des métadonnées Stripe de la commande.
Stripe n'accepte que des chaînes: l'adresse voyage en JSON texte.
"""
import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

METADATA_FIELDS = ("orderNumber", "customerName", "customerEmail", "userId", "address")

# module storefront.payments.metadata
def parse_address(raw: Any) -> Optional[Dict[str, Any]]:
    """
    Décode le champ address (JSON texte).
    - Tolérant aux erreurs: retourne None si absent, "null" ou illisible.
    """
    if isinstance(raw, dict):
        return raw
    if not raw:
        return None
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("payments.metadata unparseable address=%r", str(raw)[:200])
        return None
    return value if isinstance(value, dict) else None

def extract_metadata_from_session(session: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extrait les métadonnées de commande depuis une session Checkout.
    - Attend session["metadata"] = {orderNumber, customerName, customerEmail, userId, address(JSON)}
    - Les champs absents valent None, l'adresse est décodée via parse_address.
    """
    meta = (session or {}).get("metadata") or {}
    return {
        "order_number": meta.get("orderNumber") or None,
        "customer_name": meta.get("customerName") or None,
        "customer_email": meta.get("customerEmail") or None,
        "user_id": meta.get("userId") or None,
        "address": parse_address(meta.get("address")),
    }
