"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
Toutes les réponses SDK sont converties en dict pour le reste de l'application.
"""
import json
import logging
from typing import Any, Dict, List, Optional

import stripe

from storefront import config

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"

# module storefront.payments.stripe_client
def require_stripe():
    """
    Prépare et retourne le module stripe prêt à l’emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY si disponible.
    - En absence de clé, les appels Stripe échoueront côté SDK (ex: No API key provided).
    """
    if config.STRIPE_SECRET_KEY:
        stripe.api_key = config.STRIPE_SECRET_KEY
    return stripe

def _as_dict(obj: Any) -> Dict[str, Any]:
    """Convertit un StripeObject (ou un dict déjà prêt) en dict récursif."""
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return obj
    for name in ("to_dict", "to_dict_recursive"):
        fn = getattr(obj, name, None)
        if callable(fn):
            return fn()
    return dict(obj)

def find_customer_id(email: str) -> Optional[str]:
    """
    Cherche un client Stripe existant par email (égalité exacte, limit=1).
    Retourne son id ou None si aucun client ne correspond.
    """
    if not email:
        return None
    require_stripe()
    customers = stripe.Customer.list(email=email, limit=1)
    data = getattr(customers, "data", None) or []
    if not data:
        return None
    return _as_dict(data[0]).get("id") or None

def create_session(**params: Any) -> Dict[str, Any]:
    """
    Crée une session Stripe Checkout à partir de paramètres déjà construits
    (voir storefront.checkout.builder.build_session_params).
    Retour: dict session (ex: {"id": "cs_test_...", "url": "https://..."})
    """
    require_stripe()
    session = stripe.checkout.Session.create(**params)
    return _as_dict(session)

def list_line_items(session_id: str) -> List[Dict[str, Any]]:
    """
    Relit les line_items de la session côté Stripe avec price.product déplié.
    Les lignes ne proviennent jamais de la requête client initiale.
    """
    require_stripe()
    items = stripe.checkout.Session.list_line_items(
        session_id,
        expand=["data.price.product"],
        limit=100,
    )
    return [_as_dict(item) for item in items.auto_paging_iter()]

def retrieve_invoice(invoice_id: str) -> Dict[str, Any]:
    require_stripe()
    return _as_dict(stripe.Invoice.retrieve(invoice_id))

def construct_event(payload: bytes, sig_header: str, secret: str) -> Dict[str, Any]:
    """
    Valide la signature Stripe puis parse le body brut en dict.
    - Lève stripe.SignatureVerificationError si la signature ne correspond pas.
    - Lève ValueError si le body n'est pas un JSON valide.
    """
    stripe.WebhookSignature.verify_header(
        payload.decode("utf-8") if isinstance(payload, bytes) else payload,
        sig_header,
        secret,
        config.STRIPE_WEBHOOK_TOLERANCE,
    )
    event = json.loads(payload)
    if not isinstance(event, dict):
        raise ValueError("Payload webhook invalide")
    return event
