"""
Cas d'usage 'checkout': orchestre panier, catalogue et Stripe.
Aucun état local n'est écrit avant la confirmation de Stripe.
"""
import logging
from typing import Any, Dict, List, Optional

from storefront import config
from storefront.cart import CartStore
from storefront.payments import stripe_client
from storefront.products.repository import get_products_map
from . import builder
from .models import CheckoutItem, CheckoutMetadata

logger = logging.getLogger(__name__)

def fill_cart(items: List[CheckoutItem]) -> CartStore:
    """
    Remplit un CartStore depuis le catalogue (prix et stock font foi côté serveur).
    - 400 implicite via ValueError: produit inconnu ou stock insuffisant.
    """
    products = get_products_map([it.id for it in items], strict=True)
    cart = CartStore()
    for it in items:
        product = products.get(str(it.id))
        if not product:
            raise ValueError(f"Produit introuvable: {it.id}")
        if not cart.add_item(product, it.quantity):
            raise ValueError(f"Stock insuffisant pour {product.get('name') or it.id}")
    return cart

def resolve_metadata(meta: CheckoutMetadata, user: Optional[Dict[str, Any]]) -> CheckoutMetadata:
    """
    Rattache l'identité de la commande à l'utilisateur authentifié.
    - Connecté: userId = id du token (jamais celui du body); email et nom complètent les champs absents.
    - Invité: tout userId fourni par le client est ignoré.
    """
    if not user:
        return meta.model_copy(update={"user_id": None}) if meta.user_id else meta
    provided = meta.model_fields_set
    profile = user.get("metadata") or {}
    update: Dict[str, Any] = {"user_id": user.get("id")}
    if "customer_email" not in provided and user.get("email"):
        update["customer_email"] = user["email"]
    full_name = profile.get("full_name") or profile.get("name")
    if "customer_name" not in provided and full_name:
        update["customer_name"] = full_name
    return meta.model_copy(update=update)

def create_checkout_session(grouped_items: List[Dict[str, Any]], meta: CheckoutMetadata) -> Dict[str, Any]:
    """
    Crée la session Stripe Checkout pour un panier groupé.
    - Rattache la session au client Stripe existant (recherche par email).
    - Les erreurs Stripe remontent telles quelles à l'appelant.
    """
    if not grouped_items:
        raise ValueError("Panier vide")
    customer_id = stripe_client.find_customer_id(meta.customer_email)
    params = builder.build_session_params(
        grouped_items,
        meta,
        customer_id=customer_id,
        base_url=config.BASE_URL,
        currency=config.CHECKOUT_CURRENCY,
    )
    session = stripe_client.create_session(**params)
    logger.info(
        "checkout.session created session_id=%s order_number=%s lines=%s customer_linked=%s",
        session.get("id"), meta.order_number, len(grouped_items), bool(customer_id),
    )
    return session
