"""
Construction pure de la requête de session Stripe Checkout (pas d'appel réseau).
"""
import json
from typing import Any, Dict, List, Optional

from storefront.cart import product_id_of, unit_price_of
from .models import CheckoutMetadata

UNKNOWN_PRODUCT_NAME = "Unknown Product"

# module storefront.checkout.builder
def to_minor_units(price: float) -> int:
    """
    Convertit un prix décimal en centimes: int(round(price * 100)).
    round() de Python arrondit au pair le plus proche sur la valeur flottante.
    """
    return int(round(price * 100))

def to_line_items(grouped_items: List[Dict[str, Any]], currency: str) -> List[Dict[str, Any]]:
    """
    Construit les line_items Stripe (price_data) à partir du panier groupé.
    - product_data.images est omis si le produit n'a pas d'image.
    - product_data.metadata.id porte l'id catalogue relu par le webhook.
    """
    line_items: List[Dict[str, Any]] = []
    for entry in grouped_items:
        product = entry.get("product") or {}
        product_data: Dict[str, Any] = {
            "name": product.get("name") or UNKNOWN_PRODUCT_NAME,
            "metadata": {"id": product_id_of(product)},
        }
        if product.get("description"):
            product_data["description"] = product["description"]
        images = product.get("images") or []
        if images:
            product_data["images"] = [images[0]]
        line_items.append({
            "price_data": {
                "currency": currency,
                "unit_amount": to_minor_units(unit_price_of(product)),
                "product_data": product_data,
            },
            "quantity": int(entry.get("quantity") or 0),
        })
    return line_items

def make_metadata(meta: CheckoutMetadata) -> Dict[str, str]:
    """
    Aplatit les métadonnées en chaînes (contrainte Stripe).
    - address: JSON texte ("null" si absente), userId: "" si anonyme.
    """
    address = meta.address.model_dump() if meta.address else None
    return {
        "orderNumber": meta.order_number,
        "customerName": meta.customer_name,
        "customerEmail": meta.customer_email,
        "userId": meta.user_id or "",
        "address": json.dumps(address),
    }

def success_url(base_url: str, order_number: str) -> str:
    # {CHECKOUT_SESSION_ID} est substitué par Stripe
    return f"{base_url}/success?session_id={{CHECKOUT_SESSION_ID}}&orderNumber={order_number}"

def cancel_url(base_url: str) -> str:
    return f"{base_url}/cart"

def build_session_params(
    grouped_items: List[Dict[str, Any]],
    meta: CheckoutMetadata,
    *,
    customer_id: Optional[str],
    base_url: str,
    currency: str,
) -> Dict[str, Any]:
    """
    Assemble la requête complète de session Checkout.
    - Client existant: customer=<id>; sinon customer_email (Stripe crée le client).
    """
    params: Dict[str, Any] = {
        "mode": "payment",
        "line_items": to_line_items(grouped_items, currency),
        "metadata": make_metadata(meta),
        "allow_promotion_codes": True,
        "payment_method_types": ["card"],
        "invoice_creation": {"enabled": True},
        "success_url": success_url(base_url, meta.order_number),
        "cancel_url": cancel_url(base_url),
    }
    if customer_id:
        params["customer"] = customer_id
    else:
        params["customer_email"] = meta.customer_email
    return params
