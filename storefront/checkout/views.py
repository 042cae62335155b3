"""Endpoint de création de session Checkout.
- POST /api/v1/checkout: panier + métadonnées -> {id, url, orderNumber}
- Utilisateur optionnel: s'il est connecté, son id est rattaché à la commande.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.security import optional_user
from . import service as checkout_service
from .models import CheckoutRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/checkout", tags=["Checkout API"])

# module storefront.checkout.views
@router.post("", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_checkout_session(body: CheckoutRequest, user: Optional[Dict[str, Any]] = Depends(optional_user)):
    """
    Crée une session Checkout Stripe.
    Étapes:
      1) Charger les produits et remplir le panier (stock vérifié)
      2) Identité: userId, email et nom issus de l'utilisateur connecté (userId du body ignoré)
      3) Créer la session Stripe et renvoyer {id, url, orderNumber}
    Erreurs: 400 si panier invalide ou erreur Stripe (message transmis tel quel).
    """
    if not body.items:
        raise HTTPException(status_code=400, detail="Panier vide")
    meta = checkout_service.resolve_metadata(body.metadata, user)
    try:
        cart = checkout_service.fill_cart(body.items)
        session = checkout_service.create_checkout_session(cart.get_grouped_items(), meta)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Erreur create_checkout_session order_number=%s", meta.order_number)
        raise HTTPException(status_code=400, detail=str(e))
    return JSONResponse({"id": session.get("id"), "url": session.get("url"), "orderNumber": meta.order_number})
