"""Endpoints de lecture des commandes (utilisateur authentifié).
- /me: historique de l'utilisateur
- /{order_number}: détail (page de succès), 403 si la commande appartient à un autre utilisateur
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from storefront.orders import repository as orders_repository
from storefront.utils.security import require_user

router = APIRouter(prefix="/api/v1/orders", tags=["Orders API"])

@router.get("/me")
def my_orders(user: Dict[str, Any] = Depends(require_user)):
    return JSONResponse({"items": orders_repository.list_user_orders(user.get("id"))})

@router.get("/{order_number}")
def get_order(order_number: str, user: Dict[str, Any] = Depends(require_user)):
    order = orders_repository.get_order_by_number(order_number)
    if not order:
        raise HTTPException(status_code=404, detail="Commande introuvable")
    if order.get("user_id") != user.get("id"):
        raise HTTPException(status_code=403, detail="Commande appartenant à un autre utilisateur")
    return JSONResponse(order)
