"""Webhook Stripe (Checkout).
- Signature: en-tête Stripe-Signature + body brut + STRIPE_WEBHOOK_SECRET
- checkout.session.completed: création de la commande et ajustement du stock
- Réponses: 200 {"received": true} ou 400 {"error": "..."} (Stripe relivre sur 400)
"""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from storefront import config
from storefront.payments import stripe_client
from storefront.webhooks import service as webhooks_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["Webhooks"])

def _error(message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=400)

# module storefront.webhooks.views
@router.post("/webhook", include_in_schema=False)
async def stripe_webhook(request: Request):
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")
    if not sig_header:
        return _error("No Signature found for stripe")

    secret = config.STRIPE_WEBHOOK_SECRET
    if not secret:
        logger.error("webhooks.stripe STRIPE_WEBHOOK_SECRET manquant")
        return _error("Stripe webhook secret is not set")

    try:
        event = stripe_client.construct_event(payload, sig_header, secret)
    except Exception as e:
        logger.warning("webhooks.stripe signature verification failed error=%s", e)
        return _error(f"Webhook Error: {e}")

    try:
        result = await run_in_threadpool(webhooks_service.handle_event, event)
    except Exception as e:
        logger.exception("webhooks.stripe order creation failed event_id=%s", event.get("id"))
        return _error(f"Error creating order: {e}")
    return JSONResponse(result)
