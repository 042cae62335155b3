"""
Module 'payments' (feature-first): point d'entrée public.
Réunit le client Stripe et les métadonnées de commande.
"""

from .metadata import extract_metadata_from_session, parse_address
from .stripe_client import (
    CHECKOUT_COMPLETED,
    require_stripe,
    find_customer_id,
    create_session,
    list_line_items,
    retrieve_invoice,
    construct_event,
)

__all__ = [
    # metadata
    "extract_metadata_from_session",
    "parse_address",
    # stripe
    "CHECKOUT_COMPLETED",
    "require_stripe",
    "find_customer_id",
    "create_session",
    "list_line_items",
    "retrieve_invoice",
    "construct_event",
]
