"""
Module 'cart': panier explicite et injectable (aucune I/O).
"""
from .store import CartLine, CartStore, product_id_of, unit_price_of

__all__ = ["CartLine", "CartStore", "product_id_of", "unit_price_of"]
