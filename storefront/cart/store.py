"""
Panier côté serveur: produit -> quantité avec totaux dérivés.
Pas de Stripe, pas de DB: le panier reçoit des produits déjà chargés du catalogue.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# module storefront.cart.store
def product_id_of(product: Dict[str, Any]) -> str:
    return str((product or {}).get("id") or "").strip()

def unit_price_of(product: Dict[str, Any]) -> float:
    """Prix unitaire (float); 0.0 si absent ou non numérique."""
    try:
        return float((product or {}).get("price") or 0)
    except (TypeError, ValueError):
        return 0.0

def _stock_of(product: Dict[str, Any]) -> Optional[int]:
    stock = (product or {}).get("stock")
    if isinstance(stock, bool) or not isinstance(stock, (int, float)):
        return None
    return int(stock)

@dataclass
class CartLine:
    product: Dict[str, Any]
    quantity: int

class CartStore:
    """
    Panier injectable (remplace l'état global côté client).
    - add_item refuse l'ajout si le stock connu ne couvre pas la quantité demandée.
    - Les lignes gardent l'ordre d'insertion (utile pour les line_items Stripe).
    """

    def __init__(self) -> None:
        self._lines: Dict[str, CartLine] = {}

    def __len__(self) -> int:
        return len(self._lines)

    def add_item(self, product: Dict[str, Any], quantity: int = 1) -> bool:
        pid = product_id_of(product)
        if not pid or quantity <= 0:
            return False
        current = self.get_item_count(pid)
        stock = _stock_of(product)
        if stock is not None and current + quantity > stock:
            logger.info("cart.add_item refused product_id=%s stock=%s requested=%s", pid, stock, current + quantity)
            return False
        line = self._lines.get(pid)
        if line:
            line.quantity += quantity
            line.product = product
        else:
            self._lines[pid] = CartLine(product=product, quantity=quantity)
        return True

    def remove_item(self, product_id: str) -> None:
        """Retire une unité; supprime la ligne quand la quantité tombe à zéro."""
        line = self._lines.get(product_id)
        if not line:
            return
        if line.quantity > 1:
            line.quantity -= 1
        else:
            del self._lines[product_id]

    def delete_cart_product(self, product_id: str) -> None:
        self._lines.pop(product_id, None)

    def reset_cart(self) -> None:
        self._lines.clear()

    def get_item_count(self, product_id: str) -> int:
        line = self._lines.get(product_id)
        return line.quantity if line else 0

    def get_total_price(self) -> float:
        """Total à payer: somme des prix (remisés) x quantités."""
        return sum(unit_price_of(l.product) * l.quantity for l in self._lines.values())

    def get_subtotal_price(self) -> float:
        """
        Sous-total avant remise.
        - discount est un pourcentage appliqué au prix affiché: prix + prix * discount / 100
        """
        total = 0.0
        for line in self._lines.values():
            price = unit_price_of(line.product)
            try:
                discount = float(line.product.get("discount") or 0)
            except (TypeError, ValueError):
                discount = 0.0
            total += (price + price * discount / 100) * line.quantity
        return total

    def get_grouped_items(self) -> List[Dict[str, Any]]:
        return [{"product": l.product, "quantity": l.quantity} for l in self._lines.values()]
