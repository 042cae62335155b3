"""
Ajustement du stock après matérialisation d'une commande.
Chaque produit est traité indépendamment: un échec est loggé et n'interrompt pas les autres.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, Optional, Tuple

from storefront import config
from storefront.inventory import repository

logger = logging.getLogger(__name__)

UPDATED = "updated"
SKIPPED = "skipped"
FAILED = "failed"

def compute_new_stock(current: int, quantity: int) -> int:
    """Stock restant, plancher à zéro (la survente ne rend jamais le stock négatif)."""
    return max(current - quantity, 0)

def _valid_stock(stock) -> bool:
    return isinstance(stock, (int, float)) and not isinstance(stock, bool)

def _merge_quantities(updates: Iterable[Tuple[str, int]]) -> Dict[str, int]:
    # une seule tâche par produit: évite deux lectures/écritures concurrentes du même stock
    merged: Dict[str, int] = {}
    for product_id, quantity in updates:
        merged[product_id] = merged.get(product_id, 0) + int(quantity or 0)
    return merged

def _adjust_one(product_id: str, quantity: int, session_id: Optional[str]) -> str:
    product = repository.get_product_stock(product_id)
    stock = (product or {}).get("stock")
    if not product or not _valid_stock(stock):
        logger.warning(
            "inventory.adjust skipped product_id=%s session_id=%s reason=%s",
            product_id, session_id, "not_found" if not product else "invalid_stock",
        )
        return SKIPPED
    new_stock = compute_new_stock(int(stock), quantity)
    repository.set_product_stock(product_id, new_stock)
    logger.info("inventory.adjust product_id=%s stock=%s->%s session_id=%s", product_id, stock, new_stock, session_id)
    return UPDATED

def adjust_stock_levels(updates: Iterable[Tuple[str, int]], session_id: Optional[str] = None) -> Dict[str, int]:
    """
    Décrémente le stock de chaque produit acheté.
    - updates: [(product_id, quantity), ...]
    - Les tâches tournent en parallèle (INVENTORY_MAX_WORKERS) et sont toutes attendues.
    Retour: {"updated": n, "skipped": n, "failed": n}
    """
    result = {UPDATED: 0, SKIPPED: 0, FAILED: 0}
    merged = _merge_quantities(updates)
    if not merged:
        return result
    workers = min(config.INVENTORY_MAX_WORKERS, len(merged))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="inventory") as pool:
        futures = {
            pool.submit(_adjust_one, product_id, quantity, session_id): product_id
            for product_id, quantity in merged.items()
        }
        for future in as_completed(futures):
            product_id = futures[future]
            try:
                outcome = future.result()
            except Exception:
                logger.exception("inventory.adjust failed product_id=%s session_id=%s", product_id, session_id)
                outcome = FAILED
            result[outcome] += 1
    return result
