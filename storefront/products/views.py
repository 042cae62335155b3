"""Endpoints publics du catalogue.
- Produits: liste (filtre variant), promotions, détail par slug
- Catégories (avec productCount) et produits par catégorie
- Marques
"""
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from storefront.products import repository as products_repository

router = APIRouter(prefix="/api/v1", tags=["Catalogue API"])

@router.get("/products")
def list_products(variant: Optional[str] = None, limit: int = Query(100, ge=1, le=500)):
    return JSONResponse({"items": products_repository.list_products(variant=variant, limit=limit)})

@router.get("/products/deals")
def list_deals():
    return JSONResponse({"items": products_repository.list_deal_products()})

@router.get("/products/{slug}")
def get_product(slug: str):
    """Détail produit; 404 si le slug est inconnu."""
    product = products_repository.get_product_by_slug(slug)
    if not product:
        raise HTTPException(status_code=404, detail="Produit introuvable")
    return JSONResponse(product)

@router.get("/categories")
def list_categories(limit: Optional[int] = Query(None, ge=1)):
    return JSONResponse({"items": products_repository.list_categories(limit)})

@router.get("/categories/{slug}/products")
def list_category_products(slug: str):
    return JSONResponse({"items": products_repository.list_products_by_category(slug)})

@router.get("/brands")
def list_brands():
    return JSONResponse({"items": products_repository.list_brands()})
