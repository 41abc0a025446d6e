from typing import Optional

from fastapi import APIRouter, Depends, Header, Query

from app.api.deps import get_auth_service, get_catalog_service
from app.services.auth_service import AuthService
from app.services.catalog_service import CatalogService
from app.services.visibility import resolve_view

router = APIRouter(tags=["catalogue"])


@router.get("", summary="List products")
def list_products(
    all_: Optional[str] = Query(None, alias="all", description="\"true\" includes inactive/unavailable (admin only)"),
    authorization: Optional[str] = Header(None),
    catalog: CatalogService = Depends(get_catalog_service),
    auth: AuthService = Depends(get_auth_service),
):
    view = resolve_view(auth, authorization, want_all=(all_ or "").lower() == "true")
    return catalog.list_products(view)


@router.get("/{product_id}", summary="Get product by id")
def get_product(product_id: int, catalog: CatalogService = Depends(get_catalog_service)):
    # unfiltered: soft-deleted products stay reachable by id
    return catalog.get_product(product_id)
