from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.adapters.image_storage import ImageStore
from app.api.deps import (
    get_catalog_service,
    get_image_store,
    get_settings_dep,
    require_admin,
)
from app.config import Settings
from app.errors import ValidationError
from app.schemas.product_schema import ProductIn, ProductPatch
from app.services.catalog_service import CatalogService

router = APIRouter(tags=["admin"], dependencies=[Depends(require_admin)])


@router.post("/products", status_code=201, summary="Create product")
def create_product(payload: ProductIn, catalog: CatalogService = Depends(get_catalog_service)):
    return catalog.create_product(payload.model_dump())


@router.put("/products/{product_id}", summary="Update product (partial merge)")
def update_product(
    product_id: int,
    payload: ProductPatch,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return catalog.update_product(product_id, payload.model_dump(exclude_unset=True))


@router.delete("/products/{product_id}", summary="Soft-delete product")
def delete_product(product_id: int, catalog: CatalogService = Depends(get_catalog_service)):
    return catalog.delete_product(product_id)


@router.post("/import", summary="Replace the whole catalogue")
def import_products(
    payload: Any = Body(None),
    catalog: CatalogService = Depends(get_catalog_service),
) -> Dict:
    count = catalog.import_products(payload)
    return {"ok": True, "count": count}


@router.post("/upload-image", summary="Upload a product image")
async def upload_image(
    image: Optional[UploadFile] = File(None),
    images: ImageStore = Depends(get_image_store),
    settings: Settings = Depends(get_settings_dep),
):
    if image is None or not image.filename:
        raise ValidationError("File required")
    data = await image.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError("File too large")
    # bucket and disk writes block
    url = await run_in_threadpool(images.save, data, image.filename, image.content_type)
    return {"url": url}
