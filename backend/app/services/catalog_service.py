import logging
import time
from datetime import datetime, timezone
from typing import Dict, List

from app.errors import NotFoundError, ValidationError
from app.repositories.catalog_repo import CatalogRepository
from app.services.visibility import ViewMode, visible_products

log = logging.getLogger("catalog.products")

# fields a caller may change through an update; `id` is never one of them
MUTABLE_FIELDS = ("name", "price", "category", "available", "imageUrl", "active")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _now_millis() -> int:
    return int(time.time() * 1000)


class CatalogService:
    """
    Product CRUD on top of the data access layer.

    Every mutation is load-all, change, save-all. Two concurrent writers can
    therefore lose each other's changes; the last save wins.
    """

    def __init__(self, repo: CatalogRepository):
        self.repo = repo

    def list_products(self, view: ViewMode) -> List[dict]:
        return visible_products(self.repo.load_products(), view)

    def get_product(self, product_id: int) -> dict:
        product = next((p for p in self.repo.load_products() if p.get("id") == product_id), None)
        if product is None:
            raise NotFoundError()
        return product

    def _next_id(self, taken: set) -> int:
        candidate = _now_millis()
        while candidate in taken:
            candidate += 1
        return candidate

    def create_product(self, payload: Dict) -> dict:
        products = self.repo.load_products()
        taken = {p.get("id") for p in products}
        product_id = payload.get("id")
        if product_id is None:
            product_id = self._next_id(taken)
        elif product_id in taken:
            raise ValidationError(f"Product id {product_id} already exists")

        product = {
            "id": product_id,
            "name": payload.get("name") or "",
            "price": payload.get("price") or 0,
            "category": payload.get("category") or "",
            "available": bool(payload.get("available")),
            "imageUrl": payload.get("imageUrl") or "",
            "active": payload.get("active") is not False,
            "createdAt": _now_iso(),
        }
        products.append(product)
        self.repo.save_products(products)
        log.info("created product %s", product_id)
        return product

    def update_product(self, product_id: int, patch: Dict) -> dict:
        products = self.repo.load_products()
        idx = next((i for i, p in enumerate(products) if p.get("id") == product_id), None)
        if idx is None:
            raise NotFoundError()
        changes = {k: v for k, v in patch.items() if k in MUTABLE_FIELDS}
        if "active" in changes:
            changes["active"] = bool(changes["active"])
        updated = dict(products[idx], **changes)
        updated["id"] = product_id
        products[idx] = updated
        self.repo.save_products(products)
        return updated

    def delete_product(self, product_id: int) -> dict:
        """Soft delete: the record stays in the store with active=False."""
        return self.update_product(product_id, {"active": False})

    def import_products(self, records) -> int:
        if not isinstance(records, list):
            raise ValidationError("Array expected")
        if not all(isinstance(r, dict) for r in records):
            raise ValidationError("Every imported record must be an object")

        imported: List[dict] = []
        taken = {r.get("id") for r in records if r.get("id") is not None}
        seen = set()
        stamp = _now_iso()
        for r in records:
            record = dict(r)
            if record.get("id") is None:
                record["id"] = self._next_id(taken)
                taken.add(record["id"])
            try:
                record["id"] = int(record["id"])
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid product id {record['id']!r}")
            if record["id"] in seen:
                raise ValidationError(f"Duplicate product id {record['id']}")
            seen.add(record["id"])
            record["active"] = record.get("active") is not False
            if not record.get("createdAt"):
                record["createdAt"] = stamp
            imported.append(record)

        self.repo.save_products(imported, replace=True)
        log.info("imported %d products (collection replaced)", len(imported))
        return len(imported)

