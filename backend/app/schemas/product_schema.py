# backend/app/schemas/product_schema.py
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ProductIn(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: Optional[int] = None
    name: str = ""
    price: float = 0
    category: str = ""
    available: bool = False
    imageUrl: str = ""
    active: bool = True


class ProductPatch(BaseModel):
    """Partial update; only fields the caller actually sent are applied."""

    model_config = ConfigDict(extra="ignore")
    name: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    available: Optional[bool] = None
    imageUrl: Optional[str] = None
    active: Optional[bool] = None

