from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, Boolean, Column, DateTime, Float, String

from app.db import Base


def parse_timestamp(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class Product(Base):
    __tablename__ = "products"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    name = Column(String(256), nullable=False, default="")
    price = Column(Float, nullable=False, default=0)
    category = Column(String(128), nullable=False, default="")
    available = Column(Boolean, nullable=False, default=False)
    image_url = Column(String(1024), nullable=False, default="")
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=True, index=True)

    @classmethod
    def from_record(cls, record: dict) -> "Product":
        return cls(
            id=int(record["id"]),
            name=record.get("name") or "",
            price=record.get("price") or 0,
            category=record.get("category") or "",
            available=record.get("available") is not False,
            image_url=record.get("imageUrl") or "",
            active=record.get("active") is not False,
            created_at=parse_timestamp(record.get("createdAt")),
        )

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "available": self.available,
            "imageUrl": self.image_url,
            "active": self.active,
            "createdAt": format_timestamp(self.created_at),
        }

    def __repr__(self):
        return f"<Product id={self.id} name={self.name}>"
