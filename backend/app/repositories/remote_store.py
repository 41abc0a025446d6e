import logging
from typing import List, Optional

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.db import init_db
from app.models.product import Product
from app.models.user import User

log = logging.getLogger("catalog.remote")


class RemoteStoreAdapter:
    """
    Products and users in the remote tabular datastore.

    Every method reports failure through its return value (None for reads,
    False for writes) so the caller can fall back to local storage; nothing
    here raises on an unconfigured or unreachable database.
    """

    def __init__(self, session_factory: Optional[sessionmaker]):
        self.Session = session_factory

    @property
    def configured(self) -> bool:
        return self.Session is not None

    def ensure_schema(self) -> bool:
        if not self.configured:
            return False
        try:
            init_db(self.Session)
            return True
        except SQLAlchemyError as e:
            log.warning("could not create remote tables: %s", e)
            return False

    def ping(self) -> bool:
        if not self.configured:
            return False
        try:
            with self.Session() as session:
                session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    def fetch_products(self) -> Optional[List[dict]]:
        if not self.configured:
            return None
        try:
            with self.Session() as session:
                stmt = select(Product).order_by(Product.created_at.desc())
                return [p.to_record() for p in session.execute(stmt).scalars()]
        except SQLAlchemyError as e:
            log.warning("fetch products failed: %s", e)
            return None

    def fetch_users(self) -> Optional[List[dict]]:
        if not self.configured:
            return None
        try:
            with self.Session() as session:
                users = [u.to_record() for u in session.execute(select(User)).scalars()]
        except SQLAlchemyError as e:
            log.warning("fetch users failed: %s", e)
            return None
        if not users:
            # an empty remote table means "not migrated yet"; don't lock everyone out
            log.info("remote users table is empty; using local users")
            return None
        return users

    def persist_products(self, records: List[dict], replace: bool = False) -> bool:
        if not self.configured:
            return False
        try:
            with self.Session() as session:
                with session.begin():
                    if replace:
                        ids = [int(r["id"]) for r in records]
                        session.execute(delete(Product).where(Product.id.notin_(ids)))
                    for r in records:
                        session.merge(Product.from_record(r))
            return True
        except (SQLAlchemyError, KeyError, TypeError, ValueError) as e:
            log.warning("persist products failed: %s", e)
            return False

    def persist_users(self, records: List[dict]) -> bool:
        if not self.configured:
            return False
        try:
            with self.Session() as session:
                with session.begin():
                    for r in records:
                        session.merge(User.from_record(r))
            return True
        except (SQLAlchemyError, KeyError, TypeError, ValueError) as e:
            log.warning("persist users failed: %s", e)
            return False
