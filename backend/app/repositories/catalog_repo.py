import logging
from typing import List

from app.config import Settings
from app.errors import BackendError
from app.repositories.backends import (
    PRODUCTS,
    USERS,
    BackendChain,
    LocalBackend,
    RemoteBackend,
)
from app.repositories.record_store import JsonRecordStore
from app.repositories.remote_store import RemoteStoreAdapter

log = logging.getLogger("catalog.access")


class CatalogRepository:
    """
    Sole owner of the products and users collections.
    Every read and write goes through the backend chain (remote, then local).
    """

    def __init__(self, chain: BackendChain):
        self.chain = chain

    def load_products(self) -> List[dict]:
        records, source = self.chain.read(PRODUCTS)
        log.debug("loaded %d products from %s", len(records), source)
        # legacy records predate the soft-delete flag
        return [dict({"active": True}, **r) for r in records]

    def save_products(self, records: List[dict], replace: bool = False) -> bool:
        """
        Persist the whole product collection. A total failure is logged and
        reported as False; the caller's response is not changed by it.
        """
        target = self.chain.write(PRODUCTS, records, replace=replace)
        if target is None:
            log.error("products NOT persisted: every backend failed (%d records)", len(records))
            return False
        log.debug("saved %d products to %s", len(records), target)
        return True

    def load_users(self) -> List[dict]:
        records, source = self.chain.read(USERS)
        log.debug("loaded %d users from %s", len(records), source)
        return records

    def save_users(self, records: List[dict]) -> None:
        target = self.chain.write(USERS, records)
        if target is None:
            raise BackendError("users not persisted: every backend failed")
        log.debug("saved %d users to %s", len(records), target)


def build_repository(settings: Settings, remote: RemoteStoreAdapter) -> CatalogRepository:
    local = LocalBackend(
        {
            PRODUCTS: JsonRecordStore(settings.catalog_file, settings.LOCK_TIMEOUT_SECONDS),
            USERS: JsonRecordStore(settings.users_file, settings.LOCK_TIMEOUT_SECONDS),
        }
    )
    return CatalogRepository(BackendChain([RemoteBackend(remote), local]))
