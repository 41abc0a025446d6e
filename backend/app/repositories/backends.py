import logging
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from app.errors import BackendError
from app.repositories.record_store import JsonRecordStore
from app.repositories.remote_store import RemoteStoreAdapter

log = logging.getLogger("catalog.access")

PRODUCTS = "products"
USERS = "users"


class RecordBackend(Protocol):
    """What the data access layer needs from one storage tier."""

    name: str

    def read(self, collection: str) -> Optional[List[dict]]:
        ...

    def write(self, collection: str, records: List[dict], replace: bool = False) -> bool:
        ...


class RemoteBackend:
    name = "remote"

    def __init__(self, adapter: RemoteStoreAdapter):
        self.adapter = adapter

    def read(self, collection: str) -> Optional[List[dict]]:
        if collection == PRODUCTS:
            return self.adapter.fetch_products()
        if collection == USERS:
            return self.adapter.fetch_users()
        raise KeyError(collection)

    def write(self, collection: str, records: List[dict], replace: bool = False) -> bool:
        if collection == PRODUCTS:
            return self.adapter.persist_products(records, replace=replace)
        if collection == USERS:
            return self.adapter.persist_users(records)
        raise KeyError(collection)


class LocalBackend:
    """
    JSON files on local disk. Reads always succeed (possibly empty);
    writes always replace the whole file, so `replace` needs no special case.
    """

    name = "local"

    def __init__(self, stores: Dict[str, JsonRecordStore]):
        self.stores = stores

    def read(self, collection: str) -> Optional[List[dict]]:
        return self.stores[collection].load_all()

    def write(self, collection: str, records: List[dict], replace: bool = False) -> bool:
        store = self.stores[collection]
        try:
            store.save_all(records)
            return True
        except (OSError, TypeError, ValueError) as e:
            log.error("could not write %s to %s: %s", collection, store.path, e)
            return False


class BackendChain:
    """
    Storage tiers tried in priority order.

    A read returns the first tier's answer that isn't None; a write stops at the
    first tier that reports success. Tiers are never reconciled: if an earlier
    tier fails intermittently, writes split across tiers and the last writer wins.
    """

    def __init__(self, backends: Sequence[RecordBackend]):
        if not backends:
            raise ValueError("BackendChain needs at least one backend")
        self.backends = list(backends)

    def read(self, collection: str) -> Tuple[List[dict], str]:
        for backend in self.backends:
            records = backend.read(collection)
            if records is not None:
                return records, backend.name
            log.warning("%s: %s read unavailable, falling back", collection, backend.name)
        raise BackendError(f"no backend could read {collection}")

    def write(self, collection: str, records: List[dict], replace: bool = False) -> Optional[str]:
        for backend in self.backends:
            if backend.write(collection, records, replace=replace):
                return backend.name
            log.warning("%s: %s write failed, falling back", collection, backend.name)
        return None
