import logging
import os
from typing import Dict

from app.errors import BackendError
from app.repositories.record_store import JsonRecordStore
from app.repositories.remote_store import RemoteStoreAdapter

log = logging.getLogger("catalog.migration")


def migrate_local_to_remote(data_dir: str, remote: RemoteStoreAdapter) -> Dict[str, int]:
    """
    Copy users.json and catalog.json from `data_dir` into the remote datastore.

    Upserts by primary key, so running it twice is harmless. Users without an
    id get one after the highest existing id. Raises BackendError when the
    remote is unconfigured or refuses a batch.
    """
    if not remote.configured:
        raise BackendError("remote datastore is not configured (DATABASE_URL)")
    remote.ensure_schema()

    users = JsonRecordStore(os.path.join(data_dir, "users.json")).load_all()
    next_id = max((int(u["id"]) for u in users if u.get("id") is not None), default=0) + 1
    for u in users:
        if u.get("id") is None:
            u["id"] = next_id
            next_id += 1
    if users:
        log.info("migrating %d users", len(users))
        if not remote.persist_users(users):
            raise BackendError("migrating users failed")

    products = JsonRecordStore(os.path.join(data_dir, "catalog.json")).load_all()
    if products:
        log.info("migrating %d products", len(products))
        if not remote.persist_products(products):
            raise BackendError("migrating products failed")

    return {"users": len(users), "products": len(products)}
