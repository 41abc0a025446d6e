#!/usr/bin/env python3
"""
Copy the local JSON store (data/users.json, data/catalog.json) into the
remote datastore named by DATABASE_URL.

Usage:
    DATABASE_URL=postgresql://... python scripts/migrate_data.py --data-dir data
"""
import argparse
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.config import get_settings
from app.db import create_session_factory
from app.errors import BackendError
from app.repositories.remote_store import RemoteStoreAdapter
from app.services.migration import migrate_local_to_remote
from app.utils.logging import configure_logging


def main(argv=None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--data-dir", "-d", default=settings.DATA_DIR, help="Directory holding users.json and catalog.json")
    parser.add_argument("--database-url", default=settings.DATABASE_URL, help="Remote datastore URL (defaults to DATABASE_URL)")
    args = parser.parse_args(argv)

    configure_logging(settings.LOG_LEVEL)
    print("--- Migrating local data to the remote datastore ---")
    remote = RemoteStoreAdapter(create_session_factory(args.database_url))
    try:
        counts = migrate_local_to_remote(args.data_dir, remote)
    except BackendError as e:
        print("Migration failed:", e.message)
        return 1
    print(f"Migrated {counts['users']} users and {counts['products']} products.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
