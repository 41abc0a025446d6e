import json
import os

import pytest

from app.db import create_session_factory
from app.errors import BackendError
from app.repositories.catalog_repo import build_repository
from app.repositories.remote_store import RemoteStoreAdapter
from conftest import make_settings


def _repo(settings, url=None):
    remote = RemoteStoreAdapter(create_session_factory(url))
    remote.ensure_schema()
    return build_repository(settings, remote), remote


def test_local_only_roundtrip(settings):
    repo, _ = _repo(settings)
    assert repo.load_products() == []
    assert repo.save_products([{"id": 1, "name": "Widget"}])
    assert repo.load_products() == [{"active": True, "id": 1, "name": "Widget"}]
    assert os.path.exists(settings.catalog_file)


def test_failing_remote_falls_back_to_local(settings, broken_remote_url):
    repo, _ = _repo(settings, broken_remote_url)
    assert repo.save_products([{"id": 7, "name": "Fallback"}])
    with open(settings.catalog_file) as f:
        assert json.load(f)[0]["id"] == 7
    assert [p["id"] for p in repo.load_products()] == [7]


def test_healthy_remote_takes_writes(settings, remote_url):
    repo, remote = _repo(settings, remote_url)
    assert repo.save_products([{"id": 3, "name": "Remote"}])
    assert not os.path.exists(settings.catalog_file)
    assert [p["id"] for p in remote.fetch_products()] == [3]
    assert repo.load_products()[0]["name"] == "Remote"


def test_remote_reads_win_over_local(settings, remote_url):
    repo, remote = _repo(settings, remote_url)
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    with open(settings.catalog_file, "w") as f:
        json.dump([{"id": 99, "name": "stale local"}], f)
    remote.persist_products([{"id": 1, "name": "remote"}])
    assert [p["id"] for p in repo.load_products()] == [1]


def test_empty_remote_users_fall_back_to_local(settings, remote_url):
    repo, _ = _repo(settings, remote_url)
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    with open(settings.users_file, "w") as f:
        json.dump([{"id": 1, "username": "local-admin", "password": "h"}], f)
    assert repo.load_users()[0]["username"] == "local-admin"


def test_total_product_write_failure_is_reported_not_raised(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    settings = make_settings(tmp_path, DATA_DIR=str(blocker))
    repo, _ = _repo(settings)
    assert repo.save_products([{"id": 1}]) is False


def test_total_user_write_failure_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    settings = make_settings(tmp_path, DATA_DIR=str(blocker))
    repo, _ = _repo(settings)
    with pytest.raises(BackendError):
        repo.save_users([{"id": 1, "username": "admin", "password": "h"}])


def test_extra_record_keys_survive_only_locally(settings, remote_url, tmp_path):
    local, _ = _repo(settings)
    local.save_products([{"id": 1, "name": "Tea", "origin": "Assam"}])
    assert local.load_products()[0]["origin"] == "Assam"

    remote_settings = make_settings(tmp_path / "other")
    repo, _ = _repo(remote_settings, remote_url)
    repo.save_products([{"id": 1, "name": "Tea", "origin": "Assam"}])
    assert "origin" not in repo.load_products()[0]
