import os

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health", tags=["health"])
def health(request: Request):
    remote = request.app.state.remote
    settings = request.app.state.settings
    remote_ok = remote.ping()
    local_ok = False
    try:
        os.makedirs(settings.DATA_DIR, exist_ok=True)
        local_ok = os.access(settings.DATA_DIR, os.W_OK)
    except OSError:
        local_ok = False

    # an unconfigured remote is a normal deployment, not a degraded one
    degraded = not local_ok or (remote.configured and not remote_ok)
    return {
        "status": "degraded" if degraded else "ok",
        "remote": remote_ok,
        "local": local_ok,
    }
