from typing import Dict, Optional

from fastapi import Depends, Header, Request

from app.adapters.image_storage import ImageStore
from app.config import Settings
from app.services.auth_service import AuthService
from app.services.catalog_service import CatalogService


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.images


def require_admin(
    authorization: Optional[str] = Header(None),
    auth: AuthService = Depends(get_auth_service),
) -> Dict:
    """Identity of the bearer-token holder; 401 for anything else."""
    return auth.authenticate(authorization)
