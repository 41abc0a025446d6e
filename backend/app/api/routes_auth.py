from typing import Dict

from fastapi import APIRouter, Depends

from app.api.deps import get_auth_service, require_admin
from app.schemas.auth_schema import ChangePasswordIn, LoginIn, TokenOut
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenOut, summary="Exchange credentials for a bearer token")
def login(payload: LoginIn, auth: AuthService = Depends(get_auth_service)):
    return TokenOut(token=auth.login(payload.username, payload.password))


@router.post("/change-password", summary="Change the caller's password")
def change_password(
    payload: ChangePasswordIn,
    identity: Dict = Depends(require_admin),
    auth: AuthService = Depends(get_auth_service),
):
    auth.change_password(identity["id"], payload.oldPassword, payload.newPassword)
    return {"ok": True}
