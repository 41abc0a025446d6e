from typing import Optional

from pydantic import BaseModel


class LoginIn(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class TokenOut(BaseModel):
    token: str


class ChangePasswordIn(BaseModel):
    oldPassword: Optional[str] = None
    newPassword: Optional[str] = None
