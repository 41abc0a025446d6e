import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import bcrypt
import jwt

from app.config import Settings
from app.errors import AuthError, NotFoundError, ValidationError
from app.repositories.catalog_repo import CatalogRepository

log = logging.getLogger("catalog.auth")

JWT_ALGORITHM = "HS256"
INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """
    Credential store for the admin users plus bearer-token signing.

    Login failures never say whether the username exists: unknown users are
    checked against a throwaway hash so both paths cost one bcrypt round.
    """

    def __init__(self, repo: CatalogRepository, settings: Settings):
        self.repo = repo
        self.secret = settings.JWT_SECRET
        self.ttl = timedelta(hours=settings.TOKEN_TTL_HOURS)
        self.rounds = settings.BCRYPT_ROUNDS
        self.default_username = settings.DEFAULT_ADMIN_USERNAME
        self.default_password = settings.DEFAULT_ADMIN_PASSWORD
        self._dummy_hash = self.hash_password("not-a-real-password")

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def check_password(password: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # stored value is not a bcrypt hash
            return False

    def ensure_bootstrap(self) -> List[dict]:
        """
        Load users, creating the single default admin if there are none.
        Called once from the app lifespan; request paths only read users.
        """
        users = self.repo.load_users()
        if users:
            return users
        log.info("no users found; creating default user %r", self.default_username)
        users = [
            {
                "id": 1,
                "username": self.default_username,
                "password": self.hash_password(self.default_password),
            }
        ]
        self.repo.save_users(users)
        return users

    def verify_credentials(self, username: str, password: str) -> Dict:
        wanted = (username or "").strip().lower()
        user = next(
            (u for u in self.repo.load_users() if str(u.get("username", "")).lower() == wanted),
            None,
        )
        if user is None:
            self.check_password(password, self._dummy_hash)
            raise AuthError(INVALID_CREDENTIALS)
        if not self.check_password(password, user.get("password", "")):
            raise AuthError(INVALID_CREDENTIALS)
        return {"id": user["id"], "username": user["username"]}

    def login(self, username: Optional[str], password: Optional[str]) -> str:
        if not username or not password:
            raise ValidationError("username/password required")
        identity = self.verify_credentials(username, password)
        log.info("user %r logged in", identity["username"])
        return self.issue_token(identity)

    def issue_token(self, identity: Dict, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            "id": identity["id"],
            "username": identity["username"],
            "iat": now,
            "exp": now + self.ttl,
        }
        return jwt.encode(payload, self.secret, algorithm=JWT_ALGORITHM)

    def decode_token(self, token: str) -> Dict:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthError("Token expired")
        except jwt.InvalidTokenError:
            raise AuthError("Invalid token")
        return {"id": payload.get("id"), "username": payload.get("username")}

    def authenticate(self, authorization: Optional[str]) -> Dict:
        """Resolve an `Authorization: Bearer <token>` header to an identity."""
        if not authorization:
            raise AuthError("No token")
        parts = authorization.split(" ")
        if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
            raise AuthError("Invalid token")
        return self.decode_token(parts[1])

    def change_password(self, user_id, old_password: Optional[str], new_password: Optional[str]) -> None:
        if not old_password or not new_password:
            raise ValidationError("oldPassword and newPassword required")
        users = self.repo.load_users()
        user = next((u for u in users if u.get("id") == user_id), None)
        if user is None:
            raise NotFoundError("User not found")
        if not self.check_password(old_password, user.get("password", "")):
            raise AuthError("Old password incorrect")
        user["password"] = self.hash_password(new_password)
        self.repo.save_users(users)
        log.info("password changed for user %r", user.get("username"))
