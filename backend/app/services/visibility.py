import enum
from typing import List, Optional

from app.errors import AuthError
from app.models.product import parse_timestamp
from app.services.auth_service import AuthService


class ViewMode(enum.Enum):
    PUBLIC_VIEW = "public"
    ADMIN_VIEW = "admin"


def resolve_view(auth: AuthService, authorization: Optional[str], want_all: bool) -> ViewMode:
    """
    ADMIN_VIEW only when the caller asked for everything and carries a bearer
    token that verifies. Any problem with the token quietly means PUBLIC_VIEW.
    """
    if not want_all or not authorization:
        return ViewMode.PUBLIC_VIEW
    try:
        auth.authenticate(authorization)
    except AuthError:
        return ViewMode.PUBLIC_VIEW
    return ViewMode.ADMIN_VIEW


def is_public(record: dict) -> bool:
    return record.get("active") is not False and record.get("available") is not False


def visible_products(records: List[dict], view: ViewMode) -> List[dict]:
    if view is ViewMode.ADMIN_VIEW:
        visible = list(records)
    else:
        visible = [r for r in records if is_public(r)]
    # newest first, but only when every record can be ordered
    stamps = [parse_timestamp(r.get("createdAt")) for r in visible]
    if visible and all(stamps) and len({s.tzinfo is None for s in stamps}) == 1:
        order = sorted(range(len(visible)), key=lambda i: stamps[i], reverse=True)
        visible = [visible[i] for i in order]
    return visible
