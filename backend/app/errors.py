import enum


class ErrorKind(enum.Enum):
    VALIDATION = 400
    AUTH = 401
    NOT_FOUND = 404
    BACKEND = 500

    @property
    def status_code(self) -> int:
        return self.value


class CatalogError(Exception):
    """Base for every error the API maps to a status code."""

    kind = ErrorKind.BACKEND
    default_message = "Internal error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CatalogError):
    kind = ErrorKind.VALIDATION
    default_message = "Invalid request"


class AuthError(CatalogError):
    kind = ErrorKind.AUTH
    default_message = "Invalid token"


class NotFoundError(CatalogError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Not found"


class BackendError(CatalogError):
    # message is logged server-side only; callers get default_message
    kind = ErrorKind.BACKEND
    default_message = "Internal error"
