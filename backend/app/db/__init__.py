from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def create_session_factory(database_url: Optional[str]) -> Optional[sessionmaker]:
    """
    Build a sessionmaker for the remote datastore.

    Returns None when no URL is configured. Engine creation does not connect,
    so an unreachable database only shows up on the first query.
    """
    if not database_url:
        return None
    engine = create_engine(
        database_url,
        future=True,
        echo=False,
        pool_pre_ping=True,
        pool_recycle=1800,
    )
    return sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )


def init_db(session_factory: sessionmaker) -> None:
    """Create the products and users tables if they are missing."""
    # model modules register their tables on Base.metadata at import
    import app.models.product  # noqa: F401
    import app.models.user  # noqa: F401

    Base.metadata.create_all(bind=session_factory.kw["bind"])
