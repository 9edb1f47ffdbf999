import os
from typing import Iterator, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from lingohub_api.errors import ConfigurationError

_POSTGRES_VARS = ("POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_DB", "POSTGRES_HOST", "POSTGRES_PORT")


def _build_database_url() -> Optional[str]:
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit
    if not all(os.getenv(name) for name in _POSTGRES_VARS):
        return None

    db_user = os.environ["POSTGRES_USER"]
    db_password = os.environ["POSTGRES_PASSWORD"]
    db_name = os.environ["POSTGRES_DB"]
    db_host = os.environ["POSTGRES_HOST"]
    db_port = os.environ["POSTGRES_PORT"]

    return f"postgresql+psycopg://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


def _create_engine(url: Optional[str]) -> Optional[Engine]:
    if url is None:
        return None
    if url.startswith("sqlite"):
        # One shared connection so in-memory databases survive across sessions
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=False, pool_pre_ping=True)


DATABASE_URL = _build_database_url()
engine = _create_engine(DATABASE_URL)


def get_session() -> Iterator[Session]:
    if engine is None:
        raise ConfigurationError("Database not configured")
    with Session(engine) as session:
        yield session
