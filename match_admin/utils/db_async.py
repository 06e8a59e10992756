"""Async SQLAlchemy engine and session helpers for the hosted match database."""

import ssl
from typing import Any, AsyncGenerator, Dict, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from match_admin.config import settings

# Query args libpq understands but asyncpg rejects as connect kwargs
_DROPPED_QUERY_ARGS = {"sslmode", "channel_binding"}


def normalize_db_url(url: str) -> str:
    """Select the asyncpg driver for bare ``postgres://`` / ``postgresql://`` URLs.

    Hosted Postgres providers hand out plain libpq URLs; an explicit driver
    (``postgresql+psycopg``) is left alone.
    """
    try:
        u = make_url(url)
    except ArgumentError:
        for prefix in ("postgresql://", "postgres://"):
            if url.startswith(prefix):
                return "postgresql+asyncpg://" + url[len(prefix):]
        return url

    if u.drivername in ("postgres", "postgresql"):
        u = u.set(drivername="postgresql+asyncpg")
    return u.render_as_string(hide_password=False)


def _ssl_connect_args(sslmode: str) -> Dict[str, Any]:
    mode = sslmode.lower()
    if mode == "disable":
        return {"ssl": False}
    if mode in {"allow", "prefer"}:
        # asyncpg negotiates TLS on its own when the server asks for it
        return {}
    context = ssl.create_default_context()
    if mode == "require":
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    elif mode == "verify-ca":
        context.check_hostname = False
    return {"ssl": context}


def prepare_connection(url: str) -> Tuple[str, Dict[str, Any]]:
    """Return an asyncpg-ready URL plus the connect kwargs derived from its query."""
    split = urlsplit(normalize_db_url(url))
    pairs = parse_qsl(split.query, keep_blank_values=True)
    sslmode = next((value for key, value in pairs if key == "sslmode"), None)
    kept = [(key, value) for key, value in pairs if key not in _DROPPED_QUERY_ARGS]

    cleaned = urlunsplit(split._replace(query=urlencode(kept, doseq=True))).rstrip("?")
    return cleaned, (_ssl_connect_args(sslmode) if sslmode else {})


DATABASE_URL, CONNECT_ARGS = prepare_connection(settings.database_url)

engine = create_async_engine(
    DATABASE_URL,
    echo=settings.sql_echo,
    pool_pre_ping=True,
    connect_args=CONNECT_ARGS,
)
SessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session."""
    async with SessionLocal() as session:
        yield session


def load_schema_modules() -> None:
    """Import table modules so SQLModel metadata is fully populated."""
    from match_admin.schemas import matches, teams  # noqa: F401


async def init_db() -> None:
    """Create the teams and matches tables if they do not exist (dev only)."""
    load_schema_modules()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose of the async engine and its connection pool."""
    await engine.dispose()


def describe_database_url(url: str) -> str:
    """Return a password-free description of the DB URL for logging.

    Example: "postgresql+asyncpg://user@host:5432/dbname"
    """
    try:
        u = make_url(url)
    except ArgumentError:
        return "<unparseable database URL>"
    port = f":{u.port}" if u.port else ""
    return f"{u.drivername}://{u.username or '?'}@{u.host or '?'}{port}/{u.database or '?'}"
