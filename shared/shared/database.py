from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from .config import SQL_ECHO


def get_engine(database_url: str):
    kwargs = {}
    if database_url.startswith("sqlite") and (":memory:" in database_url or database_url.endswith("://")):
        # a single shared connection keeps an in-memory database alive
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    return create_async_engine(database_url, echo=SQL_ECHO, future=True, **kwargs)


def get_session(engine):
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False
    )
