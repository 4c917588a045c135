import logging
from contextlib import contextmanager
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from foodcart.configuration.settings import Configuration


def create_db_engine(configuration: Configuration) -> Engine:
    database_url = configuration.connect_to_database()

    if database_url.startswith("sqlite"):
        # Scheduled jobs write from worker threads
        connect_args = {"check_same_thread": False}
        if ":memory:" in database_url or database_url == "sqlite://":
            return create_engine(database_url, connect_args=connect_args, poolclass=StaticPool)
        return create_engine(database_url, connect_args=connect_args)

    return create_engine(database_url, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    # Registers the table on SQLModel.metadata
    from foodcart.models.storage.storage_entry import StorageEntry  # noqa: F401

    logging.info("SYSTEM >>> Creating storage tables...")
    SQLModel.metadata.create_all(engine)


@contextmanager
def get_session(engine: Engine):
    with Session(engine) as session:
        yield session
