# bursar_infra/db/base.py
from __future__ import annotations
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from bursar_infra.path import database_url

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(db_url: str | None = None, *, echo: bool = False) -> Engine:
    url = db_url or database_url()
    logger.info("Using database at: %s", url)
    return create_engine(url, echo=echo, future=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)
