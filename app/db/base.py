# app/db/base.py
import json

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings


def _engine_kwargs(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    kwargs = {"connect_args": {"check_same_thread": False}}
    # in-memory sqlite: every session must share the one connection
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return kwargs


def _json_serializer(value):
    # non-ASCII stays literal in JSON columns, so text search sees "algèbre"
    return json.dumps(value, ensure_ascii=False)


engine = create_engine(
    settings.database_url,
    json_serializer=_json_serializer,
    **_engine_kwargs(settings.database_url),
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    # import models so they register on Base.metadata
    from app.db.models import booking, child, feedback, review, taxonomy, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
