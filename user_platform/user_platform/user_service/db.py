from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()

def init_db():
    from . import models  # noqa: F401  Import here to avoid circular dependency

    Base.metadata.create_all(bind=engine)

    # Registration depends on users.username being unique at the storage layer;
    # refuse to start on an existing table created without that constraint.
    inspector = inspect(engine)
    unique_columns = [uc["column_names"] for uc in inspector.get_unique_constraints("users")]
    unique_columns += [idx["column_names"] for idx in inspector.get_indexes("users") if idx.get("unique")]
    if ["username"] not in unique_columns:
        raise RuntimeError("users.username is missing its unique constraint")

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
