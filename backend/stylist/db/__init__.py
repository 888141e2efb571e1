# Export surface for scripts / ad-hoc table creation

from .session import engine, SessionLocal, get_db, session_scope, dispose_engine
from stylist.db.model import *  # load every model into Base.metadata
from .base import Base


# Dev only; production schema changes go through Alembic
"""
    Create tables on an empty dev database:
        python -c "from stylist.db import create_all; create_all()"
    Not for production (pgvector column + index come from `alembic upgrade head`).
"""
def create_all() -> None:
    Base.metadata.create_all(bind=engine)
