from app.db.base import Base
from app.db.session import SessionLocal, engine, get_db, init_models

__all__ = ["Base", "SessionLocal", "engine", "get_db", "init_models"]
