# database/db_setup.py
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base

from core.config import DB_FILENAME, GETRICH_HOME

# ---------------------------------------------------------------------
# Database path setup
# ---------------------------------------------------------------------
# The local store lives in the user's profile (~/.getrich by default),
# outside the project tree, so it survives reinstalls.
DB_PATH = GETRICH_HOME / DB_FILENAME

# ---------------------------------------------------------------------
# Base class for ORM models
# ---------------------------------------------------------------------
Base = declarative_base()

# ---------------------------------------------------------------------
# Engine factory
# ---------------------------------------------------------------------
def get_engine(db_path: Optional[Path] = None):
    """
    Return a SQLAlchemy Engine connected to the local SQLite store,
    creating the parent directory and the schema on first use.

    Example:
        engine = get_engine()
        engine = get_engine(tmp_path / "test.db")
    """
    path = Path(db_path) if db_path is not None else DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{path}", echo=False, future=True)
    Base.metadata.create_all(engine)
    return engine
