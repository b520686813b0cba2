# mcstore/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from mcstore.utils.settings import SESSION_DATABASE_URL

# sqlite potrzebuje tego przy wielu watkach (fastapi threadpool)
_connect_args = {"check_same_thread": False} if SESSION_DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(SESSION_DATABASE_URL, connect_args=_connect_args)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
