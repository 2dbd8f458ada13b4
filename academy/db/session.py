from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from academy.core.config import settings


def _engine_options(url: str) -> dict:
    # SQLite connections are used from FastAPI's threadpool
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Request-scoped session, always closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
