from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from circuit_challenge.core.config import settings


# sqlite needs check_same_thread off, FastAPI serves requests from a thread pool
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a database session per request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
