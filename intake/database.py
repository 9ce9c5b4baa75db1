from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from intake.config import settings

DATABASE_URL = settings.DATABASE_URL
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    from intake.models import form, user  # noqa: F401
    Base.metadata.create_all(bind=engine)
