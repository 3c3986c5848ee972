from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from trafficwatch.config import settings


def build_engine(database_uri: str):
    if database_uri.startswith("sqlite"):
        return create_engine(database_uri,
                             connect_args={"check_same_thread": False})
    return create_engine(database_uri,
                         pool_pre_ping=True,
                         pool_size=settings.SQLALCHEMY_POOL_SIZE,
                         max_overflow=settings.SQLALCHEMY_POOL_MAX_OVERFLOW
                         )


engine = build_engine(settings.SQLALCHEMY_DATABASE_URI)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
