from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from .config import settings


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine suited to the backend in database_url.

    In-memory SQLite shares one connection so every session sees the same
    database; file SQLite only needs cross-thread access; server databases
    get a recycled connection pool.
    """
    if database_url.startswith("sqlite"):
        if ":memory:" in database_url:
            return create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=echo,
            )
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=echo,
        )

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=3600,   # Recycle connections after 1 hour
        pool_size=10,
        max_overflow=20,
        echo=echo,
    )


def build_session_factory(bind: Engine) -> sessionmaker:
    # Objects handed back by a unit of work stay readable after commit
    return sessionmaker(autoflush=False, expire_on_commit=False, bind=bind)


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
SessionLocal = build_session_factory(engine)


def get_db():
    """
    Raw session dependency used by the health check.
    Domain work goes through the unit of work instead.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
