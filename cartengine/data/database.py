# cartengine/data/database.py
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from cartengine.utils import settings
from cartengine.utils.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def _configure_sqlite(engine: Engine) -> None:
    # sqlite has no row locks, BEGIN IMMEDIATE takes the write lock up front
    # so concurrent transactions serialize instead of failing on upgrade
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(url: str | None = None, echo: bool | None = None) -> Engine:
    url = url or settings.DATABASE_URL
    echo = settings.DB_ECHO if echo is None else echo

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        _configure_sqlite(engine)
        return engine

    connect_args = {}
    if url.startswith("postgresql"):
        connect_args["options"] = f"-c lock_timeout={settings.DB_LOCK_TIMEOUT_MS}"

    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        connect_args=connect_args,
    )


def build_session_factory(bind: Engine) -> sessionmaker:
    # objects stay readable after commit, services hand them back to callers
    return sessionmaker(bind=bind, expire_on_commit=False)


engine = build_engine()
SessionLocal = build_session_factory(engine)


def get_session_factory() -> sessionmaker:
    """FastAPI dependency, overridden in tests."""
    return SessionLocal


def init_db(bind: Engine | None = None) -> None:
    # import models so they register in Base.metadata
    import cartengine.data.models  # noqa: F401

    bind = bind or engine
    logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=bind)


def check_db(bind: Engine | None = None) -> bool:
    try:
        with (bind or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
