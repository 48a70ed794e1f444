from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session


class Base(DeclarativeBase):
    pass


def normalize_url(url: str) -> str:
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def _enable_sqlite_fks(dbapi_conn, _record):
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.close()


class Database:
    """Engine and session factory owned by one application instance."""

    def __init__(self, url: str):
        self.url = normalize_url(url)

        connect_args = {}
        if self.url.startswith("sqlite"):
            connect_args = {"check_same_thread": False, "timeout": 15}

        self.engine = create_engine(
            self.url,
            connect_args=connect_args,
            pool_pre_ping=True,
            future=True,
        )
        if self.url.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_fks)

        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
            future=True,
        )

    def session(self) -> Session:
        return self.SessionLocal()

    def init_db(self):
        from docvault.models import user, document  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    def dispose(self):
        self.engine.dispose()
