from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from taskboard.config import settings

DATABASE_URL = settings.DATABASE_URL


def build_engine(database_url: str, **kwargs):
    """Create an engine; SQLite gets foreign keys enforced on every connection"""
    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        engine = create_engine(database_url, connect_args=connect_args, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine
    return create_engine(database_url, **kwargs)


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Request-scoped session; override in tests through app.dependency_overrides
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
