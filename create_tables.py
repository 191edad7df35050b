# create_tables.py
import argparse
import os

from taskboard.database import Base, engine, DATABASE_URL
import taskboard.models  # noqa: F401  registers every table on Base.metadata


def ensure_sqlite_directory():
    """Create the directory holding a file-based SQLite database"""
    if DATABASE_URL.startswith("sqlite:///") and DATABASE_URL != "sqlite:///:memory:":
        directory = os.path.dirname(DATABASE_URL[len("sqlite:///"):])
        if directory and not os.path.exists(directory):
            os.makedirs(directory, exist_ok=True)
            print(f"📁 Created data directory {directory}")


def create_tables(drop: bool = False):
    """Create all tables, optionally dropping them first"""
    ensure_sqlite_directory()
    if drop:
        Base.metadata.drop_all(bind=engine)
        print("🗑️  Existing tables dropped")
    Base.metadata.create_all(bind=engine)
    print("✅ All tables created successfully!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the Taskboard database schema")
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    args = parser.parse_args()
    create_tables(drop=args.drop)
