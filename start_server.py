#!/usr/bin/env python3
"""
Startup script for Taskboard
Creates the schema, seeds demo data into an empty database and starts uvicorn
"""

import uvicorn

from create_tables import create_tables
from taskboard.config import settings
from taskboard.database import SessionLocal
from taskboard.models import User
from taskboard.services.demo_data import seed_demo_data
from taskboard.services.session_store import purge_expired_sessions


def prepare_database():
    create_tables()
    db = SessionLocal()
    try:
        user_count = db.query(User).count()
        if user_count == 0:
            print("📊 Database is empty, seeding demo data")
            seed_demo_data(db)
        else:
            print(f"📊 Database has {user_count} users, skipping seed")
        purge_expired_sessions(db)
    finally:
        db.close()


def main():
    print("🚀 Starting Taskboard...")
    print(f"Host: {settings.HOST}")
    print(f"Port: {settings.PORT}")
    print(f"Reload: {settings.RELOAD}")
    print("=" * 50)

    prepare_database()

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    main()
