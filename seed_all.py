"""
Master Database Seeding Script
Creates database tables and populates them with demo roles, users and tasks
"""

import argparse
import sys

from create_tables import create_tables
from taskboard.database import SessionLocal
from taskboard.services.demo_data import seed_demo_data, DEMO_PASSWORD


def seed(reset: bool = False) -> bool:
    print(f"\n{'='*60}")
    print("🌱 Seeding demo data")
    print(f"{'='*60}")

    create_tables(drop=reset)

    db = SessionLocal()
    try:
        user_ids = seed_demo_data(db)
    except Exception as e:
        db.rollback()
        print(f"[ERROR] Error seeding data: {e}")
        return False
    finally:
        db.close()

    print(f"[SUCCESS] {len(user_ids)} demo users ready")
    print("\n📝 Demo Login Credentials:")
    print(f"   Administrator: admin / {DEMO_PASSWORD}")
    print(f"   Sales Manager: jsmith / {DEMO_PASSWORD}")
    print(f"   Sales User: mwilliams / {DEMO_PASSWORD}")
    print(f"   Reporting User: rmartinez / {DEMO_PASSWORD}\n")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the Taskboard demo database")
    parser.add_argument("--reset", action="store_true", help="drop and recreate all tables before seeding")
    args = parser.parse_args()
    sys.exit(0 if seed(reset=args.reset) else 1)
