"""
Database Seeding Script
Seeds the built-in static lookup catalogs and registers every existing
module and form as a lookup source.

This script:
    1. Creates tables if they don't exist
    2. Upserts the static catalogs (countries, currencies, priorities, ...)
    3. Reconciles module/form lookup sources (unless --static-only)

Usage:
    # From backend directory
    python -m app.db.seed

    # Only the static catalogs
    python -m app.db.seed --static-only
"""

import argparse
import sys

from app.db.session import SessionLocal, engine
from app.models import Base
from app.services.lookup_source_service import LookupSourceService, STATIC_SOURCES


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed lookup sources")
    parser.add_argument("--static-only", action="store_true", help="Skip module/form reconciliation")
    args = parser.parse_args(argv)

    print("=" * 60)
    print("Lookup Source Seeding")
    print("=" * 60)

    print("\nCreating database tables...")
    Base.metadata.create_all(bind=engine)
    print("✓ Tables created")

    db = SessionLocal()

    try:
        added = LookupSourceService.seed_static_sources(db)
        print(f"\nStatic catalogs: {len(STATIC_SOURCES)} defined, {added} inserted")

        if not args.static_only:
            stats = LookupSourceService.reconcile_catalog(db)
            print("\nModule/form sources:")
            print(f"  Created:      {stats['created']}")
            print(f"  Deactivated:  {stats['deactivated']}")
            print(f"  Reactivated:  {stats['reactivated']}")

        print("=" * 60)
        print("\n✓ Seeding completed successfully!")
        return 0

    except Exception as e:
        db.rollback()
        print(f"\n✗ UNEXPECTED ERROR: {e}")
        import traceback
        traceback.print_exc()
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
