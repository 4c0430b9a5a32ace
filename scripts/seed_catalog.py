"""
Seed the 14-gate artwork catalog.

SAFE to run multiple times (does nothing when artworks already exist).
Run from the project root:  python -m scripts.seed_catalog
"""
from marketplace.db.base import Base, engine, SessionLocal
from marketplace.catalog.seed import seed_catalog


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        created = seed_catalog(db)
        if created:
            print(f"✅ Catalog seeded: {created} artworks")
        else:
            print("Catalog already present, nothing to do")
    finally:
        db.close()


if __name__ == "__main__":
    main()
