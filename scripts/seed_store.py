#!/usr/bin/env python3
"""Seed script to create a sample creator, store and products for demo"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import settings
from app.db.session import make_engine, make_session_factory, create_schema
from app.models import User, Store, Product, ProductType


def seed_store():
    if not settings.DATABASE_URL or settings.DATABASE_URL == "memory://":
        print("❌ DATABASE_URL must point at a SQL database to seed.")
        return

    engine = make_engine(settings.DATABASE_URL, settings.DATABASE_KEY)
    if engine.dialect.name == "sqlite":
        create_schema(engine)
    db = make_session_factory(engine)()
    try:
        existing = db.query(Store).count()
        if existing > 0:
            print(f"{existing} stores already exist. Skipping seed.")
            return

        creator = User(username="demo", display_name="Demo Creator", bio="Courses, calls and a community.")
        db.add(creator)
        db.flush()

        store = Store(
            user_id=creator.id,
            name="Demo Store",
            description="Everything the demo creator sells",
            theme={"primaryColor": "#6366f1"},
            is_published=True,
        )
        db.add(store)
        db.flush()

        products = [
            Product(store_id=store.id, name="Starter Guide (PDF)", price=2900, type=ProductType.DIGITAL.value),
            Product(store_id=store.id, name="1:1 Coaching Call", price=9900, type=ProductType.BOOKING.value),
            Product(store_id=store.id, name="Inner Circle Membership", price=1900, type=ProductType.MEMBERSHIP.value),
        ]
        db.add_all(products)
        db.commit()

        print(f"✅ Created store {store.id} for user {creator.id}")
        for product in products:
            print(f"   - {product.type}: {product.name} ({product.id})")
    except Exception as e:
        print(f"❌ Error seeding store: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_store()
