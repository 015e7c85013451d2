"""
Database Seed Data Module

Demo accounts (and, from the command line, a handful of sample
certifications) for local development.
Run with: python -m certtrack.db.seed_data [clear]
"""
import asyncio
from datetime import timedelta

from sqlalchemy import delete

from certtrack.core.database import AsyncSessionLocal, init_db
from certtrack.core.logging_config import logger
from certtrack.models import Certification, User, UserRole
from certtrack.services.certification_repository import CertificationRepository
from certtrack.services.status_classifier import reference_today
from certtrack.services.user_repository import UserRepository


# ==================== Sample Data Constants ====================

DEMO_USERS = [
    {"username": "admin", "password": "admin123", "full_name": "Administrator",
     "email": "admin@example.com", "role": UserRole.ADMIN},
    {"username": "john", "password": "user123", "full_name": "John Doe",
     "email": "john@example.com", "role": UserRole.USER},
]

# (name, organization, credential id, days since issue, days until expiration)
SAMPLE_CERTIFICATIONS = [
    ("AWS Solutions Architect - Associate", "Amazon Web Services", "AWS-SAA-1042", 1070, 25),
    ("Certified Kubernetes Administrator", "Cloud Native Computing Foundation", "CKA-2291", 680, 50),
    ("Project Management Professional", "PMI", "PMP-88120", 1000, 80),
    ("CompTIA Security+", "CompTIA", "COMP-SY0-601", 400, 695),
    ("Certified Scrum Master", "Scrum Alliance", "CSM-7731", 740, -10),
]


async def seed_users(db) -> list:
    users = await UserRepository(db).ensure_default_users(DEMO_USERS)
    print(f"Created {len(users)} users")
    return users


async def seed_certifications(db, owner: User) -> list:
    repo = CertificationRepository(db)
    if await repo.list_by_user(owner.id):
        return []

    today = reference_today()
    created = []
    for name, organization, credential_id, issued_ago, expires_in in SAMPLE_CERTIFICATIONS:
        created.append(await repo.create({
            "user_id": owner.id,
            "name": name,
            "issuing_organization": organization,
            "credential_id": credential_id,
            "issue_date": today - timedelta(days=issued_ago),
            "expiration_date": today + timedelta(days=expires_in),
        }))
    print(f"Created {len(created)} certifications for {owner.username}")
    return created


# ==================== Main Seed Function ====================

async def seed_all():
    """Seed demo users and sample certifications"""
    print("=" * 50)
    print("Starting database seeding...")
    print("=" * 50)

    await init_db()

    async with AsyncSessionLocal() as db:
        try:
            await seed_users(db)
            john = await UserRepository(db).find_by_username("john")
            if john is not None:
                await seed_certifications(db, john)
            print("=" * 50)
            print("Database seeding completed successfully!")
            print("=" * 50)

        except Exception as e:
            await db.rollback()
            logger.error(f"Error seeding database: {e}", exc_info=True)
            raise


async def clear_all():
    """Clear all data from database"""
    print("Clearing all data...")
    async with AsyncSessionLocal() as db:
        await db.execute(delete(Certification))
        await db.execute(delete(User))
        await db.commit()
        print("All data cleared!")


def main():
    import sys

    if len(sys.argv) > 1 and sys.argv[1] == "clear":
        asyncio.run(clear_all())
    else:
        asyncio.run(seed_all())


if __name__ == "__main__":
    main()
