import random
import sys

from faker import Faker

from task_manager.core.config import settings
from task_manager.core.security import BcryptHasher
from task_manager.db.session import init_database
from task_manager.modules.auth.model import User
from task_manager.modules.tasks.model import Task

fake = Faker()

DEMO_PASSWORD = "secret1"


def run_seed(users: int = 5, tasks_per_user: int = 10, database_url: str | None = None) -> None:
    """Fill the database with demo users (password 'secret1') and their tasks."""
    database = init_database(database_url or settings.DATABASE_URL)
    database.create_schema()
    hasher = BcryptHasher(rounds=settings.BCRYPT_ROUNDS)
    hashed = hasher.hash(DEMO_PASSWORD)

    db = database.SessionLocal()
    try:
        print("🚀 Starting Database Seed...")

        print(f"Seeding {users} Users...")
        seeded = []
        for _ in range(users):
            user = User(
                name=fake.name()[:50],
                email=fake.unique.email().lower(),
                hashed_password=hashed,
            )
            db.add(user)
            seeded.append(user)
        db.flush()  # Flush to get IDs for foreign keys

        print(f"Seeding {users * tasks_per_user} Tasks...")
        for user in seeded:
            for _ in range(tasks_per_user):
                db.add(
                    Task(
                        title=fake.sentence(nb_words=4)[:200],
                        completed=random.random() < 0.4,
                        user_id=user.id,
                    )
                )

        db.commit()
        print(f"Success! Seeded {users} users; log in with any of their emails and '{DEMO_PASSWORD}':")
        for user in seeded:
            print(f"  - {user.email}")

    except Exception as e:
        print(f"Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    run_seed(*(int(a) for a in sys.argv[1:3]))
