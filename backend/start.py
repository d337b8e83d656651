"""Startup script for production deployment.

On a fresh database (no tables), creates all tables from models and stamps
Alembic to head. On an existing database, runs Alembic migrations normally.
Pass ``--seed`` to add the demo coaches and customers afterwards.
"""

import subprocess
import sys

from sqlalchemy import inspect

from finsarthi.db.base import Base
from finsarthi.db.seed import seed_demo_data
from finsarthi.db.session import SessionLocal, engine
from finsarthi.models import AdviceSession, ChatMessage, ChatRequest, User  # noqa: F401


def main(argv: list[str]) -> None:
    inspector = inspect(engine)
    tables = inspector.get_table_names()

    if "users" not in tables:
        print("Fresh database detected, creating all tables...")
        Base.metadata.create_all(bind=engine)
        print("Tables created. Stamping Alembic to head...")
        subprocess.check_call([sys.executable, "-m", "alembic", "stamp", "head"])
    else:
        print("Existing database, running migrations...")
        subprocess.check_call([sys.executable, "-m", "alembic", "upgrade", "head"])
        print("Migrations complete.")

    if "--seed" in argv:
        with SessionLocal() as session:
            print(f"Seeded {seed_demo_data(session)} demo users.")


if __name__ == "__main__":
    main(sys.argv[1:])
