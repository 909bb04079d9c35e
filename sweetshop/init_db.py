"""Create the tables and seed the catalog without starting the server.

Usage:
    python -m sweetshop.init_db
"""
import sys

from sqlalchemy.exc import SQLAlchemyError

from sweetshop.core import config
from sweetshop.database import SessionLocal, init_database
from sweetshop.seed import seed_database


def main() -> None:
    try:
        init_database()
        db = SessionLocal()
        try:
            seed_database(db)
        finally:
            db.close()
    except SQLAlchemyError as exc:
        print("Database initialization failed:", exc, file=sys.stderr)
        sys.exit(1)
    print(f"Database ready at {config.DATABASE_URL}")


if __name__ == "__main__":
    main()
