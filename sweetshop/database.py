from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from sweetshop.core import config


def build_engine(url: str):
    connect_args = {}
    if url.startswith("sqlite"):
        # Request handlers run in a thread pool and share the file connection pool.
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args)


engine = build_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_inventory_schema_checked = False


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_inventory_schema() -> None:
    global _inventory_schema_checked

    if _inventory_schema_checked:
        return

    with _schema_lock:
        if _inventory_schema_checked:
            return

        inspector = inspect(engine)

        if 'sweets' not in inspector.get_table_names():
            _inventory_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('sweets')}
        migration_steps = [
            ('description', 'ALTER TABLE sweets ADD COLUMN description VARCHAR'),
        ]

        with engine.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_sweets_name ON sweets(name)')
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_sweets_category_price ON sweets(category, price)')
            )

        _inventory_schema_checked = True


def init_database() -> None:
    # Models register their tables on Base when imported.
    from sweetshop.models import sweet, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
    ensure_inventory_schema()
