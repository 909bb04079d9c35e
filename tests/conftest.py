import os

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('SEED_ON_STARTUP', 'false')
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from sweetshop.auth import jwt_handler  # noqa: E402
from sweetshop.database import Base, get_db  # noqa: E402
from sweetshop.main import app  # noqa: E402
from sweetshop.models.sweet import Sweet  # noqa: E402
from sweetshop.models.user import User  # noqa: E402


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine, tables=[User.__table__, Sweet.__table__])
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine, tables=[Sweet.__table__, User.__table__])
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_sweet(db):
    def _make_sweet(**overrides) -> Sweet:
        fields = {
            'name': 'Kaju Katli',
            'category': 'Mithai',
            'price': 850.0,
            'quantity': 20,
            'description': 'Cashew fudge',
        }
        fields.update(overrides)
        sweet = Sweet(**fields)
        db.add(sweet)
        db.commit()
        db.refresh(sweet)
        return sweet

    return _make_sweet


def _token(user_id: int, email: str, role: str) -> str:
    return jwt_handler.create_access_token(subject=email, claims={'id': user_id, 'email': email, 'role': role})


@pytest.fixture
def admin_headers() -> dict:
    return {'Authorization': f"Bearer {_token(1, 'admin@mithai.com', 'admin')}"}


@pytest.fixture
def user_headers() -> dict:
    return {'Authorization': f"Bearer {_token(2, 'buyer@example.com', 'user')}"}


@pytest.fixture
def client(session_factory, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr('sweetshop.routes.sweet_routes.ensure_database_ready', lambda: None)

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)
