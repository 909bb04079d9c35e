from sweetshop.auth.passwords import verify_password
from sweetshop.core import config
from sweetshop.models.sweet import Sweet
from sweetshop.models.user import User
from sweetshop.seed import CATALOG, seed_database


def test_seed_populates_empty_store(db) -> None:
    seed_database(db)

    assert db.query(Sweet).count() == len(CATALOG) == 5
    admin = db.query(User).filter(User.email == config.SEED_ADMIN_EMAIL).one()
    assert admin.role == 'admin'
    assert verify_password(config.SEED_ADMIN_PASSWORD, admin.hashed_password)


def test_seed_is_idempotent(db) -> None:
    seed_database(db)
    seed_database(db)

    assert db.query(Sweet).count() == 5
    assert db.query(User).count() == 1


def test_seed_leaves_existing_inventory_alone(db, make_sweet) -> None:
    make_sweet(name='House Special', quantity=3)

    seed_database(db)

    assert [sweet.name for sweet in db.query(Sweet).all()] == ['House Special']
    assert db.query(User).count() == 1
