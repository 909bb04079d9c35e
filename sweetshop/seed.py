"""First-run catalog and admin account."""

import logging

from sqlalchemy.orm import Session

from sweetshop.auth.dependencies import ADMIN_ROLE
from sweetshop.auth.passwords import hash_password
from sweetshop.core import config
from sweetshop.models.sweet import Sweet
from sweetshop.models.user import User

logger = logging.getLogger(__name__)

CATALOG = [
    {
        'name': 'Kaju Katli',
        'category': 'Mithai',
        'price': 850.00,
        'quantity': 20,
        'description': 'Premium diamond-shaped cashew fudge with silver leaf.',
    },
    {
        'name': 'Gulab Jamun (1kg)',
        'category': 'Mithai',
        'price': 350.00,
        'quantity': 15,
        'description': 'Soft berry-sized balls dunked in rose flavored sugar syrup.',
    },
    {
        'name': 'Motichoor Ladoo',
        'category': 'Mithai',
        'price': 400.00,
        'quantity': 30,
        'description': 'Tiny droplets of chickpea flour fried and dipped in syrup.',
    },
    {
        'name': 'Dark Hazelnut Bar',
        'category': 'Chocolate',
        'price': 150.00,
        'quantity': 50,
        'description': '70% Cocoa with roasted hazelnuts.',
    },
    {
        'name': 'Masala Chai Mix',
        'category': 'Beverage',
        'price': 250.00,
        'quantity': 40,
        'description': 'Authentic spice blend for the perfect tea.',
    },
]


def seed_database(db: Session) -> None:
    """Insert the catalog into an empty store and make sure the admin exists.

    Safe to call on every startup; existing rows are never touched.
    """
    if db.query(Sweet.id).first() is None:
        logger.info('Seeding database with initial inventory...')
        db.add_all([Sweet(**item) for item in CATALOG])

    if db.query(User.id).filter(User.email == config.SEED_ADMIN_EMAIL).first() is None:
        db.add(
            User(
                email=config.SEED_ADMIN_EMAIL,
                hashed_password=hash_password(config.SEED_ADMIN_PASSWORD),
                role=ADMIN_ROLE,
            )
        )
        logger.info('Admin user created: %s', config.SEED_ADMIN_EMAIL)

    db.commit()
