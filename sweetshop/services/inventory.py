"""Inventory operations over the ``sweets`` table.

Stock changes never read a quantity and write it back. Each one is a single
conditional UPDATE (``quantity >= wanted`` for decrements) so concurrent
purchases of the same sweet cannot drive its stock below zero; the row count of
that UPDATE decides whether the purchase went through.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterable

from sqlalchemy import or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sweetshop.core.errors import InsufficientStock, InternalStoreError, InvalidAmount, NotFound, ShopError
from sweetshop.models.sweet import Sweet

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('name', 'category', 'price', 'description')

# Largest stock count a sweet may hold; restocks never push past it.
MAX_STOCK = 2**31 - 1


@dataclass
class StockLine:
    sweet_id: int
    name: str
    price: float
    quantity: int
    remaining: int


@dataclass
class CheckoutResult:
    lines: list[StockLine] = field(default_factory=list)
    total: float = 0.0


@contextmanager
def store_transaction(db: Session, action: str):
    try:
        yield
    except ShopError:
        db.rollback()
        raise
    except (SQLAlchemyError, OverflowError) as exc:
        # OverflowError: the driver could not bind an integer parameter.
        db.rollback()
        logger.exception('Inventory store failed during %s', action)
        raise InternalStoreError() from exc


def _escape_like(value: str) -> str:
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def _validate_quantity(quantity: int) -> None:
    if quantity is None or quantity < 1:
        raise InvalidAmount('Quantity must be at least 1')


def list_sweets(db: Session) -> list[Sweet]:
    with store_transaction(db, 'list'):
        return db.query(Sweet).order_by(Sweet.name.asc()).all()


def search_sweets(
    db: Session,
    text: str | None = None,
    max_price: float | None = None,
    category: str | None = None,
) -> list[Sweet]:
    """Match ``text`` against name or category, ignoring case.

    Empty text matches every sweet. ``max_price`` is an inclusive ceiling and
    ``category`` an exact match; both are skipped when ``None``.
    """
    query = db.query(Sweet)

    if text:
        pattern = f'%{_escape_like(text)}%'
        query = query.filter(
            or_(
                Sweet.name.ilike(pattern, escape='\\'),
                Sweet.category.ilike(pattern, escape='\\'),
            )
        )
    if max_price is not None:
        query = query.filter(Sweet.price <= max_price)
    if category:
        query = query.filter(Sweet.category == category)

    with store_transaction(db, 'search'):
        return query.order_by(Sweet.name.asc()).all()


def list_categories(db: Session) -> list[str]:
    with store_transaction(db, 'categories'):
        rows = (
            db.query(Sweet.category)
            .filter(Sweet.category.is_not(None))
            .distinct()
            .order_by(Sweet.category.asc())
            .all()
        )
    return [category for (category,) in rows]


def create_sweet(
    db: Session,
    name: str,
    category: str | None,
    price: float,
    quantity: int,
    description: str | None = None,
) -> Sweet:
    sweet = Sweet(name=name, category=category, price=price, quantity=quantity, description=description)
    with store_transaction(db, 'create'):
        db.add(sweet)
        db.commit()
        db.refresh(sweet)
    logger.info('Created sweet %s (%s)', sweet.id, sweet.name)
    return sweet


def update_sweet(db: Session, sweet_id: int, changes: dict) -> Sweet:
    """Apply every non-``None`` field in ``changes``; omitted fields keep their value."""
    with store_transaction(db, 'update'):
        sweet = db.get(Sweet, sweet_id)
        if sweet is None:
            raise NotFound()

        for field_name in UPDATABLE_FIELDS:
            value = changes.get(field_name)
            if value is not None:
                setattr(sweet, field_name, value)

        db.commit()
        db.refresh(sweet)
    return sweet


def delete_sweet(db: Session, sweet_id: int) -> None:
    with store_transaction(db, 'delete'):
        deleted = db.query(Sweet).filter(Sweet.id == sweet_id).delete(synchronize_session=False)
        db.commit()
    logger.info('Deleted sweet %s (%d row(s))', sweet_id, deleted)


def _stock_row(db: Session, sweet_id: int):
    return db.query(Sweet.name, Sweet.price, Sweet.quantity).filter(Sweet.id == sweet_id).first()


def _take_stock(db: Session, sweet_id: int, quantity: int) -> StockLine:
    if quantity > MAX_STOCK:
        # No row can hold this much, so skip the UPDATE and report the shortfall.
        row = _stock_row(db, sweet_id)
        if row is None:
            raise NotFound('Product not found')
        raise InsufficientStock(available=row.quantity)

    result = db.execute(
        update(Sweet)
        .where(Sweet.id == sweet_id, Sweet.quantity >= quantity)
        .values(quantity=Sweet.quantity - quantity)
        .execution_options(synchronize_session=False)
    )
    row = _stock_row(db, sweet_id)

    if result.rowcount == 0:
        if row is None:
            raise NotFound('Product not found')
        raise InsufficientStock(available=row.quantity)

    return StockLine(sweet_id=sweet_id, name=row.name, price=row.price, quantity=quantity, remaining=row.quantity)


def purchase_sweet(db: Session, sweet_id: int, quantity: int = 1) -> StockLine:
    _validate_quantity(quantity)

    with store_transaction(db, 'purchase'):
        line = _take_stock(db, sweet_id, quantity)
        db.commit()

    logger.info('Purchased %d x %s, %d left', quantity, line.name, line.remaining)
    return line


def restock_sweet(db: Session, sweet_id: int, amount: int) -> int:
    if amount is None or amount <= 0:
        raise InvalidAmount()
    if amount > MAX_STOCK:
        raise InvalidAmount(f'Amount must be at most {MAX_STOCK}')

    with store_transaction(db, 'restock'):
        result = db.execute(
            update(Sweet)
            .where(Sweet.id == sweet_id, Sweet.quantity <= MAX_STOCK - amount)
            .values(quantity=Sweet.quantity + amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            if _stock_row(db, sweet_id) is None:
                raise NotFound()
            raise InvalidAmount(f'Stock cannot exceed {MAX_STOCK}')
        remaining = db.query(Sweet.quantity).filter(Sweet.id == sweet_id).scalar()
        db.commit()

    logger.info('Restocked sweet %s by %d, now %d', sweet_id, amount, remaining)
    return remaining


def checkout(db: Session, items: Iterable[tuple[int, int]]) -> CheckoutResult:
    """Buy every ``(sweet_id, quantity)`` line or none of them.

    Lines for the same sweet are merged first. All decrements share one
    transaction, which is rolled back as soon as any line fails.
    """
    wanted: dict[int, int] = {}
    for sweet_id, quantity in items:
        _validate_quantity(quantity)
        wanted[sweet_id] = wanted.get(sweet_id, 0) + quantity

    if not wanted:
        raise InvalidAmount('Cart is empty')

    result = CheckoutResult()
    with store_transaction(db, 'checkout'):
        for sweet_id, quantity in wanted.items():
            line = _take_stock(db, sweet_id, quantity)
            result.lines.append(line)
            result.total += line.price * line.quantity
        db.commit()

    result.total = round(result.total, 2)
    logger.info('Checkout of %d line(s) completed, total %.2f', len(result.lines), result.total)
    return result
