from fastapi import APIRouter, Depends, Path, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sweetshop.auth.dependencies import Identity, get_current_identity, require_admin
from sweetshop.core.errors import InternalStoreError
from sweetshop.database import ensure_inventory_schema, get_db
from sweetshop.services import inventory
from sweetshop.services.inventory import MAX_STOCK

router = APIRouter(tags=['sweets'])

# Largest value a SQLite INTEGER primary key can hold.
MAX_SWEET_ID = 2**63 - 1


class SweetResponse(BaseModel):
    id: int
    name: str
    category: str | None = None
    price: float
    quantity: int
    description: str | None = None

    class Config:
        from_attributes = True


class CreateSweetRequest(BaseModel):
    name: str
    category: str | None = None
    price: float
    quantity: int = Field(default=0, le=MAX_STOCK)
    description: str | None = None


class UpdateSweetRequest(BaseModel):
    name: str | None = None
    category: str | None = None
    price: float | None = None
    description: str | None = None


class PurchaseRequest(BaseModel):
    quantity: int | None = None


class PurchaseResponse(BaseModel):
    message: str
    product: str
    quantity_purchased: int
    remaining: int


class RestockRequest(BaseModel):
    amount: int | None = None


class RestockResponse(BaseModel):
    message: str
    remaining: int


class CheckoutItemRequest(BaseModel):
    id: int = Field(le=MAX_SWEET_ID)
    quantity: int = 1


class CheckoutRequest(BaseModel):
    items: list[CheckoutItemRequest]


class CheckoutLineResponse(BaseModel):
    id: int
    name: str
    quantity: int
    price: float
    remaining: int


class CheckoutResponse(BaseModel):
    message: str
    items: list[CheckoutLineResponse]
    total: float


class MessageResponse(BaseModel):
    message: str


def ensure_database_ready() -> None:
    try:
        ensure_inventory_schema()
    except SQLAlchemyError as exc:
        raise InternalStoreError('Database unavailable. Verify DATABASE_URL.') from exc


@router.get('', response_model=list[SweetResponse])
def list_sweets(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    ensure_database_ready()
    return inventory.list_sweets(db)


@router.get('/search', response_model=list[SweetResponse])
def search_sweets(
    q: str | None = Query(default=None),
    max_price: float | None = Query(default=None, alias='maxPrice'),
    category: str | None = Query(default=None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    ensure_database_ready()
    return inventory.search_sweets(db, text=q, max_price=max_price, category=category)


@router.get('/categories', response_model=list[str])
def list_categories(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    ensure_database_ready()
    return inventory.list_categories(db)


@router.post('', response_model=SweetResponse, status_code=status.HTTP_201_CREATED)
def create_sweet(
    data: CreateSweetRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    ensure_database_ready()
    return inventory.create_sweet(
        db,
        name=data.name,
        category=data.category,
        price=data.price,
        quantity=data.quantity,
        description=data.description,
    )


@router.post('/checkout', response_model=CheckoutResponse)
def checkout(
    data: CheckoutRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    ensure_database_ready()
    result = inventory.checkout(db, [(item.id, item.quantity) for item in data.items])
    return CheckoutResponse(
        message='Order placed successfully',
        items=[
            CheckoutLineResponse(
                id=line.sweet_id,
                name=line.name,
                quantity=line.quantity,
                price=line.price,
                remaining=line.remaining,
            )
            for line in result.lines
        ],
        total=result.total,
    )


@router.put('/{sweet_id}', response_model=MessageResponse)
def update_sweet(
    data: UpdateSweetRequest,
    sweet_id: int = Path(le=MAX_SWEET_ID),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    ensure_database_ready()
    inventory.update_sweet(db, sweet_id, data.model_dump())
    return MessageResponse(message='Product updated successfully')


@router.delete('/{sweet_id}', response_model=MessageResponse)
def delete_sweet(
    sweet_id: int = Path(le=MAX_SWEET_ID),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    ensure_database_ready()
    inventory.delete_sweet(db, sweet_id)
    return MessageResponse(message='Product removed from inventory')


@router.post('/{sweet_id}/purchase', response_model=PurchaseResponse)
def purchase_sweet(
    sweet_id: int = Path(le=MAX_SWEET_ID),
    data: PurchaseRequest | None = None,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    ensure_database_ready()
    quantity = data.quantity if data is not None and data.quantity is not None else 1
    line = inventory.purchase_sweet(db, sweet_id, quantity)
    return PurchaseResponse(
        message='Purchase successful',
        product=line.name,
        quantity_purchased=line.quantity,
        remaining=line.remaining,
    )


@router.post('/{sweet_id}/restock', response_model=RestockResponse)
def restock_sweet(
    data: RestockRequest,
    sweet_id: int = Path(le=MAX_SWEET_ID),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    ensure_database_ready()
    remaining = inventory.restock_sweet(db, sweet_id, data.amount)
    return RestockResponse(
        message=f'Restocked successfully. Added {data.amount} units.',
        remaining=remaining,
    )
