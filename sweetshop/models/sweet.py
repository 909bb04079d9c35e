"""Sweet model definitions."""

from sqlalchemy import Column, Float, Integer, String
from sweetshop.database import Base


class Sweet(Base):
    """Represents an inventory item and its stock count."""
    __tablename__ = "sweets"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String)
    price = Column(Float, nullable=False, default=0.0)
    quantity = Column(Integer, nullable=False, default=0)
    description = Column(String)
