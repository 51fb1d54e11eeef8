# storefront/models/product.py
# Catalog products. Price is an integer amount in the smallest currency unit.
from sqlalchemy import Column, Integer, String, Text, DateTime, func
from storefront.db.base import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Integer, nullable=False)
    image_url = Column(String(500), nullable=True)
    category = Column(String(100), nullable=True)
    stock = Column(Integer, server_default="0")
    created_at = Column(DateTime, server_default=func.current_timestamp())
