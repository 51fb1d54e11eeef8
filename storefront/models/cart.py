# storefront/models/cart.py
# CartItem: one row per (user, product); uniqueness is kept by the cart service, not by a constraint.
from sqlalchemy import Column, Integer, ForeignKey
from storefront.db.base import Base


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, server_default="1")
