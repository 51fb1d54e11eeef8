# storefront/models/order.py
# Order and OrderItem. Item name and price are copied from the product at order time.
import enum

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from storefront.db.base import Base


class OrderStatus(str, enum.Enum):
    pending = "pending"
    # reserved for fulfilment, nothing transitions into these yet
    completed = "completed"
    cancelled = "cancelled"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    total_amount = Column(Integer, nullable=False)
    status = Column(String(50), server_default=OrderStatus.pending.value)
    created_at = Column(DateTime, server_default=func.current_timestamp())


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Integer, nullable=False)
