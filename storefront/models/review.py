# storefront/models/review.py
# Reviews for the relational review store. image_urls holds a JSON array as text.
from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, func
from storefront.db.base import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    user_name = Column(String(100), nullable=False)
    rating = Column(Integer, nullable=False)
    content = Column(Text, nullable=True)
    image_urls = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.current_timestamp())
