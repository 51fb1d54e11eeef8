# storefront/models/user.py
# Users: unique email, bcrypt password hash, display name.
from sqlalchemy import Column, Integer, String, DateTime, func
from storefront.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    created_at = Column(DateTime, server_default=func.current_timestamp())
