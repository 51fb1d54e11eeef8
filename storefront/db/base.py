# storefront/db/base.py
# Shared declarative base. The models only describe the schema; rows are read
# and written through RelationalStore.execute(), not through ORM sessions.

from sqlalchemy.orm import declarative_base

Base = declarative_base()
