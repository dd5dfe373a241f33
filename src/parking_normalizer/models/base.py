"""
SQLAlchemy ORM Base Configuration
Provides the declarative base shared by all ORM models.

Sessions are not created here: they come from
database.connection.DatabaseConnection so the engine stays in one place.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models"""
    pass
