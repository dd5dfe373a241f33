"""
SQLAlchemy ORM Model: Garage
Garage master data. Written by the ingestion process, read-only here.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class GarageEntity(Base):
    """
    A monitored parking garage.
    IDs are assigned externally and never change.
    """
    __tablename__ = "GARAGES"

    id: Mapped[int] = mapped_column("ID", Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column("NAME", String(255), nullable=False)

    def __repr__(self):
        return f"<GarageEntity(id={self.id}, name='{self.name}')>"
