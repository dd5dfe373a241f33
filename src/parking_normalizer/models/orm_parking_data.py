"""
SQLAlchemy ORM Models: Parking Data Tables
GarageMonitorData (raw samples) and NormalizedParkingData (hourly averages).
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class GarageMonitorData(Base):
    """
    Raw availability sample collected by the ingestion process.
    Several samples per garage per hour; read-only here.
    """
    __tablename__ = "GARAGE_MONITOR_DATA"

    id: Mapped[int] = mapped_column(
        "ID", BigInteger().with_variant(Integer, "sqlite"), primary_key=True
    )
    garage_id: Mapped[int] = mapped_column(
        "GARAGEID",
        ForeignKey("GARAGES.ID"),
        nullable=False
    )
    available: Mapped[int] = mapped_column(
        "AVAILABLE",
        Integer,
        nullable=False,
        comment="Available parking spots at sample time"
    )
    capacity: Mapped[int] = mapped_column(
        "CAPACITY",
        Integer,
        nullable=False,
        comment="Total parking spots at sample time"
    )
    timestamp: Mapped[datetime] = mapped_column(
        "TIMESTAMP",
        DateTime,
        nullable=False,
        index=True,
        comment="UTC timestamp when sample was collected"
    )

    __table_args__ = (
        Index('idx_monitor_garage_timestamp', 'GARAGEID', 'TIMESTAMP'),
    )


class NormalizedParkingData(Base):
    """
    One hourly-averaged record per garage per hour.

    (GARAGEID, TIMESTAMP) is indexed but deliberately not unique: callers
    check existence before inserting.
    """
    __tablename__ = "NORMALIZED_PARKING_DATA"

    id: Mapped[int] = mapped_column(
        "ID", BigInteger().with_variant(Integer, "sqlite"), primary_key=True
    )
    garage_id: Mapped[int] = mapped_column(
        "GARAGEID",
        ForeignKey("GARAGES.ID"),
        nullable=False
    )
    available: Mapped[int] = mapped_column(
        "AVAILABLE",
        Integer,
        nullable=False,
        comment="Floor of the mean availability across the hour"
    )
    capacity: Mapped[int] = mapped_column(
        "CAPACITY",
        Integer,
        nullable=False
    )
    timestamp: Mapped[datetime] = mapped_column(
        "TIMESTAMP",
        DateTime,
        nullable=False,
        comment="UTC start of the civil hour"
    )

    __table_args__ = (
        Index('idx_normalized_garage_timestamp', 'GARAGEID', 'TIMESTAMP'),
    )
