# Parking Normalizer - Models Package

# Import all ORM models so they register with the declarative base
from .base import Base
from .orm_garage import GarageEntity
from .orm_parking_data import GarageMonitorData, NormalizedParkingData
from .records import Garage, RawSample, NormalizedRecord

__all__ = [
    'Base',
    'GarageEntity',
    'GarageMonitorData',
    'NormalizedParkingData',
    'Garage',
    'RawSample',
    'NormalizedRecord',
]
