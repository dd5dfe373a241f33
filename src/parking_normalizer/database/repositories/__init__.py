from .normalized_repository import NormalizedRecordRepository
from .raw_sample_repository import RawSampleRepository

__all__ = ['NormalizedRecordRepository', 'RawSampleRepository']
