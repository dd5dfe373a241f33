"""
Pydantic row schemas for query results.

Every row read from the database passes through one of these before it
becomes a domain record, so a mis-typed column fails loudly with
MalformedResultError instead of being silently mis-cast.
"""

from datetime import datetime
from typing import Any, Mapping, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from ..processor.exceptions import MalformedResultError


class RowSchema(BaseModel):
    model_config = ConfigDict(frozen=True, extra='ignore')


class GarageRowSchema(RowSchema):
    id: StrictInt
    name: StrictStr


class ParkingRowSchema(RowSchema):
    """Shared shape of GARAGE_MONITOR_DATA and NORMALIZED_PARKING_DATA rows."""
    garage_id: StrictInt
    available: StrictInt
    capacity: StrictInt
    timestamp: datetime = Field(strict=True)


class TimestampRowSchema(RowSchema):
    timestamp: datetime = Field(strict=True)


SchemaT = TypeVar('SchemaT', bound=RowSchema)


def validate_row(schema: Type[SchemaT], row: Mapping[str, Any], context: str) -> SchemaT:
    """
    Validate one result row against a schema.

    Args:
        schema: Row schema class
        row: Column mapping (e.g. Row._mapping)
        context: Short description of the query, used in the error message

    Raises:
        MalformedResultError: If the row does not match the schema
    """
    try:
        return schema.model_validate(dict(row))
    except ValidationError as e:
        raise MalformedResultError(
            f"Malformed row from {context}: {e.error_count()} validation error(s)",
            context=context,
            errors=e.errors(),
        ) from e
