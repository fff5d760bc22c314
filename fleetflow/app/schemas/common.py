"""
Shared schema building blocks.

All API payloads use camelCase keys on the wire (`licensePlate`,
`cargoWeight`) while Python code stays snake_case. Responses are wrapped
in the `{success, data, count}` envelope.
"""

from datetime import datetime, timezone
from typing import Generic, List, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

T = TypeVar("T")


def _to_naive_utc(value: datetime) -> datetime:
    # Stored timestamps are naive UTC
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UTCDateTime = Annotated[datetime, AfterValidator(_to_naive_utc)]


class CamelModel(BaseModel):
    """Base model: camelCase aliases, snake_case accepted on input."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DataResponse(CamelModel, Generic[T]):
    success: bool = True
    data: T


class ListResponse(CamelModel, Generic[T]):
    success: bool = True
    count: int
    data: List[T]


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class CountResponse(CamelModel):
    success: bool = True
    count: int
    message: Optional[str] = None


class StatusUpdate(CamelModel):
    """Body of the status PATCH endpoints; checked against the enum by the handler."""
    status: Optional[str] = None
