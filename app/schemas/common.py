
from datetime import datetime
from typing import Annotated, Optional, List, Generic, TypeVar
from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.utils.timeslots import as_utc

T = TypeVar("T")

# Stored datetimes are naive UTC; responses carry the offset
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


# Every request/response body uses camelCase keys on the wire
class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Success envelope: {"success": true, "message": ..., <payload>}
class ApiResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None


# Paginated response wrapper — used by the browse endpoints
class PaginatedResponse(ApiResponse, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int


# Error responses
class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None


class PersonName(CamelModel):
    first_name: str
    last_name: str


def total_pages(total: int, limit: int) -> int:
    return -(-total // limit) if total else 0
