"""Response envelope schemas shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class MessageResponse(BaseModel):
    """Envelope without a payload."""

    success: bool = True
    message: str


class DataResponse(MessageResponse, Generic[DataT]):
    """Envelope carrying a payload under `data`."""

    data: DataT


class ErrorResponse(BaseModel):
    """Envelope for failed requests."""

    success: bool = False
    message: str
    code: str
    errors: list[str] | None = None


class HealthData(BaseModel):
    status: str
    environment: str
