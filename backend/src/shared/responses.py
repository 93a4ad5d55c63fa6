from typing import Generic, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(CamelModel, Generic[T]):
    """Envelope shared by every endpoint."""

    success: bool
    message: str | None = None
    errors: list[str] | None = None
    error_code: str | None = None
    data: T | None = None


def ok(data: T | None = None, message: str | None = None) -> ApiResponse[T]:
    return ApiResponse(success=True, message=message, data=data)


def failure_response(
    status_code: int,
    message: str,
    errors: list[str] | None = None,
    error_code: str | None = None,
) -> JSONResponse:
    body = ApiResponse[None](
        success=False, message=message, errors=errors, error_code=error_code
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
