# This project was developed with assistance from AI tools.
"""Shared schema components."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class SuccessResponse(BaseModel, Generic[T]):
    """``{success: true, data: ...}`` envelope used by every JSON read route."""

    success: bool = True
    data: T
