# This project was developed with assistance from AI tools.
"""Error response schema."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """JSON body returned for every 4xx/5xx response."""

    error: str = Field(description="Human-readable explanation of the failure.")
    code: str | None = Field(
        default=None,
        description="Stable machine-readable code for failures clients branch on.",
    )
    request_id: str = Field(
        default="",
        description="Correlation ID for tracing this request in logs.",
    )
