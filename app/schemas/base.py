from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schema whose JSON keys are camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error response schema."""
    success: bool = False
    message: str
    error: str
    details: Optional[Dict[str, Any]] = None


class HealthCheckSchema(BaseModel):
    """Schema for health check response."""
    status: str = Field(description="Health status: healthy or unhealthy")
    version: str
    environment: str
