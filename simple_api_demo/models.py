from datetime import datetime, timezone

from pydantic import BaseModel, Field


def utc_timestamp() -> str:
    """Current time as an RFC3339 UTC string."""
    return datetime.now(timezone.utc).isoformat()


class ServiceStatus(BaseModel):
    """Application server health payload."""

    status: str = Field("ok", description="Service health")
    service: str = Field("simple-api-demo", description="Service name")
    version: str = Field(..., description="Build version of the service")


class PublicRouteResponse(BaseModel):
    message: str = "public route"
    access: str = "public"
    timestamp: str = Field(default_factory=utc_timestamp)


class PrivateRouteResponse(BaseModel):
    """Payload of the private route. Authentication is not enforced."""

    message: str = "private and protected route"
    access: str = "private"
    timestamp: str = Field(default_factory=utc_timestamp)
    warning: str = Field(..., min_length=1)


class ErrorDetail(BaseModel):
    type: str = Field(..., description="Machine readable error kind")
    message: str = Field(..., description="Full display string of the error")
    timestamp: str = Field(default_factory=utc_timestamp)


class ErrorResponse(BaseModel):
    error: ErrorDetail
