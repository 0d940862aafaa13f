"""Pydantic models for deployment settings."""

from typing import Optional
from pydantic import BaseModel, Field, SecretStr, field_validator


class ConnectionSettings(BaseModel):
    """Object store endpoint and credentials, parsed from a connection string."""

    endpoint_url: Optional[str] = Field(None, description="S3-compatible endpoint URL")
    region: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None
    profile: Optional[str] = None
    bucket: Optional[str] = None
    addressing_style: str = Field("auto", pattern="^(auto|path|virtual)$")

    @field_validator("endpoint_url")
    @classmethod
    def validate_endpoint_url(cls, v: Optional[str]) -> Optional[str]:
        """Endpoint must carry a scheme so botocore can build requests."""
        if v is not None and not v.startswith(("http://", "https://")):
            raise ValueError(f"EndpointUrl must start with http:// or https://: {v}")
        return v


class DeploymentSettings(BaseModel):
    """Settings shared by the deploy and cleanup commands."""

    current_version: str = Field(..., min_length=1)
    connection_string: Optional[SecretStr] = Field(None, description="Storage connection string")
    container: Optional[str] = None
    chunk_size: int = Field(50, ge=1, description="Number of concurrent storage operations")
    retries: int = Field(3, ge=1, description="Number of attempts per storage operation")
    max_pages: int = Field(50, ge=1, description="Maximum listing pages loaded during cleanup")
    retry_delay: float = Field(0.0, ge=0, description="Seconds before the first retry, 0 retries immediately")
    connect_timeout: float = Field(10.0, gt=0)
    read_timeout: float = Field(60.0, gt=0)
    dry_run: bool = False

    @field_validator("current_version")
    @classmethod
    def validate_current_version(cls, v: str) -> str:
        """Reject versions that would produce an unusable folder name."""
        if "/" in v:
            raise ValueError("Version must not contain '/'")
        return v.strip()
