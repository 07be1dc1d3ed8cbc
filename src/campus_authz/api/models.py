"""Response models for the HTTP adapter."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PermissionDeniedResponse(BaseModel):
    """Body of a 403 raised by the permission dependencies."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(default="Access denied")
    error_code: str = Field(alias="errorCode")
    resource: Optional[str] = None
    action: Optional[str] = None
    principal_id: Optional[str] = Field(default=None, alias="principalId")
