"""Schemas for the permission authorization API."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from portal.core.rbac import AuthorizeResult, PermissionRequest


class PermissionSchema(BaseModel):
    """The permission being checked."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, description="Permission name, e.g. catalog.entity.read")
    resource_type: Optional[str] = Field(None, alias="resourceType")


class AuthorizeRequestItem(BaseModel):
    """A single authorization query."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    permission: PermissionSchema
    resource_ref: Optional[str] = Field(None, alias="resourceRef")

    def to_permission_request(self) -> PermissionRequest:
        return PermissionRequest(
            permission_name=self.permission.name,
            resource_type=self.permission.resource_type,
            resource_ref=self.resource_ref,
        )


class AuthorizeRequest(BaseModel):
    """Batch of authorization queries."""
    items: List[AuthorizeRequestItem] = Field(..., min_length=1)


class AuthorizeResponseItem(BaseModel):
    id: str
    result: AuthorizeResult


class AuthorizeResponse(BaseModel):
    items: List[AuthorizeResponseItem]
