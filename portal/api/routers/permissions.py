"""Permission authorization API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends

from portal.api.deps import get_caller_identity, get_policy
from portal.api.schemas.permission import (
    AuthorizeRequest,
    AuthorizeResponse,
    AuthorizeResponseItem,
)
from portal.core.rbac import CallerIdentity, RBACPermissionPolicy

router = APIRouter(prefix="/permission", tags=["permission"])


@router.post("/authorize", response_model=AuthorizeResponse)
async def authorize(
    body: AuthorizeRequest,
    policy: RBACPermissionPolicy = Depends(get_policy),
    identity: Optional[CallerIdentity] = Depends(get_caller_identity),
):
    """Decide a batch of permission requests for the calling identity."""
    return AuthorizeResponse(
        items=[
            AuthorizeResponseItem(
                id=item.id,
                result=policy.handle(item.to_permission_request(), identity).result,
            )
            for item in body.items
        ]
    )
