from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from portal.core.rbac import CallerIdentity, PermissionRequest, RBACPermissionPolicy
from src.common.logger import get_logger

logger = get_logger("api.deps")


def get_policy(request: Request) -> RBACPermissionPolicy:
    """Permission policy loaded at application startup."""
    policy = getattr(request.app.state, "rbac_policy", None)
    if policy is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Permission policy not loaded",
        )
    return policy


def get_caller_identity(request: Request) -> Optional[CallerIdentity]:
    """
    Identity of the caller, as placed on ``request.state.identity`` by the
    authentication layer. Anonymous callers get None.
    """
    identity = getattr(request.state, "identity", None)
    if identity is not None and not isinstance(identity, CallerIdentity):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unsupported caller identity",
        )
    return identity


class PermissionDependency:
    """
    FastAPI dependency for permission checking.

    Usage:
        @router.get("/entities", dependencies=[Depends(PermissionDependency("catalog.entity.read"))])
        async def list_entities():
            ...

        @router.delete(
            "/entities/{entity_ref:path}",
            dependencies=[Depends(PermissionDependency(
                "catalog.entity.delete",
                resource_type="catalog-entity",
                resource_ref_param="entity_ref",
            ))],
        )
        async def delete_entity(entity_ref: str):
            ...
    """

    def __init__(
        self,
        permission: str,
        resource_type: Optional[str] = None,
        resource_ref_param: Optional[str] = None,
    ):
        self.permission = permission
        self.resource_type = resource_type
        self.resource_ref_param = resource_ref_param

    async def __call__(
        self,
        request: Request,
        policy: RBACPermissionPolicy = Depends(get_policy),
        identity: Optional[CallerIdentity] = Depends(get_caller_identity),
    ) -> bool:
        resource_ref = None
        if self.resource_ref_param:
            resource_ref = request.path_params.get(self.resource_ref_param)

        decision = policy.handle(
            PermissionRequest(
                permission_name=self.permission,
                resource_type=self.resource_type,
                resource_ref=resource_ref,
            ),
            identity,
        )

        if not decision.allowed:
            logger.info(
                "Denied %s on %s for %s",
                self.permission,
                resource_ref or request.url.path,
                identity.primary_ref if identity else "<anonymous>",
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {self.permission}",
            )

        return True
