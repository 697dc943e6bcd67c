"""RBAC permission policy for the developer portal.

Decision chain, first match wins:
1. Super admin -> ALLOW
2. No effective roles -> DENY
3. Role permissions, narrowed by resource rules -> ALLOW or DENY
"""

from typing import Optional

from src.common.logger import get_logger

from .evaluator import PermissionEvaluator
from .models import (
    AuthorizeResult,
    CallerIdentity,
    PermissionRequest,
    PolicyConfiguration,
    PolicyDecision,
)
from .resolver import RoleResolver
from .roles import default_policy_configuration

logger = get_logger("rbac.policy")


class RBACPermissionPolicy:
    """
    Answers permission requests for portal callers.

    The policy holds no mutable state, so one instance can serve any number
    of concurrent requests.
    """

    def __init__(self, config: PolicyConfiguration):
        self.config = config
        self.resolver = RoleResolver(config)
        self.evaluator = PermissionEvaluator(config)

    def handle(
        self,
        request: PermissionRequest,
        identity: Optional[CallerIdentity] = None,
    ) -> PolicyDecision:
        """
        Decide a permission request.

        Args:
            request: Permission being checked, optionally scoped to a resource
            identity: Caller identity, None for anonymous callers

        Returns:
            PolicyDecision with ALLOW or DENY
        """
        caller = identity.primary_ref if identity else "<anonymous>"

        if self.resolver.is_super_admin(identity):
            logger.debug("ALLOW %s for super admin %s", request.permission_name, caller)
            return PolicyDecision(AuthorizeResult.ALLOW)

        roles = self.resolver.resolve_roles(identity)
        if not roles:
            logger.debug("DENY %s for %s: no roles assigned", request.permission_name, caller)
            return PolicyDecision(AuthorizeResult.DENY)

        result = self.evaluator.evaluate(roles, request)
        logger.debug(
            "%s %s (resource_type=%s, resource_ref=%s) for %s with roles %s",
            result.value,
            request.permission_name,
            request.resource_type,
            request.resource_ref,
            caller,
            ", ".join(roles),
        )
        return PolicyDecision(result)

    def is_allowed(
        self,
        request: PermissionRequest,
        identity: Optional[CallerIdentity] = None,
    ) -> bool:
        """Shorthand for ``handle(...).allowed``."""
        return self.handle(request, identity).allowed


def create_rbac_permission_policy(
    config: Optional[PolicyConfiguration] = None,
) -> RBACPermissionPolicy:
    """Create a policy, using the built-in default configuration when none is given."""
    return RBACPermissionPolicy(config if config is not None else default_policy_configuration())
