"""Permission evaluation over an effective role set.

The decision is an OR across roles: every role is self-contained evidence
towards ALLOW. Resource deny rules only disqualify the role that declares
them, so a deny in one role never vetoes a grant held through another.
"""

from typing import Iterable

from src.common.logger import get_logger

from .models import (
    AuthorizeResult,
    PermissionRequest,
    PolicyConfiguration,
    Role,
    last_path_segment,
)
from .patterns import matches_any

logger = get_logger("rbac.evaluator")


class PermissionEvaluator:
    """Decides a permission request for a set of role names."""

    def __init__(self, config: PolicyConfiguration):
        self.config = config

    def evaluate(
        self, role_names: Iterable[str], request: PermissionRequest
    ) -> AuthorizeResult:
        """
        Evaluate a request against the given roles.

        Requests carrying a resource type but no resource ref fall back to
        the basic check, as there is no resource name to match.
        """
        if not request.is_resource_permission or not request.resource_ref:
            return self.check_basic(role_names, request.permission_name)

        resource_name = last_path_segment(request.resource_ref)
        for role in self._granting_roles(role_names, request.permission_name):
            if self._role_allows_resource(role, request.resource_type, resource_name):
                return AuthorizeResult.ALLOW

        return AuthorizeResult.DENY

    def check_basic(
        self, role_names: Iterable[str], permission_name: str
    ) -> AuthorizeResult:
        """ALLOW if any role holds the permission or the wildcard."""
        for _ in self._granting_roles(role_names, permission_name):
            return AuthorizeResult.ALLOW
        return AuthorizeResult.DENY

    def _granting_roles(self, role_names: Iterable[str], permission_name: str):
        for role_name in role_names:
            role = self.config.roles.get(role_name)
            if role is None:
                # Mapping points at a role missing from the catalog
                logger.debug("Ignoring unknown role %r", role_name)
                continue
            if role.grants(permission_name):
                yield role

    @staticmethod
    def _role_allows_resource(role: Role, resource_type: str, resource_name: str) -> bool:
        rule = role.resources.get(resource_type)
        if rule is None:
            return True

        if rule.deny is not None and matches_any(resource_name, rule.deny):
            logger.debug(
                "Role %r denies %s %r", role.name, resource_type, resource_name
            )
            return False

        if rule.allow is not None and matches_any(resource_name, rule.allow):
            return True

        return rule.is_unrestricted
