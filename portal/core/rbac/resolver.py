"""Role resolution for portal callers.

Computes the effective role set of a caller from direct user mappings and
group memberships. Nothing about the requested permission is consulted here.
"""

from typing import Optional, Tuple

from .models import CallerIdentity, PolicyConfiguration, last_path_segment


class RoleResolver:
    """Resolves caller identities against a policy configuration."""

    def __init__(self, config: PolicyConfiguration):
        self.config = config

    def is_super_admin(self, identity: Optional[CallerIdentity]) -> bool:
        """Check the caller's own ref and every ownership ref against the super admin list."""
        if identity is None:
            return False
        return any(ref in self.config.super_admins for ref in identity.all_refs)

    def resolve_roles(self, identity: Optional[CallerIdentity]) -> Tuple[str, ...]:
        """
        Get the effective role names for a caller.

        Group roles are looked up by the full ownership ref
        (``group:default/developers``) and by its last path segment
        (``developers``), since some identity providers only hand out bare
        group names.

        Args:
            identity: Caller identity, or None for anonymous callers

        Returns:
            Deduplicated role names in first-seen order; empty when the
            caller has no assignments
        """
        if identity is None:
            return ()

        roles: dict[str, None] = {}

        for role_name in self.config.user_roles.get(identity.primary_ref, ()):
            roles[role_name] = None

        group_roles = self.config.group_roles
        for entity_ref in identity.ownership_refs:
            for role_name in group_roles.get(entity_ref, ()):
                roles[role_name] = None

            group_name = last_path_segment(entity_ref)
            for role_name in group_roles.get(group_name, ()):
                roles[role_name] = None

        return tuple(roles)
