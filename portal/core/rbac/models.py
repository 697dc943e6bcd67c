"""Policy data model for the developer portal RBAC engine.

Roles, resource rules and the policy configuration are loaded once at
startup and never mutated afterwards. Caller identities and permission
requests are created per check and discarded with the decision.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Optional, Tuple


WILDCARD = "*"


class AuthorizeResult(str, Enum):
    """Outcome of a permission check."""

    ALLOW = "ALLOW"
    DENY = "DENY"


@dataclass(frozen=True)
class PolicyDecision:
    """Decision returned by the permission policy."""
    result: AuthorizeResult

    @property
    def allowed(self) -> bool:
        return self.result is AuthorizeResult.ALLOW


@dataclass(frozen=True)
class ResourceRule:
    """
    Allow/deny patterns narrowing a role's permissions for one resource type.

    ``None`` means the list is not configured at all; an empty tuple is a
    configured list that matches nothing.
    """
    allow: Optional[Tuple[str, ...]] = None
    deny: Optional[Tuple[str, ...]] = None

    @property
    def is_unrestricted(self) -> bool:
        """True when neither an allow nor a deny list is configured."""
        return self.allow is None and self.deny is None


@dataclass(frozen=True)
class Role:
    """A named bundle of permissions with optional resource rules."""
    name: str
    permissions: FrozenSet[str] = frozenset()
    display_name: str = ""
    description: str = ""
    resources: Mapping[str, ResourceRule] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "permissions", frozenset(self.permissions))
        object.__setattr__(self, "resources", MappingProxyType(dict(self.resources)))

    def grants(self, permission_name: str) -> bool:
        """Check if the role holds the permission or the wildcard."""
        return WILDCARD in self.permissions or permission_name in self.permissions


def _freeze_mapping(mapping: Mapping[str, Iterable[str]]) -> Mapping[str, Tuple[str, ...]]:
    # Keep declaration order of role names, drop repeats
    return MappingProxyType(
        {key: tuple(dict.fromkeys(values)) for key, values in mapping.items()}
    )


@dataclass(frozen=True)
class PolicyConfiguration:
    """
    Immutable RBAC policy: role catalog plus user, group and super admin maps.

    Attributes:
        roles: Role catalog keyed by role name
        user_roles: User entity ref -> role names
        group_roles: Group entity ref or bare group name -> role names
        super_admins: Refs exempt from all policy checks
    """
    roles: Mapping[str, Role] = field(default_factory=dict, hash=False)
    user_roles: Mapping[str, Tuple[str, ...]] = field(default_factory=dict, hash=False)
    group_roles: Mapping[str, Tuple[str, ...]] = field(default_factory=dict, hash=False)
    super_admins: FrozenSet[str] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "roles", MappingProxyType(dict(self.roles)))
        object.__setattr__(self, "user_roles", _freeze_mapping(self.user_roles))
        object.__setattr__(self, "group_roles", _freeze_mapping(self.group_roles))
        object.__setattr__(self, "super_admins", frozenset(self.super_admins))

    @classmethod
    def from_roles(
        cls,
        roles: Iterable[Role],
        user_roles: Optional[Mapping[str, Iterable[str]]] = None,
        group_roles: Optional[Mapping[str, Iterable[str]]] = None,
        super_admins: Iterable[str] = (),
    ) -> "PolicyConfiguration":
        """Build a configuration from a role list; a repeated name replaces the earlier role."""
        catalog = {}
        for role in roles:
            catalog[role.name] = role
        return cls(
            roles=catalog,
            user_roles=user_roles or {},
            group_roles=group_roles or {},
            super_admins=frozenset(super_admins),
        )

    def unknown_role_references(self) -> list[str]:
        """List role names referenced by user/group mappings but absent from the catalog."""
        referenced = []
        for mapping in (self.user_roles, self.group_roles):
            for role_names in mapping.values():
                referenced.extend(role_names)
        return sorted({name for name in referenced if name not in self.roles})


@dataclass(frozen=True)
class CallerIdentity:
    """
    Identity of the caller, as supplied by the authentication layer.

    ``ownership_refs`` usually holds the caller's group memberships and
    their own user ref.
    """
    primary_ref: str
    ownership_refs: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "ownership_refs", tuple(self.ownership_refs))

    @property
    def all_refs(self) -> Tuple[str, ...]:
        return (self.primary_ref,) + self.ownership_refs


@dataclass(frozen=True)
class PermissionRequest:
    """A single permission check, optionally scoped to a resource."""
    permission_name: str
    resource_type: Optional[str] = None
    resource_ref: Optional[str] = None

    @property
    def is_resource_permission(self) -> bool:
        return bool(self.resource_type)


def last_path_segment(ref: str) -> str:
    """
    Return the text after the final ``/`` of an entity ref.

    ``group:default/developers`` -> ``developers``. Refs without a slash,
    or ending in one, are returned unchanged.
    """
    segment = ref.rsplit("/", 1)[-1]
    return segment or ref
