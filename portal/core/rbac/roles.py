"""Default role definitions for the developer portal.

Used whenever the application config has no ``permission.rbac`` section.
Defines 6 standard roles:
1. Super Admin - Full access to everything
2. Platform Admin - Catalog and scaffolder administration
3. Developer - Creating and managing services, no system components
4. Read Only - View access to catalog and docs
5. Team Lead - Developer access plus team member management
6. Guest - Public components only
"""

from typing import Dict, List

from .models import PolicyConfiguration, ResourceRule, Role, WILDCARD


# Catalog permissions
CATALOG_ENTITY_READ = "catalog.entity.read"
CATALOG_ENTITY_CREATE = "catalog.entity.create"
CATALOG_ENTITY_DELETE = "catalog.entity.delete"
CATALOG_ENTITY_REFRESH = "catalog.entity.refresh"

# Scaffolder permissions
SCAFFOLDER_TEMPLATE_PARAMETER_READ = "scaffolder.template.parameter.read"
SCAFFOLDER_ACTION_EXECUTE = "scaffolder.action.execute"
SCAFFOLDER_TASK_READ = "scaffolder.task.read"
SCAFFOLDER_TASK_CREATE = "scaffolder.task.create"

TECHDOCS_READ = "techdocs.read"

# Resource types
CATALOG_ENTITY = "catalog-entity"
SCAFFOLDER_TEMPLATE = "scaffolder-template"
USER = "user"


SUPER_ADMIN_PERMISSIONS = [WILDCARD]

PLATFORM_ADMIN_PERMISSIONS = [
    CATALOG_ENTITY_CREATE,
    CATALOG_ENTITY_DELETE,
    CATALOG_ENTITY_REFRESH,
    SCAFFOLDER_ACTION_EXECUTE,
    SCAFFOLDER_TASK_READ,
    SCAFFOLDER_TASK_CREATE,
]

DEVELOPER_PERMISSIONS = [
    CATALOG_ENTITY_READ,
    CATALOG_ENTITY_CREATE,
    SCAFFOLDER_TEMPLATE_PARAMETER_READ,
    SCAFFOLDER_ACTION_EXECUTE,
    SCAFFOLDER_TASK_READ,
    SCAFFOLDER_TASK_CREATE,
]

READ_ONLY_PERMISSIONS = [
    CATALOG_ENTITY_READ,
    SCAFFOLDER_TEMPLATE_PARAMETER_READ,
    TECHDOCS_READ,
]

TEAM_LEAD_PERMISSIONS = [
    CATALOG_ENTITY_READ,
    CATALOG_ENTITY_CREATE,
    CATALOG_ENTITY_REFRESH,
    SCAFFOLDER_TEMPLATE_PARAMETER_READ,
    SCAFFOLDER_ACTION_EXECUTE,
    SCAFFOLDER_TASK_READ,
    SCAFFOLDER_TASK_CREATE,
]

GUEST_PERMISSIONS = [
    CATALOG_ENTITY_READ,
    TECHDOCS_READ,
]


# Default roles configuration, in the same shape as the YAML role entries
DEFAULT_ROLES: Dict[str, dict] = {
    "super-admin": {
        "name": "Super Admin",
        "description": "Full administrative access to all resources",
        "permissions": SUPER_ADMIN_PERMISSIONS,
    },
    "platform-admin": {
        "name": "Platform Admin",
        "description": "Platform administration and user management",
        "permissions": PLATFORM_ADMIN_PERMISSIONS,
    },
    "developer": {
        "name": "Developer",
        "description": "Standard developer access for creating and managing services",
        "permissions": DEVELOPER_PERMISSIONS,
        "resources": {
            # No access to system components
            CATALOG_ENTITY: {"allow": [WILDCARD], "deny": ["system-*"]},
            SCAFFOLDER_TEMPLATE: {"allow": [WILDCARD]},
        },
    },
    "read-only": {
        "name": "Read Only",
        "description": "Read-only access to catalog and documentation",
        "permissions": READ_ONLY_PERMISSIONS,
    },
    "team-lead": {
        "name": "Team Lead",
        "description": "Team leadership with extended permissions",
        "permissions": TEAM_LEAD_PERMISSIONS,
        "resources": {
            CATALOG_ENTITY: {"allow": [WILDCARD]},
            USER: {"allow": ["team-*"]},
        },
    },
    "guest": {
        "name": "Guest",
        "description": "Limited guest access",
        "permissions": GUEST_PERMISSIONS,
        "resources": {
            CATALOG_ENTITY: {"allow": ["public-*"]},
        },
    },
}

# Identity provider group names and group entity refs
DEFAULT_GROUP_ROLES: Dict[str, List[str]] = {
    "Administrators": ["platform-admin"],
    "Developers": ["developer"],
    "TeamLeads": ["team-lead"],
    "ReadOnly": ["read-only"],
    "Guests": ["guest"],
    "group:default/administrators": ["platform-admin"],
    "group:default/developers": ["developer"],
    "group:default/team-leads": ["team-lead"],
    "group:default/readonly": ["read-only"],
}


def _build_role(key: str, definition: dict) -> Role:
    resources = {
        resource_type: ResourceRule(
            allow=tuple(rule["allow"]) if "allow" in rule else None,
            deny=tuple(rule["deny"]) if "deny" in rule else None,
        )
        for resource_type, rule in definition.get("resources", {}).items()
    }
    return Role(
        name=key,
        display_name=definition["name"],
        description=definition["description"],
        permissions=frozenset(definition["permissions"]),
        resources=resources,
    )


def get_default_role(role_key: str) -> Role:
    """Get a default role by key."""
    definition = DEFAULT_ROLES.get(role_key)
    if not definition:
        raise ValueError(f"Unknown default role: {role_key}")
    return _build_role(role_key, definition)


def default_policy_configuration() -> PolicyConfiguration:
    """Build a fresh copy of the built-in policy configuration."""
    return PolicyConfiguration.from_roles(
        roles=[get_default_role(key) for key in DEFAULT_ROLES],
        user_roles={},
        group_roles=DEFAULT_GROUP_ROLES,
        super_admins=(),
    )
