"""RBAC (Role-Based Access Control) permission policy for the developer portal.

This module defines the policy model, the default roles, the config loader
and the decision chain that turns a caller identity and a permission request
into ALLOW or DENY.
"""

from .models import (
    AuthorizeResult,
    CallerIdentity,
    PermissionRequest,
    PolicyConfiguration,
    PolicyDecision,
    ResourceRule,
    Role,
)
from .loader import PolicyConfigurationError, load_policy_configuration, load_policy_from_files
from .policy import RBACPermissionPolicy, create_rbac_permission_policy
from .roles import default_policy_configuration

__all__ = [
    "AuthorizeResult",
    "CallerIdentity",
    "PermissionRequest",
    "PolicyConfiguration",
    "PolicyConfigurationError",
    "PolicyDecision",
    "RBACPermissionPolicy",
    "ResourceRule",
    "Role",
    "create_rbac_permission_policy",
    "default_policy_configuration",
    "load_policy_configuration",
    "load_policy_from_files",
]
