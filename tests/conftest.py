"""Pytest configuration and shared fixtures."""

import pytest

from portal.core.rbac import (
    CallerIdentity,
    PolicyConfiguration,
    RBACPermissionPolicy,
    ResourceRule,
    Role,
)


@pytest.fixture
def sample_rbac_section():
    """Sample permission.rbac section, as it appears in app-config.yaml."""
    return {
        "roles": [
            {
                "name": "developer",
                "displayName": "Developer",
                "description": "Builds services",
                "permissions": ["catalog.entity.read", "scaffolder.task.create"],
                "resources": {
                    "catalog-entity": {
                        "allow": ["*"],
                        "deny": ["system-*"],
                    },
                },
            },
            {
                "name": "auditor",
                "permissions": ["catalog.entity.read", "techdocs.read"],
            },
            {
                "name": "admin",
                "displayName": "Admin",
                "permissions": ["*"],
            },
        ],
        "userRoles": {
            "user:default/jane.doe": ["auditor"],
        },
        "groupRoles": {
            "developers": ["developer"],
            "group:default/auditors": ["auditor"],
        },
        "superAdmins": ["user:default/root", "group:default/platform-owners"],
    }


@pytest.fixture
def sample_app_config(sample_rbac_section):
    """Full application config with an RBAC section."""
    return {
        "app": {"title": "Developer Portal"},
        "permission": {
            "enabled": True,
            "rbac": sample_rbac_section,
        },
    }


@pytest.fixture
def developer_role():
    return Role(
        name="developer",
        display_name="Developer",
        permissions=frozenset(["catalog.entity.read"]),
        resources={
            "catalog-entity": ResourceRule(allow=("*",), deny=("system-*",)),
        },
    )


@pytest.fixture
def developer_config(developer_role):
    """Single developer role, assigned through the bare group name."""
    return PolicyConfiguration.from_roles(
        roles=[developer_role],
        group_roles={"developers": ["developer"]},
    )


@pytest.fixture
def developer_policy(developer_config):
    return RBACPermissionPolicy(developer_config)


@pytest.fixture
def developer_identity():
    return CallerIdentity(
        primary_ref="user:default/sam.dev",
        ownership_refs=("user:default/sam.dev", "group:default/developers"),
    )
