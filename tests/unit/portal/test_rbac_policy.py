"""Tests for the RBAC permission policy decision chain."""

import pytest

from portal.core.rbac import (
    AuthorizeResult,
    CallerIdentity,
    PermissionRequest,
    PolicyConfiguration,
    RBACPermissionPolicy,
    ResourceRule,
    Role,
    create_rbac_permission_policy,
)
from portal.core.rbac.evaluator import PermissionEvaluator


READ = "catalog.entity.read"
ENTITY = "catalog-entity"


def _request(name=READ, resource_type=None, resource_ref=None):
    return PermissionRequest(
        permission_name=name, resource_type=resource_type, resource_ref=resource_ref
    )


def _user(ref="user:default/jane", *groups):
    return CallerIdentity(ref, ownership_refs=(ref,) + groups)


def _policy(roles, user_roles=None, super_admins=()):
    config = PolicyConfiguration.from_roles(
        roles=roles,
        user_roles=user_roles or {"user:default/jane": [role.name for role in roles]},
        super_admins=super_admins,
    )
    return RBACPermissionPolicy(config)


class TestSuperAdminOverride:
    """Super admins are allowed everything."""

    @pytest.mark.parametrize("request_", [
        _request(),
        _request("scaffolder.action.execute"),
        _request(READ, ENTITY, "component:default/system-core"),
    ])
    def test_super_admin_by_primary_ref(self, request_):
        policy = _policy([], user_roles={}, super_admins=["user:default/root"])
        assert policy.handle(request_, _user("user:default/root")).allowed

    def test_super_admin_by_group(self):
        policy = _policy([], user_roles={}, super_admins=["group:default/owners"])
        identity = _user("user:default/jane", "group:default/owners")
        assert policy.handle(_request("anything.at.all"), identity).allowed

    def test_super_admin_bypasses_deny_rules(self):
        role = Role(
            name="restricted",
            permissions=frozenset([READ]),
            resources={ENTITY: ResourceRule(deny=("*",))},
        )
        policy = _policy([role], super_admins=["user:default/jane"])
        assert policy.handle(_request(READ, ENTITY, "component:default/x"), _user()).allowed


class TestDefaultDeny:
    """Callers without roles are always denied."""

    def test_anonymous_is_denied(self):
        policy = create_rbac_permission_policy()
        decision = policy.handle(_request())
        assert decision.result == AuthorizeResult.DENY
        assert not decision.allowed

    def test_unassigned_user_is_denied(self):
        policy = _policy([Role(name="admin", permissions=frozenset(["*"]))],
                         user_roles={"user:default/other": ["admin"]})
        assert not policy.handle(_request(), _user()).allowed

    def test_only_unknown_roles_is_denied(self):
        policy = _policy([], user_roles={"user:default/jane": ["ghost"]})
        assert not policy.handle(_request(), _user()).allowed


class TestBasicPermissions:
    """Non-resource permission checks."""

    def test_exact_permission(self):
        policy = _policy([Role(name="reader", permissions=frozenset([READ]))])
        assert policy.handle(_request(READ), _user()).allowed
        assert not policy.handle(_request("catalog.entity.delete"), _user()).allowed

    @pytest.mark.parametrize("permission", [READ, "catalog.entity.delete", "x.y.z"])
    def test_wildcard_role_grants_any_permission(self, permission):
        policy = _policy([Role(name="admin", permissions=frozenset(["*"]))])
        assert policy.handle(_request(permission), _user()).allowed

    def test_permission_from_any_role(self):
        roles = [
            Role(name="reader", permissions=frozenset([READ])),
            Role(name="docs", permissions=frozenset(["techdocs.read"])),
        ]
        policy = _policy(roles)
        assert policy.handle(_request("techdocs.read"), _user()).allowed

    def test_unknown_role_alongside_known_role(self):
        policy = _policy(
            [Role(name="reader", permissions=frozenset([READ]))],
            user_roles={"user:default/jane": ["ghost", "reader"]},
        )
        assert policy.handle(_request(READ), _user()).allowed

    def test_resource_type_without_ref_uses_basic_check(self):
        """Without a resource ref there is no name to match, so rules are skipped."""
        role = Role(
            name="restricted",
            permissions=frozenset([READ]),
            resources={ENTITY: ResourceRule(allow=(), deny=("*",))},
        )
        policy = _policy([role])
        assert policy.handle(_request(READ, ENTITY), _user()).allowed
        assert not policy.handle(_request("catalog.entity.delete", ENTITY), _user()).allowed


class TestResourcePermissions:
    """Resource-scoped permission checks."""

    def test_deny_takes_precedence_within_role(self):
        role = Role(
            name="developer",
            permissions=frozenset([READ]),
            resources={ENTITY: ResourceRule(allow=("*",), deny=("secret-*",))},
        )
        policy = _policy([role])
        assert not policy.handle(_request(READ, ENTITY, "component:default/secret-1"), _user()).allowed
        assert policy.handle(_request(READ, ENTITY, "component:default/public-1"), _user()).allowed

    def test_deny_in_one_role_does_not_veto_another(self):
        restricted = Role(
            name="a",
            permissions=frozenset([READ]),
            resources={ENTITY: ResourceRule(deny=("secret-*",))},
        )
        unrestricted = Role(name="b", permissions=frozenset([READ]))
        policy = _policy([restricted, unrestricted])
        assert policy.handle(_request(READ, ENTITY, "component:default/secret-1"), _user()).allowed

    def test_deny_only_rule_does_not_grant_other_resources(self):
        role = Role(
            name="a",
            permissions=frozenset([READ]),
            resources={ENTITY: ResourceRule(deny=("secret-*",))},
        )
        policy = _policy([role])
        assert not policy.handle(_request(READ, ENTITY, "component:default/public-1"), _user()).allowed

    def test_allow_list_narrows_role(self):
        role = Role(
            name="guest",
            permissions=frozenset([READ]),
            resources={ENTITY: ResourceRule(allow=("public-*",))},
        )
        policy = _policy([role])
        assert policy.handle(_request(READ, ENTITY, "component:default/public-docs"), _user()).allowed
        assert not policy.handle(_request(READ, ENTITY, "component:default/billing"), _user()).allowed

    def test_empty_allow_list_matches_nothing(self):
        role = Role(
            name="locked",
            permissions=frozenset([READ]),
            resources={ENTITY: ResourceRule(allow=())},
        )
        policy = _policy([role])
        assert not policy.handle(_request(READ, ENTITY, "component:default/anything"), _user()).allowed

    def test_rule_without_lists_is_unrestricted(self):
        role = Role(
            name="open",
            permissions=frozenset([READ]),
            resources={ENTITY: ResourceRule()},
        )
        policy = _policy([role])
        assert policy.handle(_request(READ, ENTITY, "component:default/anything"), _user()).allowed

    def test_rules_for_other_resource_type_do_not_apply(self):
        role = Role(
            name="lead",
            permissions=frozenset([READ]),
            resources={"user": ResourceRule(allow=("team-*",))},
        )
        policy = _policy([role])
        assert policy.handle(_request(READ, ENTITY, "component:default/billing"), _user()).allowed

    def test_role_without_permission_is_skipped(self):
        roles = [
            Role(name="writer", permissions=frozenset(["catalog.entity.create"])),
            Role(
                name="guest",
                permissions=frozenset([READ]),
                resources={ENTITY: ResourceRule(allow=("public-*",))},
            ),
        ]
        policy = _policy(roles)
        assert not policy.handle(_request(READ, ENTITY, "component:default/billing"), _user()).allowed

    def test_resource_ref_without_path(self):
        role = Role(
            name="guest",
            permissions=frozenset([READ]),
            resources={ENTITY: ResourceRule(allow=("public-*",))},
        )
        policy = _policy([role])
        assert policy.handle(_request(READ, ENTITY, "public-site"), _user()).allowed


class TestDeveloperScenario:
    """A developer role limited away from system components."""

    def test_system_component_is_denied(self, developer_policy, developer_identity):
        request = _request(READ, ENTITY, "catalog-entity:default/system-core")
        assert developer_policy.handle(request, developer_identity).result == AuthorizeResult.DENY

    def test_service_is_allowed(self, developer_policy, developer_identity):
        request = _request(READ, ENTITY, "catalog-entity:default/payments-service")
        assert developer_policy.handle(request, developer_identity).result == AuthorizeResult.ALLOW

    def test_missing_permission_is_denied(self, developer_policy, developer_identity):
        request = _request("catalog.entity.create")
        assert developer_policy.handle(request, developer_identity).result == AuthorizeResult.DENY

    def test_decision_is_repeatable(self, developer_policy, developer_identity):
        request = _request(READ, ENTITY, "catalog-entity:default/system-core")
        first = developer_policy.handle(request, developer_identity)
        second = developer_policy.handle(request, developer_identity)
        assert first == second

    def test_is_allowed_shorthand(self, developer_policy, developer_identity):
        assert developer_policy.is_allowed(_request(READ), developer_identity)
        assert not developer_policy.is_allowed(_request("catalog.entity.create"), developer_identity)


class TestPermissionEvaluator:
    """Evaluator used directly with a role set."""

    def test_empty_role_set_is_denied(self, developer_config):
        evaluator = PermissionEvaluator(developer_config)
        assert evaluator.evaluate([], _request(READ)) == AuthorizeResult.DENY

    def test_check_basic(self, developer_config):
        evaluator = PermissionEvaluator(developer_config)
        assert evaluator.check_basic(["developer"], READ) == AuthorizeResult.ALLOW
        assert evaluator.check_basic(["ghost"], READ) == AuthorizeResult.DENY


class TestDefaultPolicy:
    """The built-in configuration used when nothing is configured."""

    def test_developers_group_gets_developer_role(self):
        policy = create_rbac_permission_policy()
        identity = _user("user:default/sam", "Developers")
        assert policy.handle(_request(READ, ENTITY, "component:default/payments"), identity).allowed
        assert not policy.handle(_request(READ, ENTITY, "component:default/system-db"), identity).allowed

    def test_guest_only_sees_public_components(self):
        policy = create_rbac_permission_policy()
        identity = _user("user:default/visitor", "Guests")
        assert policy.handle(_request(READ, ENTITY, "component:default/public-docs"), identity).allowed
        assert not policy.handle(_request(READ, ENTITY, "component:default/payments"), identity).allowed

    def test_no_default_super_admins(self):
        policy = create_rbac_permission_policy()
        assert not policy.handle(_request(READ), _user("user:default/admin")).allowed
