"""Loads the RBAC policy from the portal's application config.

Reads the ``permission.rbac`` section of an ``app-config.yaml`` style
document::

    permission:
      rbac:
        roles:
          - name: developer
            displayName: Developer
            permissions: [catalog.entity.read]
            resources:
              catalog-entity:
                allow: ["*"]
                deny: ["system-*"]
        userRoles:
          user:default/jane.doe: [developer]
        groupRoles:
          Developers: [developer]
        superAdmins:
          - user:default/admin

A missing section yields the built-in default policy. A malformed section
raises ``PolicyConfigurationError``; no partial policy is ever returned.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from src.common.config import load_configs
from src.common.logger import get_logger

from .models import PolicyConfiguration, ResourceRule, Role
from .roles import default_policy_configuration

logger = get_logger("rbac.loader")


class PolicyConfigurationError(ValueError):
    """Raised when the RBAC section of the config cannot be parsed."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = errors or []
        if self.errors:
            message = f"{message}: " + "; ".join(self.errors)
        super().__init__(message)


# Schemas for the raw config document
class ResourceRuleSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    allow: Optional[List[StrictStr]] = None
    deny: Optional[List[StrictStr]] = None


class RoleSchema(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: StrictStr = Field(..., min_length=1)
    display_name: Optional[StrictStr] = Field(None, alias="displayName")
    description: Optional[StrictStr] = None
    permissions: List[StrictStr]
    resources: Optional[Dict[StrictStr, ResourceRuleSchema]] = None

    def to_role(self) -> Role:
        return Role(
            name=self.name,
            display_name=self.display_name or "",
            description=self.description or "",
            permissions=frozenset(self.permissions),
            resources={
                resource_type: ResourceRule(
                    allow=tuple(rule.allow) if rule.allow is not None else None,
                    deny=tuple(rule.deny) if rule.deny is not None else None,
                )
                for resource_type, rule in (self.resources or {}).items()
            },
        )


class RBACSectionSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    roles: Optional[List[RoleSchema]] = None
    user_roles: Optional[Dict[StrictStr, List[StrictStr]]] = Field(None, alias="userRoles")
    group_roles: Optional[Dict[StrictStr, List[StrictStr]]] = Field(None, alias="groupRoles")
    super_admins: Optional[List[StrictStr]] = Field(None, alias="superAdmins")


def _format_errors(exc: ValidationError) -> List[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"permission.rbac.{location}: {error['msg']}" if location
                        else f"permission.rbac: {error['msg']}")
    return messages


def parse_rbac_section(section: Any) -> PolicyConfiguration:
    """
    Parse a present ``permission.rbac`` section.

    Keys missing from the section fall back to the default policy's value
    for that key.

    Args:
        section: Raw ``permission.rbac`` value

    Returns:
        PolicyConfiguration instance

    Raises:
        PolicyConfigurationError: If the section is malformed
    """
    try:
        parsed = RBACSectionSchema.model_validate(section)
    except ValidationError as exc:
        raise PolicyConfigurationError(
            "Invalid RBAC configuration", _format_errors(exc)
        ) from exc

    defaults = default_policy_configuration()

    if parsed.roles is not None:
        roles = [role.to_role() for role in parsed.roles]
    else:
        roles = list(defaults.roles.values())

    return PolicyConfiguration.from_roles(
        roles=roles,
        user_roles=parsed.user_roles if parsed.user_roles is not None else defaults.user_roles,
        group_roles=parsed.group_roles if parsed.group_roles is not None else defaults.group_roles,
        super_admins=parsed.super_admins if parsed.super_admins is not None else defaults.super_admins,
    )


def load_policy_configuration(app_config: Mapping[str, Any]) -> PolicyConfiguration:
    """
    Build the policy configuration from a parsed application config.

    Args:
        app_config: Full application config dictionary

    Returns:
        PolicyConfiguration instance

    Raises:
        PolicyConfigurationError: If the ``permission`` or ``permission.rbac``
            section is present but malformed
    """
    permission_section = app_config.get("permission")
    if permission_section is not None and not isinstance(permission_section, Mapping):
        raise PolicyConfigurationError(
            "Invalid RBAC configuration",
            [f"permission: expected a mapping, got {type(permission_section).__name__}"],
        )

    rbac_section = (permission_section or {}).get("rbac")
    if rbac_section is None:
        logger.info("No permission.rbac section configured, using default RBAC policy")
        config = default_policy_configuration()
    else:
        config = parse_rbac_section(rbac_section)

    log_policy_summary(config)
    return config


def load_policy_from_files(config_paths: Iterable[str]) -> PolicyConfiguration:
    """
    Load the policy configuration from layered YAML application config files.

    Args:
        config_paths: Config files, lowest precedence first

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
        PolicyConfigurationError: If the RBAC section is malformed
    """
    return load_policy_configuration(load_configs(config_paths))


def log_policy_summary(config: PolicyConfiguration) -> None:
    """Log role and mapping counts, and warn about mappings to unknown roles."""
    logger.info(
        "RBAC configuration loaded: %d roles, %d user mappings, "
        "%d group mappings, %d super admins",
        len(config.roles),
        len(config.user_roles),
        len(config.group_roles),
        len(config.super_admins),
    )

    unknown = config.unknown_role_references()
    if unknown:
        logger.warning(
            "RBAC mappings reference undefined roles (ignored): %s",
            ", ".join(unknown),
        )
