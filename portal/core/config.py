from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    # App
    app_name: str = "Developer Portal Permissions"
    debug: bool = False

    # Application config files holding the permission.rbac section,
    # comma separated, lowest precedence first
    app_config_paths: str = ""

    @property
    def app_config_paths_list(self) -> list[str]:
        return [path.strip() for path in self.app_config_paths.split(",") if path.strip()]

    # Logging
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="PORTAL_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"  # Allow extra env vars without raising validation errors
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
