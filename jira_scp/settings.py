"""Settings resolution: env vars and .env over named profiles in config.toml."""

import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

import tomlkit
import typer
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_PATH = Path.home() / ".config" / "jira-scp" / "config.toml"

# Required for every command that talks to Jira, in the order they are reported.
_REQUIRED = {
    "jira_instance_url": "JIRA_INSTANCE_URL",
    "jira_user_email": "JIRA_USER_EMAIL",
    "jira_api_key": "JIRA_API_KEY",
}


class ScpSettings(BaseSettings):
    # No env prefix: JIRA_INSTANCE_URL etc. are shared with other Jira MCP servers.
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Jira Cloud
    jira_instance_url: str | None = None  # https://example.atlassian.net
    jira_user_email: str | None = None
    jira_api_key: SecretStr | None = None

    # Comma-separated regexes, each with one capturing group for the issue key
    jira_branch_patterns: str | None = None

    # Explicit workspace override, set by some editors when spawning MCP servers
    workspace_folder_paths: str | None = None

    log_level: str = Field(default="INFO", validation_alias="JIRA_SCP_LOG_LEVEL")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Profile values arrive as init kwargs and only act as defaults
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @property
    def jira_base_url(self) -> str:
        return (self.jira_instance_url or "").rstrip("/")


@lru_cache(maxsize=1)
def _load_toml() -> tomlkit.TOMLDocument:
    """Load ~/.config/jira-scp/config.toml, returning empty document if missing."""
    if not CONFIG_PATH.exists():
        return tomlkit.document()
    return tomlkit.load(CONFIG_PATH.open())


def _list_profiles(config: Mapping) -> list[str]:
    # tomlkit Table implements MutableMapping but not dict, so check Mapping
    return [k for k, v in config.items() if isinstance(v, Mapping)]


def missing_required(settings: ScpSettings) -> list[str]:
    """Return env var names of required settings that are unset or blank."""
    missing = []
    for field, env_name in _REQUIRED.items():
        value = getattr(settings, field)
        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        if not value or not str(value).strip():
            missing.append(env_name)
    return missing


def active_profile(profile: str | None = None) -> str | None:
    """Return the profile name in effect, or None when no profile applies.

    Precedence (highest to lowest):
    1. profile argument (--profile CLI flag)
    2. JIRA_SCP_PROFILE env var
    3. default_profile key in ~/.config/jira-scp/config.toml
    4. First profile defined in ~/.config/jira-scp/config.toml
    """
    toml_config = _load_toml()
    return (
        profile
        or os.environ.get("JIRA_SCP_PROFILE")
        or toml_config.get("default_profile")
        or ((_profiles := _list_profiles(toml_config)) and _profiles[0] or None)
    )


def get_settings(profile: str | None = None, *, require_credentials: bool = True) -> ScpSettings:
    """Resolve the active profile and return a fully populated ScpSettings.

    Values from the profile table are defaults only; env vars and .env win.
    Exits with status 1 when the profile is unknown or, unless
    require_credentials is False, when any Jira credential is missing.
    """
    toml_config = _load_toml()
    active = active_profile(profile)

    profile_defaults: dict = {}
    if active:
        if active in toml_config and isinstance(toml_config[active], Mapping):
            profile_defaults = dict(toml_config[active])
        else:
            profiles = _list_profiles(toml_config)
            typer.echo(
                f"Profile '{active}' not found in {CONFIG_PATH}. Available: {profiles or '(none)'}",
                err=True,
            )
            raise typer.Exit(1)

    settings = ScpSettings(**profile_defaults)

    if require_credentials:
        missing = missing_required(settings)
        if missing:
            typer.echo(
                f"Missing required Jira configuration: {', '.join(missing)}. Set them in the "
                f"environment, in .env, or in the [{active or 'profile'}] section of {CONFIG_PATH}",
                err=True,
            )
            raise typer.Exit(1)

    return settings
