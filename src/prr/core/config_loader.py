"""Configuration Loader - ~/.prrconfig, environment overrides and credentials.

The configuration is loaded once by the CLI and passed explicitly to every
component that needs it. Nothing here caches state at module level.

~/.prrconfig is a JSON document::

    {
        "gitHubUser": "timfoster",
        "gitHubApiTokenFile": "~/.github-api-token",
        "userEmail": {"someuser": "someuser@example.com"},
        "approvalLabel": "integration-approval"
    }

Environment Variable Overrides:
- PRR_CONFIG -> alternate path for ~/.prrconfig
- PRR_APPROVAL_LABEL -> config.approval_label
- GITHUB_API_URL -> config.api_url

Credential precedence (user and token resolved independently):
- user: $GITHUB_USER, gitHubUser, github.user in ~/.gitconfig
- token: $GITHUB_API_TOKEN, file named by $GITHUB_API_TOKEN_FILE,
  gitHubApiTokenFile, github.token in ~/.gitconfig, ~/.github-api-token
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError
from .repo import parse_git_config

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

CONFIG_FILE_NAME = ".prrconfig"
DEFAULT_TOKEN_FILE = "~/.github-api-token"
DEFAULT_APPROVAL_LABEL = "integration-approval"
DEFAULT_API_URL = "https://api.github.com"

# Format: (env_var_name, config_field)
ENV_VAR_MAPPINGS: list[tuple[str, str]] = [
    ("PRR_APPROVAL_LABEL", "approval_label"),
    ("GITHUB_API_URL", "api_url"),
]


# =============================================================================
# Models
# =============================================================================


class PrrConfig(BaseModel):
    """Settings read from ~/.prrconfig."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    github_user: str | None = Field(default=None, alias="gitHubUser")
    github_api_token_file: str | None = Field(default=None, alias="gitHubApiTokenFile")
    # Some users don't publish an email on their GitHub profile
    user_email: dict[str, str] = Field(default_factory=dict, alias="userEmail")
    approval_label: str = Field(default=DEFAULT_APPROVAL_LABEL, alias="approvalLabel")
    api_url: str = Field(default=DEFAULT_API_URL, alias="apiUrl")


class GitHubCredentials(BaseModel):
    """The account that performs the merge."""

    model_config = ConfigDict(frozen=True)

    user: str
    token: str = Field(repr=False)


# =============================================================================
# Path Utilities
# =============================================================================


def get_config_file_path(environ: Mapping[str, str] | None = None) -> Path:
    """Get the prr configuration file path ($PRR_CONFIG or ~/.prrconfig)."""
    environ = os.environ if environ is None else environ
    override = environ.get("PRR_CONFIG")
    if override:
        return Path(os.path.expanduser(override))
    return Path.home() / CONFIG_FILE_NAME


def get_gitconfig_path() -> Path:
    """Get the user's global git configuration path."""
    return Path.home() / ".gitconfig"


# =============================================================================
# Loading
# =============================================================================


def load_config_from_file(path: Path) -> PrrConfig:
    """Load configuration from a JSON file.

    Raises:
        ConfigurationError: If the file is unreadable, not JSON, or has an
            invalid structure.
    """
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Unable to parse json {path}",
            f"JSON parse error at line {e.lineno}, column {e.colno}: {e.msg}",
        ) from e
    except OSError as e:
        raise ConfigurationError(f"Unable to read {path}", str(e)) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")

    try:
        return PrrConfig.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(loc) for loc in err["loc"]) for err in e.errors())
        raise ConfigurationError(f"{path} has invalid structure", f"Invalid fields: {fields}") from e


def apply_env_overrides(
    config: PrrConfig, environ: Mapping[str, str] | None = None
) -> PrrConfig:
    """Return a copy of config with environment overrides applied."""
    environ = os.environ if environ is None else environ
    updates = {field: environ[var] for var, field in ENV_VAR_MAPPINGS if environ.get(var)}
    if not updates:
        return config
    logger.debug("config overrides from environment: %s", sorted(updates))
    return config.model_copy(update=updates)


def load_config(
    path: Path | None = None, environ: Mapping[str, str] | None = None
) -> PrrConfig:
    """Load ~/.prrconfig (if present) and apply environment overrides."""
    config_path = path or get_config_file_path(environ)
    if config_path.exists():
        logger.debug("loading config from %s", config_path)
        config = load_config_from_file(config_path)
    else:
        logger.debug("no config file at %s, using defaults", config_path)
        config = PrrConfig()
    return apply_env_overrides(config, environ)


# =============================================================================
# Credentials
# =============================================================================


def _read_token_file(path: str) -> str:
    token_path = Path(os.path.expanduser(path))
    try:
        token = token_path.read_text().strip()
    except OSError as e:
        raise ConfigurationError(f"Failed to read {token_path}", str(e)) from e
    if not token:
        raise ConfigurationError(f"Token file {token_path} is empty")
    return token


def _gitconfig_github_section(gitconfig_path: Path) -> dict[str, str]:
    if not gitconfig_path.exists():
        return {}
    return parse_git_config(gitconfig_path).get("github", {})


def resolve_credentials(
    config: PrrConfig,
    environ: Mapping[str, str] | None = None,
    gitconfig_path: Path | None = None,
) -> GitHubCredentials:
    """Work out which GitHub account performs the merge.

    Args:
        config: The loaded prr configuration.
        environ: Environment mapping, defaults to os.environ.
        gitconfig_path: Path to the global git config, defaults to ~/.gitconfig.

    Returns:
        The resolved user and token.

    Raises:
        ConfigurationError: If no user can be found or the token is unreadable.
    """
    environ = os.environ if environ is None else environ
    gitconfig_path = gitconfig_path or get_gitconfig_path()
    github_section: dict[str, str] | None = None

    def from_gitconfig(key: str) -> str | None:
        # only read when the environment and ~/.prrconfig have no answer
        nonlocal github_section
        if github_section is None:
            github_section = _gitconfig_github_section(gitconfig_path)
        return github_section.get(key)

    user = environ.get("GITHUB_USER") or config.github_user or from_gitconfig("user")
    if not user:
        raise ConfigurationError(
            "Unable to determine GitHub username",
            "Set $GITHUB_USER, gitHubUser in ~/.prrconfig or github.user in ~/.gitconfig",
        )

    if environ.get("GITHUB_API_TOKEN"):
        token = environ["GITHUB_API_TOKEN"].strip()
    elif environ.get("GITHUB_API_TOKEN_FILE"):
        token = _read_token_file(environ["GITHUB_API_TOKEN_FILE"])
    elif config.github_api_token_file:
        token = _read_token_file(config.github_api_token_file)
    elif from_gitconfig("token"):
        token = (from_gitconfig("token") or "").strip()
    else:
        token = _read_token_file(DEFAULT_TOKEN_FILE)

    logger.debug("authenticating to GitHub as %s", user)
    return GitHubCredentials(user=user, token=token)
