"""Repository Locator - find the GitHub "owner/repo" of a local checkout."""

from __future__ import annotations

import configparser
import logging
import os
from pathlib import Path
from urllib.parse import urlparse

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ORIGIN_SECTION = 'remote "origin"'


def parse_git_config(path: Path) -> dict[str, dict[str, str]]:
    """Parse a git config file into ``{section: {key: value}}``.

    Git indents keys with tabs, which configparser would treat as
    continuation lines, so every line is stripped before parsing. Section
    names keep git's subsection quoting, e.g. ``remote "origin"``.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        text = path.read_text()
    except OSError as e:
        raise ConfigurationError(f"Unable to read {path}", str(e)) from e

    parser = configparser.ConfigParser(
        delimiters=("=",), strict=False, interpolation=None, allow_no_value=True
    )
    try:
        parser.read_string("\n".join(line.strip() for line in text.splitlines()), source=str(path))
    except configparser.Error as e:
        raise ConfigurationError(f"Unable to parse git config {path}", str(e)) from e

    return {
        section: {key: (value or "") for key, value in parser.items(section)}
        for section in parser.sections()
    }


def parse_remote_url(url: str) -> str:
    """Turn a remote url into "owner/repo".

    Handles scp-like shorthand (``git@github.com:owner/repo.git``) and url
    forms (``https://github.com/owner/repo``, ``ssh://git@host/owner/repo.git``).
    """
    url = url.strip().rstrip("/")
    if "://" not in url and ":" in url:
        path = url.split(":", 1)[1]
    else:
        path = urlparse(url).path

    segments = [segment for segment in path.split("/") if segment]
    if len(segments) < 2:
        raise ConfigurationError(f"Unable to determine owner/repo from remote url '{url}'")

    owner, name = segments[-2], segments[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return f"{owner}/{name}"


def resolve_repo_path(repo_path: str | Path | None = None) -> Path:
    """Pick the checkout to act on: argument, then $GITREPO, then cwd."""
    if not repo_path:
        repo_path = os.environ.get("GITREPO") or os.getcwd()
    return Path(os.path.expanduser(str(repo_path)))


def determine_git_repo(repo_path: str | Path | None = None) -> str:
    """Compute the "owner/repo" string for a local git checkout.

    Args:
        repo_path: Path to the checkout. Falls back to $GITREPO, then the
            current directory.

    Returns:
        The GitHub "owner/repo" string taken from the origin remote.

    Raises:
        ConfigurationError: If there is no git config or no origin url.
    """
    cfg_path = resolve_repo_path(repo_path) / ".git" / "config"
    if not cfg_path.exists():
        raise ConfigurationError(
            f"{cfg_path} does not exist",
            "-C, $GITREPO or the current directory should point to a git repository",
        )

    git_config = parse_git_config(cfg_path)
    url = git_config.get(ORIGIN_SECTION, {}).get("url")
    if not url:
        raise ConfigurationError(f"Unable to determine git origin for {cfg_path}")

    repo = parse_remote_url(url)
    logger.debug("origin %s resolves to %s", url, repo)
    return repo
