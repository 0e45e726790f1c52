"""Core module - exports key classes and exceptions."""

from prr.core import console
from prr.core.commit_message import (
    compose_commit_message,
    parse_commit_message,
    read_commit_message,
    write_commit_message,
)
from prr.core.config_loader import (
    GitHubCredentials,
    PrrConfig,
    load_config,
    resolve_credentials,
)
from prr.core.exceptions import (
    CommitMessageError,
    ConfigurationError,
    EditorError,
    PreconditionError,
    PrrError,
    StageError,
    UserAbortError,
)
from prr.core.repo import determine_git_repo, parse_remote_url
from prr.core.tickets import ExtractionResult, extract_tickets, ticket_id

__all__ = [
    # Modules
    "console",
    # Commit message
    "compose_commit_message",
    "parse_commit_message",
    "read_commit_message",
    "write_commit_message",
    # Configuration
    "GitHubCredentials",
    "PrrConfig",
    "load_config",
    "resolve_credentials",
    "determine_git_repo",
    "parse_remote_url",
    # Tickets
    "ExtractionResult",
    "extract_tickets",
    "ticket_id",
    # Exceptions
    "CommitMessageError",
    "ConfigurationError",
    "EditorError",
    "PreconditionError",
    "PrrError",
    "StageError",
    "UserAbortError",
]
