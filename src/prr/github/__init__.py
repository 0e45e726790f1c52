"""GitHub integration module.

This module provides the REST API access prr needs to squash-merge a pull
request. The main entry point is GitHubClient.

Module structure:
- client.py: GitHubClient, the response models and pagination
- exceptions.py: All GitHub-related exception classes
"""

from .client import (
    DEFAULT_GITHUB_TIMEOUT,
    CommitRecord,
    GitHubClient,
    GitHubUser,
    IssueEvent,
    MergeResult,
    PullRequest,
    Review,
)
from .exceptions import (
    GitHubAuthError,
    GitHubConnectionError,
    GitHubError,
    GitHubMergeError,
    GitHubNotFoundError,
    GitHubTimeoutError,
)

__all__ = [
    "DEFAULT_GITHUB_TIMEOUT",
    "CommitRecord",
    "GitHubAuthError",
    "GitHubClient",
    "GitHubConnectionError",
    "GitHubError",
    "GitHubMergeError",
    "GitHubNotFoundError",
    "GitHubTimeoutError",
    "GitHubUser",
    "IssueEvent",
    "MergeResult",
    "PullRequest",
    "Review",
]
