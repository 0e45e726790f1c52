"""GitHub Exception Classes - All GitHub-related exceptions."""


class GitHubError(Exception):
    """Base exception for GitHub REST operations."""

    def __init__(
        self, message: str, url: str | None = None, status_code: int | None = None
    ):
        super().__init__(message)
        self.message = message
        self.url = url
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class GitHubTimeoutError(GitHubError):
    """Raised when a GitHub API request times out."""

    pass


class GitHubConnectionError(GitHubError):
    """Raised when the GitHub API cannot be reached."""

    pass


class GitHubAuthError(GitHubError):
    """Raised when GitHub rejects our credentials (401/403)."""

    pass


class GitHubNotFoundError(GitHubError):
    """Raised when a repository, pull request or user does not exist."""

    pass


class GitHubMergeError(GitHubError):
    """Raised when the merge endpoint reports the PR was not merged."""

    pass
