"""GitHub Integration Layer - REST API access for pull request merging."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel

from ..core.config_loader import DEFAULT_API_URL, GitHubCredentials
from .exceptions import (
    GitHubAuthError,
    GitHubConnectionError,
    GitHubError,
    GitHubMergeError,
    GitHubNotFoundError,
    GitHubTimeoutError,
)

logger = logging.getLogger(__name__)

# Default timeout for GitHub API requests (30 seconds)
DEFAULT_GITHUB_TIMEOUT = 30.0
# Largest page size the REST API accepts
PER_PAGE = 100


# =============================================================================
# Models
# =============================================================================


class PullRequest(BaseModel):
    """The pull request properties prr cares about."""

    number: int
    title: str
    body: str | None = None
    state: str  # open, closed
    merged: bool = False
    user_login: str
    html_url: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> PullRequest:
        return cls(
            number=data["number"],
            title=data.get("title") or "",
            body=data.get("body"),
            state=data["state"],
            merged=bool(data.get("merged", False)),
            user_login=data["user"]["login"],
            html_url=data.get("html_url"),
        )


class CommitRecord(BaseModel):
    """A commit pushed as part of a pull request."""

    sha: str
    message: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> CommitRecord:
        return cls(sha=data["sha"], message=data["commit"]["message"])

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]


class Review(BaseModel):
    """A review left on a pull request."""

    user_login: str | None
    state: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Review:
        user = data.get("user") or {}
        return cls(user_login=user.get("login"), state=data.get("state"))


class IssueEvent(BaseModel):
    """An entry in the issue events stream (labeled, unlabeled, closed...)."""

    event: str
    actor_login: str | None = None
    label_name: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> IssueEvent:
        # actor is null for deleted accounts
        actor = data.get("actor") or {}
        label = data.get("label") or {}
        return cls(event=data["event"], actor_login=actor.get("login"), label_name=label.get("name"))


class GitHubUser(BaseModel):
    """Public profile of a GitHub account."""

    login: str
    name: str | None = None
    email: str | None = None


class MergeResult(BaseModel):
    """Response of the merge endpoint."""

    merged: bool
    message: str = ""
    sha: str | None = None


# =============================================================================
# Client
# =============================================================================


class GitHubClient:
    """Handles all GitHub operations through the REST API."""

    def __init__(
        self,
        credentials: GitHubCredentials,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_GITHUB_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize GitHub client.

        Args:
            credentials: User and token used for basic auth.
            api_url: Base url of the REST API.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.api_url = api_url
        self.timeout = timeout
        self._client = httpx.Client(
            base_url=api_url,
            auth=(credentials.user, credentials.token),
            headers={
                "Accept": "application/vnd.github+json",
                "User-Agent": "prr",
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._client.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Transport helpers
    # -------------------------------------------------------------------------

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, translating transport and HTTP failures.

        Raises:
            GitHubTimeoutError: If the request times out.
            GitHubConnectionError: If the API cannot be reached.
            GitHubAuthError: On 401/403.
            GitHubNotFoundError: On 404.
            GitHubError: On any other non-success status.
        """
        logger.debug("%s %s", method, url)
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise GitHubTimeoutError(
                f"Request timed out after {self.timeout}s: {method} {url}", url=url
            ) from e
        except httpx.RequestError as e:
            raise GitHubConnectionError(f"Failed to connect to {self.api_url}: {e}", url=url) from e

        if response.status_code >= 400:
            self._raise_for_status(response, url)
        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text[:200] or f"HTTP error {response.status_code}"
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return f"HTTP error {response.status_code}"

    def _raise_for_status(self, response: httpx.Response, url: str) -> None:
        status = response.status_code
        message = f"{self._error_message(response)} (HTTP {status}: {url})"
        if status in (401, 403):
            raise GitHubAuthError(message, url=url, status_code=status)
        if status == 404:
            raise GitHubNotFoundError(message, url=url, status_code=status)
        raise GitHubError(message, url=url, status_code=status)

    def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        return self._request("GET", url, params=params).json()

    def _get_paginated(self, url: str) -> list[dict[str, Any]]:
        """GET every page of a list endpoint, following Link rel="next"."""
        items: list[dict[str, Any]] = []
        next_url: str | None = url
        params: dict[str, Any] | None = {"per_page": PER_PAGE}
        while next_url:
            response = self._request("GET", next_url, params=params)
            page = response.json()
            if not isinstance(page, list):
                raise GitHubError(f"Expected a list from {next_url}", url=next_url)
            items.extend(page)
            next_url = response.links.get("next", {}).get("url")
            # the next link already carries the query string
            params = None
        return items

    # -------------------------------------------------------------------------
    # Read endpoints
    # -------------------------------------------------------------------------

    def get_pull_request(self, repo: str, pr_number: int) -> PullRequest:
        """Get the properties of a pull request."""
        return PullRequest.from_api(self._get_json(f"/repos/{repo}/pulls/{pr_number}"))

    def list_pull_request_commits(self, repo: str, pr_number: int) -> list[CommitRecord]:
        """List the commits of a pull request, oldest first."""
        data = self._get_paginated(f"/repos/{repo}/pulls/{pr_number}/commits")
        return [CommitRecord.from_api(item) for item in data]

    def list_pull_request_reviews(self, repo: str, pr_number: int) -> list[Review]:
        """List the reviews left on a pull request."""
        data = self._get_paginated(f"/repos/{repo}/pulls/{pr_number}/reviews")
        return [Review.from_api(item) for item in data]

    def list_issue_events(self, repo: str, pr_number: int) -> list[IssueEvent]:
        """List the issue events of a pull request in chronological order."""
        data = self._get_paginated(f"/repos/{repo}/issues/{pr_number}/events")
        return [IssueEvent.from_api(item) for item in data]

    def get_user(self, login: str) -> GitHubUser:
        """Get the public profile of a user."""
        data = self._get_json(f"/users/{login}")
        return GitHubUser(login=data.get("login", login), name=data.get("name"), email=data.get("email"))

    # -------------------------------------------------------------------------
    # Merge
    # -------------------------------------------------------------------------

    def squash_merge(
        self, repo: str, pr_number: int, sha: str, title: str, message: str
    ) -> MergeResult:
        """Squash-merge a pull request.

        Args:
            repo: Repository in owner/name format.
            pr_number: The PR number to merge.
            sha: Head sha the PR must still point at.
            title: Commit title of the squashed commit.
            message: Commit message body of the squashed commit.

        Returns:
            The merge result reported by GitHub.

        Raises:
            GitHubMergeError: If GitHub refuses or does not perform the merge.
        """
        payload = {
            "merge_method": "squash",
            "sha": sha,
            "commit_title": title,
            "commit_message": message,
        }
        logger.debug("merge payload: %s", payload)

        url = f"/repos/{repo}/pulls/{pr_number}/merge"
        try:
            data = self._request("PUT", url, json=payload).json()
        except GitHubError as e:
            # 405 not mergeable, 409 head sha changed
            if e.status_code in (405, 409):
                raise GitHubMergeError(
                    f"this pr was not merged: {e.message}", url=url, status_code=e.status_code
                ) from e
            raise

        logger.debug("merge response: %s", data)
        result = MergeResult(
            merged=bool(data.get("merged")), message=data.get("message") or "", sha=data.get("sha")
        )
        if not result.merged:
            raise GitHubMergeError(f"this pr was not merged: {result.message}", url=url)
        return result
