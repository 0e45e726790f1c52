"""Pytest configuration and fixtures for prr tests."""

from collections.abc import Generator
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Any

import httpx
import pytest

from prr.core.config_loader import GitHubCredentials, PrrConfig
from prr.github.client import GitHubClient

# =============================================================================
# Directory and File Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty directory and clear credential env vars."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "GITHUB_USER",
        "GITHUB_API_TOKEN",
        "GITHUB_API_TOKEN_FILE",
        "PRR_CONFIG",
        "PRR_APPROVAL_LABEL",
        "GITHUB_API_URL",
        "GITREPO",
        "TRACE",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def git_checkout(temp_dir: Path) -> Path:
    """Create a fake git checkout whose origin is joyent/node-prr."""
    repo = temp_dir / "checkout"
    (repo / ".git").mkdir(parents=True)
    (repo / ".git" / "config").write_text(
        "[core]\n"
        "\trepositoryformatversion = 0\n"
        "\tbare = false\n"
        '[remote "origin"]\n'
        "\turl = git@github.com:joyent/node-prr.git\n"
        "\tfetch = +refs/heads/*:refs/remotes/origin/*\n"
    )
    return repo


# =============================================================================
# GitHub API Payloads
# =============================================================================


def make_pr(
    number: int = 42,
    title: str = "TRITON-1 fix the thing",
    body: str | None = None,
    state: str = "open",
    login: str = "submitter",
) -> dict[str, Any]:
    return {
        "number": number,
        "title": title,
        "body": body,
        "state": state,
        "merged": False,
        "user": {"login": login},
        "html_url": f"https://github.com/joyent/node-prr/pull/{number}",
    }


def make_commit(sha: str, message: str) -> dict[str, Any]:
    return {"sha": sha, "commit": {"message": message}}


def make_review(login: str, state: str = "APPROVED") -> dict[str, Any]:
    return {"user": {"login": login}, "state": state}


def make_event(event: str, actor: str, label: str = "integration-approval") -> dict[str, Any]:
    return {"event": event, "actor": {"login": actor}, "label": {"name": label}}


def make_user(login: str, name: str | None = None, email: str | None = None) -> dict[str, Any]:
    return {"login": login, "name": name, "email": email}


# =============================================================================
# Fake GitHub API
# =============================================================================


class FakeGitHub:
    """Routes (method, path) to canned JSON responses and records requests."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, json: Any = None, status: int = 200) -> None:
        self.routes[(method, path)] = (status, json)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        status, body = route
        return httpx.Response(status, json=body)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def add_pull_request(
        self,
        pr: dict[str, Any],
        commits: list[dict[str, Any]] | None = None,
        reviews: list[dict[str, Any]] | None = None,
        events: list[dict[str, Any]] | None = None,
        repo: str = "joyent/node-prr",
    ) -> None:
        base = f"/repos/{repo}"
        number = pr["number"]
        self.add("GET", f"{base}/pulls/{number}", pr)
        self.add("GET", f"{base}/pulls/{number}/commits", commits or [])
        self.add("GET", f"{base}/pulls/{number}/reviews", reviews or [])
        self.add("GET", f"{base}/issues/{number}/events", events or [])

    def add_user(self, login: str, name: str | None = None, email: str | None = None) -> None:
        self.add("GET", f"/users/{login}", make_user(login, name, email))


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Provide an empty fake GitHub API."""
    return FakeGitHub()


@pytest.fixture
def credentials() -> GitHubCredentials:
    """Provide test credentials."""
    return GitHubCredentials(user="merger", token="test-token-12345")


@pytest.fixture
def github_client(
    fake_github: FakeGitHub, credentials: GitHubCredentials
) -> Generator[GitHubClient, None, None]:
    """Provide a GitHubClient talking to the fake API."""
    client = GitHubClient(credentials, transport=httpx.MockTransport(fake_github.handler))
    yield client
    client.close()


@pytest.fixture
def prr_config() -> PrrConfig:
    """Provide a config with one email override."""
    return PrrConfig(userEmail={"bob": "bob@example.com"})
