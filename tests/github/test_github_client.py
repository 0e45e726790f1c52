"""Comprehensive tests for the GitHub REST client."""

import base64
import json

import httpx
import pytest

from prr.core.config_loader import GitHubCredentials
from prr.github.client import GitHubClient, IssueEvent, PullRequest
from prr.github.exceptions import (
    GitHubAuthError,
    GitHubConnectionError,
    GitHubError,
    GitHubMergeError,
    GitHubNotFoundError,
    GitHubTimeoutError,
)
from tests.conftest import make_commit, make_pr

REPO = "joyent/node-prr"


def client_for(handler) -> GitHubClient:
    return GitHubClient(
        GitHubCredentials(user="merger", token="t0ken"), transport=httpx.MockTransport(handler)
    )


# =============================================================================
# Model Tests
# =============================================================================


class TestModels:
    """Tests for building models from API payloads."""

    def test_pull_request_from_api(self):
        pr = PullRequest.from_api(make_pr(number=5, title="T", body="B", login="sam"))
        assert (pr.number, pr.title, pr.body, pr.state, pr.user_login) == (5, "T", "B", "open", "sam")

    def test_event_without_actor_or_label(self):
        """Test events from deleted accounts and non-label events."""
        event = IssueEvent.from_api({"event": "closed", "actor": None})
        assert event.actor_login is None
        assert event.label_name is None


# =============================================================================
# Request Handling Tests
# =============================================================================


class TestRequests:
    """Tests for authentication and error translation."""

    def test_basic_auth_and_headers(self, fake_github, github_client):
        fake_github.add("GET", f"/repos/{REPO}/pulls/1", make_pr(number=1))
        github_client.get_pull_request(REPO, 1)

        (request,) = fake_github.requests
        expected = base64.b64encode(b"merger:test-token-12345").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        assert request.headers["Accept"] == "application/vnd.github+json"

    @pytest.mark.parametrize(
        "status,error_class",
        [
            (401, GitHubAuthError),
            (403, GitHubAuthError),
            (404, GitHubNotFoundError),
            (422, GitHubError),
            (500, GitHubError),
        ],
    )
    def test_error_statuses(self, fake_github, github_client, status, error_class):
        fake_github.add("GET", f"/repos/{REPO}/pulls/1", {"message": "nope"}, status=status)

        with pytest.raises(error_class) as exc_info:
            github_client.get_pull_request(REPO, 1)

        assert exc_info.value.status_code == status
        assert "nope" in str(exc_info.value)

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with client_for(handler) as client, pytest.raises(GitHubTimeoutError):
            client.get_user("alice")

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with client_for(handler) as client, pytest.raises(GitHubConnectionError):
            client.get_user("alice")


# =============================================================================
# Pagination Tests
# =============================================================================


class TestPagination:
    """Tests for following Link rel="next"."""

    def test_follows_next_links(self):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            page = request.url.params.get("page", "1")
            if page == "1":
                next_url = f"https://api.github.com/repos/{REPO}/pulls/3/commits?per_page=100&page=2"
                return httpx.Response(
                    200,
                    json=[make_commit("a", "one"), make_commit("b", "two")],
                    headers={"Link": f'<{next_url}>; rel="next"'},
                )
            return httpx.Response(200, json=[make_commit("c", "three")])

        with client_for(handler) as client:
            commits = client.list_pull_request_commits(REPO, 3)

        assert [c.sha for c in commits] == ["a", "b", "c"]
        assert "per_page=100" in seen[0]
        assert seen[1].endswith("page=2")

    def test_reviews_and_events(self, fake_github, github_client):
        fake_github.add(
            "GET", f"/repos/{REPO}/pulls/4/reviews", [{"user": {"login": "bob"}, "state": "APPROVED"}]
        )
        fake_github.add(
            "GET",
            f"/repos/{REPO}/issues/4/events",
            [{"event": "labeled", "actor": {"login": "carol"}, "label": {"name": "integration-approval"}}],
        )

        reviews = github_client.list_pull_request_reviews(REPO, 4)
        events = github_client.list_issue_events(REPO, 4)

        assert [r.user_login for r in reviews] == ["bob"]
        assert events[0].actor_login == "carol"
        assert events[0].label_name == "integration-approval"

    def test_non_list_page(self, fake_github, github_client):
        fake_github.add("GET", f"/repos/{REPO}/pulls/4/reviews", {"message": "odd"})
        with pytest.raises(GitHubError):
            github_client.list_pull_request_reviews(REPO, 4)


# =============================================================================
# Merge Tests
# =============================================================================


class TestSquashMerge:
    """Tests for GitHubClient.squash_merge()."""

    MERGE_PATH = f"/repos/{REPO}/pulls/9/merge"

    def test_merged(self, fake_github, github_client):
        fake_github.add("PUT", self.MERGE_PATH, {"merged": True, "message": "ok", "sha": "abc"})

        result = github_client.squash_merge(REPO, 9, "head", "T (#9)", "body\n")

        assert result.merged and result.sha == "abc"
        (request,) = fake_github.calls("PUT", self.MERGE_PATH)
        assert json.loads(request.content) == {
            "merge_method": "squash",
            "sha": "head",
            "commit_title": "T (#9)",
            "commit_message": "body\n",
        }

    def test_not_merged(self, fake_github, github_client):
        fake_github.add("PUT", self.MERGE_PATH, {"merged": False, "message": "nah"})

        with pytest.raises(GitHubMergeError) as exc_info:
            github_client.squash_merge(REPO, 9, "head", "T", "")

        assert str(exc_info.value) == "this pr was not merged: nah"

    @pytest.mark.parametrize("status", [405, 409])
    def test_refused(self, fake_github, github_client, status):
        fake_github.add(
            "PUT", self.MERGE_PATH, {"message": "Pull Request is not mergeable"}, status=status
        )

        with pytest.raises(GitHubMergeError) as exc_info:
            github_client.squash_merge(REPO, 9, "head", "T", "")

        assert "Pull Request is not mergeable" in str(exc_info.value)
        assert exc_info.value.status_code == status
