"""PullRequestContext - everything gathered about the PR being merged."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..github.client import CommitRecord


@dataclass
class PullRequestContext:
    """Aggregate state for one prr invocation.

    Created by the CLI with the repo and PR number, then filled in stage by
    stage by the gatherer, the contact resolver and the acceptance loop.
    """

    repo: str
    pr_number: int
    submitter: str | None = None
    title: str = ""
    description: str | None = None
    state: str | None = None
    html_url: str | None = None
    commits: list[CommitRecord] = field(default_factory=list)
    last_commit: str | None = None
    reviewers: list[str] = field(default_factory=list)
    approver: str | None = None
    tickets: dict[str, str] = field(default_factory=dict)
    messages: list[str] = field(default_factory=list)
    submitter_contact: str | None = None
    reviewer_contacts: dict[str, str] = field(default_factory=dict)
    approver_contact: str | None = None
    commit_message_path: Path | None = None
    final_title: str | None = None
    final_body: str | None = None

    @property
    def target(self) -> str:
        """The "owner/repo#123" label used in messages."""
        return f"{self.repo}#{self.pr_number}"

    @property
    def diff_url(self) -> str:
        """Link to the PR's "Files changed" view."""
        base = self.html_url or f"https://github.com/{self.repo}/pull/{self.pr_number}"
        return f"{base}/files"
