"""Pull Request State Gatherer - reduce GitHub API data to merge inputs."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..github.client import GitHubClient, IssueEvent, Review
from .config_loader import DEFAULT_APPROVAL_LABEL
from .context import PullRequestContext
from .tickets import extract_tickets, ticket_id

logger = logging.getLogger(__name__)


def reviewer_logins(reviews: Iterable[Review], submitter: str | None) -> list[str]:
    """Distinct review authors in review order, without the submitter."""
    logins: dict[str, None] = {}
    for review in reviews:
        if review.user_login and review.user_login != submitter:
            logins[review.user_login] = None
    return list(logins)


def resolve_approver(
    events: Iterable[IssueEvent],
    submitter: str | None,
    label: str = DEFAULT_APPROVAL_LABEL,
) -> str | None:
    """Find who currently grants approval through the approval label.

    Events are walked in order: labeling records the actor, unlabeling by
    anyone clears it. If userA grants approval and userB revokes it there is
    no approver. Events by the submitter are ignored, so a submitter can
    neither approve nor revoke their own PR.
    """
    approver = None
    for event in events:
        if event.actor_login == submitter or event.label_name != label:
            continue
        if event.event == "labeled":
            approver = event.actor_login
        elif event.event == "unlabeled":
            approver = None
    return approver


class PullRequestGatherer:
    """Fetches PR properties, commits, reviews and label events."""

    def __init__(
        self,
        client: GitHubClient,
        approval_label: str = DEFAULT_APPROVAL_LABEL,
        all_lines: bool = False,
    ) -> None:
        self.client = client
        self.approval_label = approval_label
        self.all_lines = all_lines

    def gather_props(self, ctx: PullRequestContext) -> None:
        """Fill in submitter, title, description and state."""
        pr = self.client.get_pull_request(ctx.repo, ctx.pr_number)
        ctx.submitter = pr.user_login
        ctx.title = pr.title.strip()
        ctx.description = pr.body
        ctx.state = pr.state
        ctx.html_url = pr.html_url
        ticket = ticket_id(ctx.title)
        if ticket:
            ctx.tickets[ticket] = ctx.title

    def gather_commits(self, ctx: PullRequestContext) -> None:
        """Fill in commits, the last commit sha, tickets and message lines."""
        ctx.commits = self.client.list_pull_request_commits(ctx.repo, ctx.pr_number)
        ctx.last_commit = ctx.commits[-1].sha if ctx.commits else None

        extracted = extract_tickets(
            ctx.title,
            ctx.description,
            [commit.message for commit in ctx.commits],
            all_lines=self.all_lines,
        )
        ctx.tickets.update(extracted.tickets)
        ctx.messages = extracted.messages
        logger.debug("tickets are %s", ctx.tickets)

    def gather_reviewers(self, ctx: PullRequestContext) -> None:
        """Fill in the reviewer logins."""
        reviews = self.client.list_pull_request_reviews(ctx.repo, ctx.pr_number)
        ctx.reviewers = reviewer_logins(reviews, ctx.submitter)
        logger.debug("reviewers are %s", ctx.reviewers)

    def gather_approver(self, ctx: PullRequestContext) -> None:
        """Fill in the approver login, if the approval label is applied."""
        events = self.client.list_issue_events(ctx.repo, ctx.pr_number)
        ctx.approver = resolve_approver(events, ctx.submitter, self.approval_label)
        logger.debug("approver is %s", ctx.approver)
