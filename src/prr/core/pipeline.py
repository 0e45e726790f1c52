"""Merge Pipeline - run the prr stages in order and squash-merge the PR.

Stages run strictly one after another. Any GitHub failure while gathering
aborts the run with a StageError naming the stage. The commit message
scratch file is deleted on every exit path, and the merge endpoint is only
called once the acceptance loop has accepted a message.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from rich.console import Console

from ..github.client import GitHubClient, MergeResult
from ..github.exceptions import GitHubError
from . import console
from .acceptance import AcceptanceLoop, ask_user
from .commit_message import compose_commit_message, write_commit_message
from .config_loader import PrrConfig
from .contacts import ContactResolver
from .context import PullRequestContext
from .editor import edit_file
from .exceptions import PreconditionError, StageError
from .gatherer import PullRequestGatherer

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MergePipeline:
    """Gathers PR state, stages the commit message and merges."""

    def __init__(
        self,
        client: GitHubClient,
        config: PrrConfig,
        all_lines: bool = False,
        editor: Callable[[Path], None] = edit_file,
        ask: Callable[[str], str] = ask_user,
        output: Console | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            client: Authenticated GitHub client.
            config: Loaded prr configuration.
            all_lines: Include every commit line, not only ticket lines.
            editor: Editor callback handed to the acceptance loop.
            ask: Prompt callback handed to the acceptance loop.
            output: Console the acceptance loop prints to.
        """
        self.client = client
        self.config = config
        self.gatherer = PullRequestGatherer(
            client, approval_label=config.approval_label, all_lines=all_lines
        )
        self.contacts = ContactResolver(client, user_email=config.user_email)
        self.editor = editor
        self.ask = ask
        self.output = output

    @staticmethod
    def _stage(name: str, ctx: PullRequestContext, func: Callable[[], T]) -> T:
        logger.debug("stage: %s", name)
        try:
            return func()
        except GitHubError as e:
            raise StageError(name, ctx.target, e) from e

    def gather(self, ctx: PullRequestContext) -> None:
        """Run every read-only stage, filling in ctx."""
        console.info(f"Gathering commit information for {ctx.target}")

        self._stage("gather pull request properties", ctx, lambda: self.gatherer.gather_props(ctx))
        if ctx.state != "open":
            raise PreconditionError(f"Cannot merge a PR that is in state '{ctx.state}'")

        self._stage("gather commits", ctx, lambda: self.gatherer.gather_commits(ctx))
        if not ctx.last_commit:
            raise PreconditionError(f"{ctx.target} has no commits to merge")
        console.detail(f"{len(ctx.commits)} commit(s), {len(ctx.tickets)} ticket(s)")

        self._stage("get reviewer usernames", ctx, lambda: self.gatherer.gather_reviewers(ctx))
        if not ctx.reviewers:
            console.warning(f"{ctx.target} has no reviews")
        ctx.reviewer_contacts = self._stage(
            "get reviewer details", ctx, lambda: self.contacts.resolve_many(ctx.reviewers)
        )

        self._stage("get approver username", ctx, lambda: self.gatherer.gather_approver(ctx))
        if ctx.approver:
            approver_contacts = self._stage(
                "get approver details", ctx, lambda: self.contacts.resolve_many([ctx.approver])
            )
            ctx.approver_contact = approver_contacts[ctx.approver]
        else:
            console.warning(f"No '{self.config.approval_label}' label on {ctx.target}")

        if ctx.submitter:
            ctx.submitter_contact = self._stage(
                "get submitter details", ctx, lambda: self.contacts.resolve(ctx.submitter)
            )

    def run(self, ctx: PullRequestContext) -> MergeResult:
        """Gather, let the user settle the commit message, then merge.

        Raises:
            StageError: If a GitHub read fails.
            PreconditionError: If the PR is not open or has no commits.
            UserAbortError: If the user quits the acceptance loop.
            GitHubMergeError: If GitHub does not merge the PR.
        """
        self.gather(ctx)

        text = compose_commit_message(
            ctx.title,
            ctx.pr_number,
            ctx.messages,
            ctx.reviewer_contacts,
            ctx.approver_contact,
        )
        ctx.commit_message_path = write_commit_message(text)
        try:
            loop = AcceptanceLoop(
                ctx, ctx.commit_message_path, editor=self.editor, ask=self.ask, console=self.output
            )
            accepted = loop.run()
            ctx.final_title = accepted.title
            ctx.final_body = accepted.body
            result = self.client.squash_merge(
                ctx.repo, ctx.pr_number, ctx.last_commit, accepted.title, accepted.body
            )
        finally:
            ctx.commit_message_path.unlink(missing_ok=True)
            logger.debug("removed %s", ctx.commit_message_path)

        console.success(result.message or f"Merged {ctx.target}")
        return result
