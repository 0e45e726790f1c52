"""Interactive Acceptance Loop.

Edit the commit message, show it back together with the commits, tickets
and diff link, and ask whether it is ok. Repeat until the user accepts or
quits::

    EDITING -> AWAITING_ANSWER -> ACCEPTED
       ^             |
       +---- edit ---+---- quit / prompt failure ----> ABORTED
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from rich.console import Console

from .commit_message import read_commit_message
from .context import PullRequestContext
from .editor import edit_file
from .exceptions import UserAbortError

logger = logging.getLogger(__name__)

QUESTION = "Is this commit message ok? (y)es / (e)dit / (q)uit"

ACCEPT_ANSWERS = frozenset({"y", "yes"})
EDIT_ANSWERS = frozenset({"e", "edit"})
QUIT_ANSWERS = frozenset({"q", "quit"})


class LoopState(Enum):
    """States of the acceptance loop."""

    EDITING = "editing"
    AWAITING_ANSWER = "awaiting_answer"
    ACCEPTED = "accepted"
    ABORTED = "aborted"


@dataclass
class AcceptedMessage:
    """The commit title and body the user agreed to."""

    title: str
    body: str


def ask_user(question: str) -> str:
    """Read an answer from stdin."""
    return input(f"{question} ")


class AcceptanceLoop:
    """Drives the edit / review / confirm cycle for one commit message file."""

    def __init__(
        self,
        context: PullRequestContext,
        path: Path,
        editor: Callable[[Path], None] = edit_file,
        ask: Callable[[str], str] = ask_user,
        console: Console | None = None,
    ) -> None:
        """Initialize the loop.

        Args:
            context: The gathered PR state, used for the review screen.
            path: The commit message scratch file.
            editor: Called with the path, must block until editing is done.
            ask: Called with the question, returns the raw answer. May raise
                EOFError or KeyboardInterrupt.
            console: Where the review screen is printed.
        """
        self.context = context
        self.path = path
        self.editor = editor
        self.ask = ask
        self.console = console or Console(highlight=False)
        self.state = LoopState.EDITING
        self.title = ""
        self.body = ""

    def run(self) -> AcceptedMessage:
        """Run until accepted.

        Returns:
            The accepted title and body.

        Raises:
            UserAbortError: If the user quits or the prompt fails.
            EditorError: If the editor fails.
            CommitMessageError: If the file cannot be read back.
        """
        while True:
            if self.state == LoopState.EDITING:
                self.editor(self.path)
                self.title, self.body = read_commit_message(self.path)
                self.state = LoopState.AWAITING_ANSWER
            elif self.state == LoopState.AWAITING_ANSWER:
                self.present()
                self.state = self._next_state(self._prompt())
            elif self.state == LoopState.ACCEPTED:
                logger.debug("commit message has been accepted")
                return AcceptedMessage(title=self.title, body=self.body)
            else:
                raise UserAbortError()

    def _prompt(self) -> str | None:
        """Ask until a recognised answer is given; None if the prompt fails."""
        while True:
            try:
                answer = self.ask(QUESTION)
            except (EOFError, KeyboardInterrupt):
                logger.debug("prompt failed, treating as quit")
                return None
            answer = answer.strip().lower()
            if answer in ACCEPT_ANSWERS | EDIT_ANSWERS | QUIT_ANSWERS:
                return answer
            self.console.print("Please answer y, e or q.")

    @staticmethod
    def _next_state(answer: str | None) -> LoopState:
        if answer in ACCEPT_ANSWERS:
            return LoopState.ACCEPTED
        if answer in EDIT_ANSWERS:
            return LoopState.EDITING
        return LoopState.ABORTED

    def _verbatim(self, text: str) -> None:
        """Print user-authored text exactly as it will be merged."""
        self.console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True)

    def present(self) -> None:
        """Print the commit message and its context."""
        ctx = self.context
        out = self.console
        self._verbatim(f"Commit message for {ctx.target} is:")
        out.print("---------")
        self._verbatim(self.title)
        if self.body:
            # GitHub ignores a trailing newline, don't alarm the user with it
            body = self.body[:-1] if self.body.endswith("\n") else self.body
            self._verbatim(body)
        out.print("---------")
        out.print("Commits in this pull request:")
        for commit in ctx.commits:
            self._verbatim(f"  {commit.sha} {commit.subject}")
        self._verbatim(f"Review the changes at {ctx.diff_url}")
        if ctx.tickets:
            tickets = ", ".join(ctx.tickets)
            self._verbatim(f"This commit contains the following tickets: {tickets}")
