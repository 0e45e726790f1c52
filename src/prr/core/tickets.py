"""Ticket/Message Extractor.

Scans the PR title, its description and the commit messages for lines that
start with a ticket identifier, either a JIRA-style project key
(``TRITON-123 fix the thing``) or a cross-repo GitHub reference
(``joyent/node-prr#4 fix the thing``), and builds the list of lines that go
into the squashed commit body.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

# Expected at the beginning of the line, followed by a space
PROJECT_TICKET_RE = re.compile(r"^[A-Z]+-[0-9]+ ")
CROSS_REPO_TICKET_RE = re.compile(r"^[A-Za-z0-9_-]+/[A-Za-z0-9_-]+#[0-9]+ ")

# Checked in order, the first match classifies the line
TICKET_PATTERNS: tuple[re.Pattern[str], ...] = (PROJECT_TICKET_RE, CROSS_REPO_TICKET_RE)


@dataclass
class ExtractionResult:
    """Tickets and candidate commit message lines found in a PR."""

    tickets: dict[str, str] = field(default_factory=dict)
    messages: list[str] = field(default_factory=list)


def ticket_id(line: str) -> str | None:
    """Return the ticket identifier a line starts with, or None."""
    for pattern in TICKET_PATTERNS:
        match = pattern.match(line)
        if match:
            return match.group(0).rstrip()
    return None


def extract_tickets(
    title: str,
    description: str | None,
    commit_messages: Iterable[str],
    all_lines: bool = False,
) -> ExtractionResult:
    """Collect tickets and commit message lines from a pull request.

    Args:
        title: The PR title.
        description: The PR description, may be None or empty.
        commit_messages: Full commit messages, oldest first.
        all_lines: Keep every commit line, not only ticket-bearing ones.

    Returns:
        The ticket map (identifier -> last line seen for it) and the
        ordered message lines.
    """
    result = ExtractionResult()

    def record(line: str) -> bool:
        ticket = ticket_id(line)
        if ticket is None:
            return False
        result.tickets[ticket] = line.strip()
        return True

    # title and description only contribute tickets
    record(title)
    for line in (description or "").splitlines():
        record(line)

    for message in commit_messages:
        for line in message.split("\n"):
            if record(line) or all_lines:
                result.messages.append(line.strip())

    # the PR title is often duplicated as the first commit's subject. Only
    # that leading pair is collapsed, later repeats are kept as written.
    if len(result.messages) >= 2 and result.messages[0] == result.messages[1]:
        del result.messages[0]

    return result
