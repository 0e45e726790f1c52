"""Commit Message Composer and Reader.

The squashed commit message is staged in a scratch file in standard git
form::

    <title> (#<pr number>)

    <ticket lines / commit lines>
    Reviewed by: First Last <email>
    Approved by: First Last <email>
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Mapping, Sequence
from pathlib import Path

from .exceptions import CommitMessageError

logger = logging.getLogger(__name__)


def compose_commit_message(
    title: str,
    pr_number: int,
    messages: Sequence[str],
    reviewer_contacts: Mapping[str, str],
    approver_contact: str | None = None,
) -> str:
    """Build the initial commit message text.

    Args:
        title: The PR title.
        pr_number: The PR number, appended to the title.
        messages: Candidate body lines from the ticket extractor.
        reviewer_contacts: Reviewer login -> contact string.
        approver_contact: Contact string of the approver, if any.

    Returns:
        The commit message, title line first.
    """
    parts = [f"{title} (#{pr_number})\n\n"]

    body = list(messages)
    # PR titles are often the same as the first commit message line
    if body and body[0] == title:
        body = body[1:]
    while body and body[0] == "":
        body = body[1:]
    if body:
        parts.append("\n".join(body) + "\n")

    for login in sorted(reviewer_contacts):
        parts.append(f"Reviewed by: {reviewer_contacts[login]}\n")
    if approver_contact:
        parts.append(f"Approved by: {approver_contact}\n")

    return "".join(parts)


def write_commit_message(text: str) -> Path:
    """Write text to a new scratch file and return its path.

    The file is flushed and closed before returning. The caller owns it and
    is responsible for deleting it.
    """
    try:
        with tempfile.NamedTemporaryFile(
            "w", prefix="prr-", suffix=".txt", delete=False, encoding="utf-8"
        ) as f:
            f.write(text)
            f.flush()
            path = Path(f.name)
    except OSError as e:
        raise CommitMessageError("Unable to write commit message file", str(e)) from e
    logger.debug("commit message is at %s", path)
    return path


def parse_commit_message(text: str) -> tuple[str, str]:
    """Split commit message text into (title, body).

    The first line is the title. A single blank line after it is the
    separator and is dropped; everything after it is the body.
    """
    lines = text.split("\n")
    title = lines[0]
    rest = lines[1:]
    if rest and rest[0] == "":
        rest = rest[1:]
    return title, "\n".join(rest)


def read_commit_message(path: Path) -> tuple[str, str]:
    """Read a commit message file back as (title, body)."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CommitMessageError(f"Unable to read commit message from {path}", str(e)) from e
    return parse_commit_message(text)
