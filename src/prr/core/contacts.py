"""Contact Resolver - GitHub logins to "Name <email>" attribution strings."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait

from ..github.client import GitHubClient, GitHubUser

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


def format_contact(user: GitHubUser, user_email: Mapping[str, str] | None = None) -> str:
    """Format a profile as an attribution string.

    One of::

        First Last <email>
        First Last
        login <email>
        login

    An email in user_email wins over the profile email. A login that is
    missing from user_email, or mapped to an empty string, falls back to the
    profile.
    """
    contact = user.name or user.login
    override = (user_email or {}).get(user.login)
    email = override or user.email
    if email:
        contact += f" <{email}>"
    return contact


class ContactResolver:
    """Looks up GitHub profiles and formats them as contacts."""

    def __init__(
        self,
        client: GitHubClient,
        user_email: Mapping[str, str] | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self.client = client
        self.user_email = dict(user_email or {})
        self.max_workers = max_workers

    def resolve(self, login: str) -> str:
        """Get the contact string for one login."""
        contact = format_contact(self.client.get_user(login), self.user_email)
        logger.debug("contact for %s is %s", login, contact)
        return contact

    def resolve_many(self, logins: Iterable[str]) -> dict[str, str]:
        """Resolve several logins concurrently.

        Every lookup runs on its own worker. The join is fail-fast: the first
        failed lookup cancels the ones not yet started and is re-raised.

        Returns:
            Mapping of login to contact string.
        """
        unique = list(dict.fromkeys(logins))
        if not unique:
            return {}

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(unique))) as executor:
            futures = {executor.submit(self.resolve, login): login for login in unique}
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)
            for future in pending:
                future.cancel()
            for future in done:
                error = future.exception()
                if error is not None:
                    raise error
            return {futures[future]: future.result() for future in futures}
