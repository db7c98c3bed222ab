"""Resolution of the profile URLs that identify a local user."""

from __future__ import annotations

import logging
from typing import Protocol

from thread_notifier.links import is_valid_profile_url, normalise_link, secure_link
from thread_notifier.store import Store

logger = logging.getLogger(__name__)


class ProfileContributor(Protocol):
    """Extension point that may add profile URL candidates for a user."""

    def contribute(self, uid: int, profiles: list[str]) -> None:
        """Append additional candidate URLs for *uid* to *profiles*."""


def resolve_profiles(
    store: Store,
    uid: int,
    base_url: str,
    contributors: list[ProfileContributor] | tuple = (),
) -> frozenset[str]:
    """Return every profile URL that identifies user *uid*.

    Candidates come from the contributors, the user's self contact (url and
    alias) and the nickname based ``<base_url>/u/<nickname>`` form. Invalid
    candidates are dropped; each valid one is added together with its
    normalized and https forms. An unknown user or a user without a self
    contact yields an empty set.
    """
    profiles: list[str] = []
    for contributor in contributors:
        contributor.contribute(uid, profiles)

    user = store.get_user(uid)
    if user is None:
        logger.debug("No user %d; no profiles", uid)
        return frozenset()

    owner = store.get_self_contact(uid)
    if owner is None:
        logger.debug("No self contact for user %d; no profiles", uid)
        return frozenset()

    profiles.append(owner.url)
    profiles.append(owner.alias)
    # Diaspora style profile links
    profiles.append(f"{base_url.rstrip('/')}/u/{user.nickname}")

    resolved: set[str] = set()
    for profile in profiles:
        if not is_valid_profile_url(profile):
            continue
        normalized = normalise_link(profile)
        resolved.update((profile, normalized, secure_link(normalized)))

    return frozenset(resolved)
