"""Thread participation rules for notification classification.

Each ``check_*`` predicate maps to one :class:`NotificationType` flag and is a
single existence query against the conversation graph.
"""

import logging

from thread_notifier.links import normalise_link
from thread_notifier.models import Gravity, Item, NotificationType
from thread_notifier.store import Store

logger = logging.getLogger(__name__)


def check_shared_by_contact(item: Item, store: Store) -> bool:
    """The originating contact asked to be notified about new posts."""
    if item.gravity is not Gravity.POST:
        return False
    return store.contact_notifies_new_posts(item.contact_id)


def check_shared(item: Item, uid: int, store: Store, *, by_contact: bool | None = None) -> bool:
    """Check for a new post the user wants to hear about.

    Either the originating contact has new-post notifications enabled, or the
    post mentions a community of the user that has them enabled. Pass
    *by_contact* to reuse an already computed contact check.
    """
    if item.gravity is not Gravity.POST:
        return False

    if by_contact is None:
        by_contact = check_shared_by_contact(item, store)
    if by_contact:
        return True

    for url in store.mention_tag_urls(item.id, uid):
        if store.community_notifies_new_posts(normalise_link(url), uid):
            return True
    return False


def check_commented_thread(item: Item, contacts, store: Store) -> bool:
    """The user started this thread."""
    return store.item_exists(contacts, Gravity.POST, parent=item.parent)


def check_direct_comment(item: Item, contacts, store: Store) -> bool:
    """The item answers a comment of the user."""
    return store.item_exists(
        contacts, Gravity.COMMENT, uri=item.thr_parent, uid=item.uid
    )


def check_direct_commented_thread(item: Item, contacts, store: Store) -> bool:
    """The item answers the starting post of the user."""
    return store.item_exists(
        contacts, Gravity.POST, uri=item.thr_parent, uid=item.uid
    )


def check_comment_participation(item: Item, contacts, store: Store) -> bool:
    """The user commented somewhere in this thread."""
    return store.item_exists(contacts, Gravity.COMMENT, parent=item.parent)


def check_activity_participation(item: Item, contacts, store: Store) -> bool:
    """The user reacted (like, dislike, ...) somewhere in this thread."""
    return store.item_exists(contacts, Gravity.ACTIVITY, parent=item.parent)


PARTICIPATION_RULES = (
    (NotificationType.THREAD_COMMENT, check_commented_thread),
    (NotificationType.DIRECT_COMMENT, check_direct_comment),
    (NotificationType.DIRECT_THREAD_COMMENT, check_direct_commented_thread),
    (NotificationType.COMMENT_PARTICIPATION, check_comment_participation),
    (NotificationType.ACTIVITY_PARTICIPATION, check_activity_participation),
)


def classify_participation(item: Item, contacts, store: Store) -> NotificationType:
    """Combine the flags of every participation rule that holds for *contacts*."""
    notification_type = NotificationType.NONE
    for flag, rule in PARTICIPATION_RULES:
        if rule(item, contacts, store):
            notification_type |= flag
    return notification_type
