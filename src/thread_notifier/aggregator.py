"""Notification pipeline: classify a stored item for every thread participant."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor

from thread_notifier.classifier import (
    check_shared,
    check_shared_by_contact,
    classify_participation,
)
from thread_notifier.config import Config
from thread_notifier.mentions import is_explicit_mention, is_implicit_mention
from thread_notifier.models import Item, NotificationType
from thread_notifier.profiles import ProfileContributor, resolve_profiles
from thread_notifier.store import Store

logger = logging.getLogger(__name__)


def set_notification(
    item_id: int,
    *,
    store: Store,
    config: Config,
    contributors: list[ProfileContributor] | tuple = (),
    executor: Executor | None = None,
) -> None:
    """Compute and store the notification type of an item for each thread user.

    Items authored on this node and unknown items are ignored. Users are
    evaluated concurrently on *executor*, or on a thread pool sized by
    ``config.max_workers`` when none is given. The first storage error raised
    by a worker is re-raised here.
    """
    item = store.get_item(item_id, origin=False)
    if item is None:
        logger.debug("Item %d not found or authored locally; nothing to do", item_id)
        return

    uids = store.thread_user_ids(item.parent)
    if not uids:
        return

    shared_by_contact = check_shared_by_contact(item, store)

    def _evaluate(pool: Executor) -> None:
        futures = [
            pool.submit(
                _notify_user,
                item,
                uid,
                store=store,
                config=config,
                contributors=contributors,
                shared_by_contact=shared_by_contact,
            )
            for uid in uids
        ]
        for future in futures:
            future.result()

    if executor is not None:
        _evaluate(executor)
        return

    with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
        _evaluate(pool)


def _notify_user(item: Item, uid: int, *, store: Store, **kwargs) -> NotificationType:
    # close the connection this worker thread opened for the task
    try:
        return set_notification_for_user(item, uid, store=store, **kwargs)
    finally:
        store.release()


def set_notification_for_user(
    item: Item,
    uid: int,
    *,
    store: Store,
    config: Config,
    contributors: list[ProfileContributor] | tuple = (),
    shared_by_contact: bool | None = None,
) -> NotificationType:
    """Compute the notification type of *item* for user *uid* and store it.

    Nothing is written when the thread is ignored, when the user authored the
    item or when no flag applies. Returns the computed notification type.
    """
    if store.is_thread_ignored(item.parent, uid):
        logger.debug("Thread %d ignored by user %d", item.parent, uid)
        return NotificationType.NONE

    notification_type = NotificationType.NONE

    if check_shared(item, uid, store, by_contact=shared_by_contact):
        notification_type |= NotificationType.SHARED

    profiles = resolve_profiles(store, uid, config.base_url, contributors)
    contacts = store.contact_ids_for_profiles(uid, profiles)

    # Don't create notifications for the user's own posts
    if item.author_id in contacts:
        logger.debug("Item %d authored by user %d; skipping", item.id, uid)
        return NotificationType.NONE

    if is_implicit_mention(item.tag, item.body, profiles):
        notification_type |= NotificationType.IMPLICIT_TAGGED

    if is_explicit_mention(item.tag, item.body, profiles):
        notification_type |= NotificationType.EXPLICIT_TAGGED

    notification_type |= classify_participation(item, contacts, store)

    if not notification_type:
        return notification_type

    logger.info(
        "Set notification: iid=%d uid=%d notification-type=%d",
        item.id,
        uid,
        notification_type,
    )
    store.upsert_notification(item.id, uid, notification_type)
    return notification_type
