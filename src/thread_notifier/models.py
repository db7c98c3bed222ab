"""Shared data structures used across all components."""

from dataclasses import dataclass
from enum import Enum, IntFlag


class Gravity(Enum):
    POST = "post"
    COMMENT = "comment"
    ACTIVITY = "activity"


class ContactType(Enum):
    PERSON = "person"
    ORGANISATION = "organisation"
    NEWS = "news"
    COMMUNITY = "community"


class NotificationType(IntFlag):
    """Reasons a user is notified about an item. Values are persisted as-is."""

    NONE = 0
    EXPLICIT_TAGGED = 1
    IMPLICIT_TAGGED = 2
    THREAD_COMMENT = 4
    DIRECT_COMMENT = 8
    COMMENT_PARTICIPATION = 16
    ACTIVITY_PARTICIPATION = 32
    DIRECT_THREAD_COMMENT = 64
    SHARED = 128


@dataclass(frozen=True)
class Item:
    id: int
    uid: int  # owning user, 0 for public items
    parent: int  # id of the thread root
    gravity: Gravity
    contact_id: int  # originating contact
    author_id: int  # public author contact
    uri: str = ""
    thr_parent: str = ""  # uri of the item this one replies to
    parent_uri: str = ""
    tag: str = ""  # mention markup
    body: str = ""
    origin: bool = False  # authored on this node
    deleted: bool = False


@dataclass(frozen=True)
class Contact:
    id: int
    uid: int
    url: str
    nurl: str = ""  # normalized url
    alias: str = ""
    is_self: bool = False
    notify_new_posts: bool = False
    contact_type: ContactType = ContactType.PERSON


@dataclass(frozen=True)
class User:
    uid: int
    nickname: str


@dataclass(frozen=True)
class ThreadState:
    iid: int  # thread root item id
    uid: int
    ignored: bool = False


@dataclass(frozen=True)
class NotificationRecord:
    iid: int
    uid: int
    notification_type: NotificationType
