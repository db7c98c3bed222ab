"""SQLite-backed item, contact and notification store."""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path

from thread_notifier.links import normalise_link
from thread_notifier.models import (
    Contact,
    ContactType,
    Gravity,
    Item,
    NotificationRecord,
    NotificationType,
    ThreadState,
    User,
)

logger = logging.getLogger(__name__)

MENTION_TAG = "mention"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS user (
    uid INTEGER PRIMARY KEY,
    nickname TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS contact (
    id INTEGER PRIMARY KEY,
    uid INTEGER NOT NULL DEFAULT 0,
    url TEXT NOT NULL,
    nurl TEXT NOT NULL,
    alias TEXT NOT NULL DEFAULT '',
    self INTEGER NOT NULL DEFAULT 0,
    notify_new_posts INTEGER NOT NULL DEFAULT 0,
    contact_type TEXT NOT NULL DEFAULT 'person'
);
CREATE INDEX IF NOT EXISTS idx_contact_uid_nurl ON contact(uid, nurl);

CREATE TABLE IF NOT EXISTS item (
    id INTEGER PRIMARY KEY,
    uid INTEGER NOT NULL DEFAULT 0,
    parent INTEGER NOT NULL,
    gravity TEXT NOT NULL,
    contact_id INTEGER NOT NULL,
    author_id INTEGER NOT NULL,
    uri TEXT NOT NULL DEFAULT '',
    thr_parent TEXT NOT NULL DEFAULT '',
    parent_uri TEXT NOT NULL DEFAULT '',
    tag TEXT NOT NULL DEFAULT '',
    body TEXT NOT NULL DEFAULT '',
    origin INTEGER NOT NULL DEFAULT 0,
    deleted INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_item_parent ON item(parent);
CREATE INDEX IF NOT EXISTS idx_item_uri_uid ON item(uri, uid);

CREATE TABLE IF NOT EXISTS thread (
    iid INTEGER NOT NULL,
    uid INTEGER NOT NULL,
    ignored INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (iid, uid)
);

CREATE TABLE IF NOT EXISTS tag (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    iid INTEGER NOT NULL,
    uid INTEGER NOT NULL,
    type TEXT NOT NULL,
    url TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_tag_iid ON tag(iid, type, uid);

CREATE TABLE IF NOT EXISTS user_item (
    iid INTEGER NOT NULL,
    uid INTEGER NOT NULL,
    notification_type INTEGER NOT NULL,
    PRIMARY KEY (iid, uid)
);
"""


def _placeholders(values) -> str:
    return ", ".join("?" for _ in values)


class Store:
    """Query surface over the conversation graph and the notification table.

    Each thread gets its own sqlite connection, so a store can be shared by
    the workers of a thread pool. Every write runs in its own transaction.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(exist_ok=True, parents=True)
        self._local = threading.local()
        self._connections: list[sqlite3.Connection] = []
        self._lock = threading.Lock()

    # -- connection handling -------------------------------------------------

    @property
    def conn(self) -> sqlite3.Connection:
        conn = getattr(self._local, "conn", None)
        if conn is None:
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            self._local.conn = conn
            with self._lock:
                self._connections.append(conn)
        return conn

    def init_schema(self) -> None:
        self.conn.executescript(_SCHEMA)
        self.conn.commit()

    def close(self) -> None:
        with self._lock:
            for conn in self._connections:
                conn.close()
            self._connections.clear()
        self._local = threading.local()

    def release(self) -> None:
        """Close the calling thread's connection, if it has one."""
        conn = getattr(self._local, "conn", None)
        if conn is None:
            return
        self._local.conn = None
        with self._lock:
            if conn in self._connections:
                self._connections.remove(conn)
        conn.close()

    # -- writes used for seeding the graph -----------------------------------

    def add_user(self, user: User) -> None:
        with self.conn:
            self.conn.execute(
                "INSERT INTO user (uid, nickname) VALUES (?, ?)",
                (user.uid, user.nickname),
            )

    def add_contact(self, contact: Contact) -> None:
        with self.conn:
            self.conn.execute(
                """
                INSERT INTO contact
                    (id, uid, url, nurl, alias, self, notify_new_posts, contact_type)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    contact.id,
                    contact.uid,
                    contact.url,
                    contact.nurl or normalise_link(contact.url),
                    contact.alias,
                    int(contact.is_self),
                    int(contact.notify_new_posts),
                    contact.contact_type.value,
                ),
            )

    def add_item(self, item: Item) -> None:
        with self.conn:
            self.conn.execute(
                """
                INSERT INTO item
                    (id, uid, parent, gravity, contact_id, author_id, uri,
                     thr_parent, parent_uri, tag, body, origin, deleted)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.id,
                    item.uid,
                    item.parent,
                    item.gravity.value,
                    item.contact_id,
                    item.author_id,
                    item.uri,
                    item.thr_parent,
                    item.parent_uri,
                    item.tag,
                    item.body,
                    int(item.origin),
                    int(item.deleted),
                ),
            )

    def add_tag(self, iid: int, uid: int, url: str, tag_type: str = MENTION_TAG) -> None:
        with self.conn:
            self.conn.execute(
                "INSERT INTO tag (iid, uid, type, url) VALUES (?, ?, ?, ?)",
                (iid, uid, tag_type, url),
            )

    def set_thread_ignored(self, iid: int, uid: int, ignored: bool = True) -> None:
        with self.conn:
            self.conn.execute(
                """
                INSERT INTO thread (iid, uid, ignored) VALUES (?, ?, ?)
                ON CONFLICT (iid, uid) DO UPDATE SET ignored = excluded.ignored
                """,
                (iid, uid, int(ignored)),
            )

    # -- reads ---------------------------------------------------------------

    def get_item(self, item_id: int, *, origin: bool | None = False) -> Item | None:
        """Fetch an item by id; ``origin=None`` disables the origin filter."""
        query = "SELECT * FROM item WHERE id = ?"
        params: list = [item_id]
        if origin is not None:
            query += " AND origin = ?"
            params.append(int(origin))
        row = self.conn.execute(query, params).fetchone()
        if row is None:
            return None
        return Item(
            id=row["id"],
            uid=row["uid"],
            parent=row["parent"],
            gravity=Gravity(row["gravity"]),
            contact_id=row["contact_id"],
            author_id=row["author_id"],
            uri=row["uri"],
            thr_parent=row["thr_parent"],
            parent_uri=row["parent_uri"],
            tag=row["tag"],
            body=row["body"],
            origin=bool(row["origin"]),
            deleted=bool(row["deleted"]),
        )

    def thread_user_ids(self, parent: int) -> list[int]:
        """Distinct local users whose contacts own an item in the thread."""
        cursor = self.conn.execute(
            """
            SELECT DISTINCT contact.uid FROM item
            INNER JOIN contact ON contact.id = item.contact_id AND contact.uid != 0
            WHERE item.parent = ?
            ORDER BY contact.uid
            """,
            (parent,),
        )
        return [row["uid"] for row in cursor.fetchall()]

    def get_thread_state(self, parent: int, uid: int) -> ThreadState | None:
        row = self.conn.execute(
            "SELECT iid, uid, ignored FROM thread WHERE iid = ? AND uid = ?", (parent, uid)
        ).fetchone()
        if row is None:
            return None
        return ThreadState(iid=row["iid"], uid=row["uid"], ignored=bool(row["ignored"]))

    def is_thread_ignored(self, parent: int, uid: int) -> bool:
        state = self.get_thread_state(parent, uid)
        return state is not None and state.ignored

    def get_user(self, uid: int) -> User | None:
        row = self.conn.execute(
            "SELECT uid, nickname FROM user WHERE uid = ?", (uid,)
        ).fetchone()
        if row is None:
            return None
        return User(uid=row["uid"], nickname=row["nickname"])

    def get_self_contact(self, uid: int) -> Contact | None:
        row = self.conn.execute(
            "SELECT * FROM contact WHERE self = 1 AND uid = ? LIMIT 1", (uid,)
        ).fetchone()
        if row is None:
            return None
        return Contact(
            id=row["id"],
            uid=row["uid"],
            url=row["url"],
            nurl=row["nurl"],
            alias=row["alias"],
            is_self=bool(row["self"]),
            notify_new_posts=bool(row["notify_new_posts"]),
            contact_type=ContactType(row["contact_type"]),
        )

    def contact_ids_for_profiles(self, uid: int, profiles) -> frozenset[int]:
        """Ids of public or *uid*-owned contacts whose nurl is one of *profiles*."""
        profiles = list(profiles)
        if not profiles:
            return frozenset()
        cursor = self.conn.execute(
            f"""
            SELECT id FROM contact
            WHERE uid IN (0, ?) AND nurl IN ({_placeholders(profiles)})
            """,
            [uid, *profiles],
        )
        return frozenset(row["id"] for row in cursor.fetchall())

    def contact_notifies_new_posts(self, contact_id: int) -> bool:
        row = self.conn.execute(
            "SELECT 1 FROM contact WHERE id = ? AND notify_new_posts = 1 LIMIT 1",
            (contact_id,),
        ).fetchone()
        return row is not None

    def community_notifies_new_posts(self, nurl: str, uid: int) -> bool:
        row = self.conn.execute(
            """
            SELECT 1 FROM contact
            WHERE nurl = ? AND uid = ? AND notify_new_posts = 1 AND contact_type = ?
            LIMIT 1
            """,
            (nurl, uid, ContactType.COMMUNITY.value),
        ).fetchone()
        return row is not None

    def mention_tag_urls(self, item_id: int, uid: int) -> list[str]:
        cursor = self.conn.execute(
            "SELECT url FROM tag WHERE iid = ? AND type = ? AND uid = ?",
            (item_id, MENTION_TAG, uid),
        )
        return [row["url"] for row in cursor.fetchall()]

    def item_exists(
        self,
        author_ids,
        gravity: Gravity,
        *,
        parent: int | None = None,
        uri: str | None = None,
        uid: int | None = None,
        deleted: bool = False,
    ) -> bool:
        """Return True if an item by one of *author_ids* matches the filter.

        Either *parent* (same thread) or *uri* (a specific item) selects the
        items to look at; *uid* narrows a uri match to one owner.
        """
        author_ids = list(author_ids)
        if not author_ids:
            return False
        if parent is None and uri is None:
            raise ValueError("item_exists needs a parent or a uri")

        conditions = [
            f"author_id IN ({_placeholders(author_ids)})",
            "gravity = ?",
            "deleted = ?",
        ]
        params: list = [*author_ids, gravity.value, int(deleted)]
        if parent is not None:
            conditions.append("parent = ?")
            params.append(parent)
        if uri is not None:
            conditions.append("uri = ?")
            params.append(uri)
        if uid is not None:
            conditions.append("uid = ?")
            params.append(uid)

        row = self.conn.execute(
            f"SELECT 1 FROM item WHERE {' AND '.join(conditions)} LIMIT 1", params
        ).fetchone()
        return row is not None

    # -- notification records ------------------------------------------------

    def upsert_notification(self, iid: int, uid: int, mask: NotificationType) -> None:
        with self.conn:
            self.conn.execute(
                """
                INSERT INTO user_item (iid, uid, notification_type) VALUES (?, ?, ?)
                ON CONFLICT (iid, uid) DO UPDATE
                SET notification_type = excluded.notification_type
                """,
                (iid, uid, int(mask)),
            )

    def get_notification(self, iid: int, uid: int) -> NotificationType | None:
        row = self.conn.execute(
            "SELECT notification_type FROM user_item WHERE iid = ? AND uid = ?",
            (iid, uid),
        ).fetchone()
        if row is None:
            return None
        return NotificationType(row["notification_type"])

    def notifications_for_item(self, iid: int) -> list[NotificationRecord]:
        cursor = self.conn.execute(
            "SELECT uid, notification_type FROM user_item WHERE iid = ? ORDER BY uid",
            (iid,),
        )
        return [
            NotificationRecord(
                iid=iid,
                uid=row["uid"],
                notification_type=NotificationType(row["notification_type"]),
            )
            for row in cursor
        ]
