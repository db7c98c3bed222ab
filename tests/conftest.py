"""Shared fixtures: a temporary store seeded with a small social graph."""

from types import SimpleNamespace

import pytest

from thread_notifier.config import Config
from thread_notifier.models import Contact, ContactType, User
from thread_notifier.store import Store

BASE_URL = "https://node.example"


@pytest.fixture
def store(tmp_path):
    store = Store(tmp_path / "notifier.db")
    store.init_schema()
    yield store
    store.close()


@pytest.fixture
def config():
    return Config(base_url=BASE_URL, max_workers=2)


@pytest.fixture
def graph(store):
    """Two local users (alice=1, bob=2) who both follow a remote user carol.

    Contact ids:
      11 / 12   self contacts of alice / bob
      101 / 102 public contacts of alice / bob
      103       public contact of carol
      21 / 22   carol as seen by alice / bob
      31        bob as seen by alice
      23        dave as seen by bob, with new-post notifications
      104       public contact of dave
      24        a community followed by bob, with new-post notifications
    """
    store.add_user(User(uid=1, nickname="alice"))
    store.add_user(User(uid=2, nickname="bob"))

    contacts = [
        Contact(id=11, uid=1, url=f"{BASE_URL}/profile/alice", is_self=True),
        Contact(id=12, uid=2, url=f"{BASE_URL}/profile/bob", is_self=True),
        Contact(id=101, uid=0, url=f"{BASE_URL}/profile/alice"),
        Contact(id=102, uid=0, url=f"{BASE_URL}/profile/bob"),
        Contact(id=103, uid=0, url="https://remote.example/profile/carol"),
        Contact(id=21, uid=1, url="https://remote.example/profile/carol"),
        Contact(id=22, uid=2, url="https://remote.example/profile/carol"),
        Contact(id=31, uid=1, url=f"{BASE_URL}/profile/bob"),
        Contact(
            id=23,
            uid=2,
            url="https://remote.example/profile/dave",
            notify_new_posts=True,
        ),
        Contact(id=104, uid=0, url="https://remote.example/profile/dave"),
        Contact(
            id=24,
            uid=2,
            url="https://forum.example/profile/hikers",
            notify_new_posts=True,
            contact_type=ContactType.COMMUNITY,
        ),
    ]
    for contact in contacts:
        store.add_contact(contact)

    return SimpleNamespace(
        store=store,
        alice=1,
        bob=2,
        alice_self=11,
        bob_self=12,
        alice_public=101,
        bob_public=102,
        carol_public=103,
        carol_for_alice=21,
        carol_for_bob=22,
        bob_for_alice=31,
        dave_for_bob=23,
        dave_public=104,
        hikers_for_bob=24,
    )
