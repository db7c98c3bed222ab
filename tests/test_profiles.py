"""Tests for profile URL resolution."""

from thread_notifier.links import normalise_link
from thread_notifier.models import Contact, User
from thread_notifier.profiles import resolve_profiles

BASE_URL = "https://node.example"


class RecordingContributor:
    def __init__(self, *urls):
        self.urls = urls
        self.calls = []

    def contribute(self, uid, profiles):
        self.calls.append(uid)
        profiles.extend(self.urls)


class TestResolveProfiles:
    def test_self_contact_and_nickname_forms(self, graph):
        profiles = resolve_profiles(graph.store, graph.alice, BASE_URL)
        assert profiles == {
            "https://node.example/profile/alice",
            "http://node.example/profile/alice",
            "https://node.example/u/alice",
            "http://node.example/u/alice",
        }

    def test_alias_included(self, store):
        store.add_user(User(uid=5, nickname="erin"))
        store.add_contact(
            Contact(
                id=50,
                uid=5,
                url="https://node.example/profile/erin",
                alias="http://www.Old.Example/~erin/",
                is_self=True,
            )
        )
        profiles = resolve_profiles(store, 5, BASE_URL)
        assert "http://www.Old.Example/~erin/" in profiles
        assert "http://old.example/~erin" in profiles
        assert "https://old.example/~erin" in profiles

    def test_empty_alias_dropped(self, graph):
        profiles = resolve_profiles(graph.store, graph.alice, BASE_URL)
        assert "" not in profiles

    def test_base_url_trailing_slash(self, graph):
        profiles = resolve_profiles(graph.store, graph.alice, BASE_URL + "/")
        assert "https://node.example/u/alice" in profiles

    def test_contributed_profiles(self, graph):
        contributor = RecordingContributor("https://mirror.example/people/alice")
        profiles = resolve_profiles(graph.store, graph.alice, BASE_URL, [contributor])
        assert contributor.calls == [graph.alice]
        assert "https://mirror.example/people/alice" in profiles
        assert "http://mirror.example/people/alice" in profiles

    def test_malformed_contributed_profiles_dropped(self, graph):
        contributor = RecordingContributor("not a url", "https://nopath.example", "")
        profiles = resolve_profiles(graph.store, graph.alice, BASE_URL, [contributor])
        assert "not a url" not in profiles
        assert "https://nopath.example" not in profiles
        assert len(profiles) == 4

    def test_unknown_user(self, graph):
        contributor = RecordingContributor("https://mirror.example/people/ghost")
        assert resolve_profiles(graph.store, 99, BASE_URL, [contributor]) == frozenset()
        assert contributor.calls == [99]

    def test_user_without_self_contact(self, store):
        store.add_user(User(uid=7, nickname="frank"))
        assert resolve_profiles(store, 7, BASE_URL) == frozenset()

    def test_normalized_forms_are_stable(self, graph):
        profiles = resolve_profiles(graph.store, graph.alice, BASE_URL)
        for profile in profiles:
            assert normalise_link(normalise_link(profile)) == normalise_link(profile)
