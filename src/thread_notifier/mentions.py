"""Mention detection in item tag and body markup.

A profile is referenced by mention markup when ``=<profile>]`` occurs in the
tag or body, e.g. ``@[url=https://example.org/u/alice]alice[/url]``. Whether
the mention is explicit depends on the body also carrying the profile URL as
plain text, outside of any markup reference.
"""


def _marker(profile: str) -> str:
    return f"={profile}]"


def _tagged(tag: str, body: str, profile: str) -> bool:
    marker = _marker(profile)
    return marker in tag or marker in body


def _in_plain_text(body: str, profile: str) -> bool:
    return profile in body.replace(_marker(profile), "")


def is_implicit_mention(tag: str, body: str, profiles) -> bool:
    """Markup references one of *profiles* that the body never spells out."""
    for profile in profiles:
        if _tagged(tag, body, profile):
            if not _in_plain_text(body, profile):
                return True
    return False


def is_explicit_mention(tag: str, body: str, profiles) -> bool:
    """Markup references one of *profiles* that also appears as plain text."""
    for profile in profiles:
        if _tagged(tag, body, profile):
            if _in_plain_text(body, profile):
                return True
    return False
