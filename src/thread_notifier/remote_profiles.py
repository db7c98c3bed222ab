"""Profile contributor that asks a remote endpoint for additional profiles."""

import logging

import requests

logger = logging.getLogger(__name__)


class RemoteProfileContributor:
    """Fetch extra profile URLs for a user from ``GET <endpoint>?uid=<uid>``.

    The endpoint answers with ``{"profiles": ["https://...", ...]}``. Any
    communication or payload failure contributes nothing so that resolution
    continues with the locally known profiles.
    """

    def __init__(self, endpoint: str, timeout: float = 3) -> None:
        self.endpoint = endpoint
        self.timeout = timeout

    def contribute(self, uid: int, profiles: list[str]) -> None:
        try:
            resp = requests.get(
                self.endpoint, params={"uid": uid}, timeout=self.timeout
            )
            resp.raise_for_status()
            extra = resp.json()["profiles"]
            if not isinstance(extra, list):
                raise TypeError(f"profiles must be a list, got {type(extra).__name__}")
        except requests.RequestException as exc:
            logger.warning("Profile endpoint unavailable for uid %d: %s", uid, exc)
            return
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Unexpected profile endpoint response for uid %d: %s", uid, exc)
            return

        profiles.extend(str(p) for p in extra if isinstance(p, str))
