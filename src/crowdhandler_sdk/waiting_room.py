from __future__ import annotations

import json
from collections.abc import Callable
from urllib.parse import quote, urlencode

from loguru import logger

from crowdhandler_sdk.session import RequestSession

WAITING_ROOM_BASE_URL = "https://wait.crowdhandler.com"
DEFAULT_WAITING_ROOM_MODE = "python"


def waiting_room_url(slug: str, token: str | None, mode: str = DEFAULT_WAITING_ROOM_MODE) -> str:
    query = urlencode({"ch-id": token or "", "ch_mode": mode})
    return f"{WAITING_ROOM_BASE_URL}/{quote(slug, safe='')}?{query}"


class WaitingRoomBridge:
    """Receives the hosted waiting room's promotion message for one session.

    The host loads ``url`` in its browser surface and forwards each message
    from the page to ``handle_message``. On ``{"promoted": 1}`` the session
    token is refreshed (when the page supplies one), ``on_promoted`` is told
    the new token and ``on_dismiss`` asks the host to close the surface.
    """

    def __init__(
        self,
        session: RequestSession,
        slug: str,
        *,
        on_promoted: Callable[[str | None], None] | None = None,
        on_dismiss: Callable[[], None] | None = None,
        mode: str = DEFAULT_WAITING_ROOM_MODE,
    ):
        self._session = session
        self._slug = slug
        self._on_promoted = on_promoted
        self._on_dismiss = on_dismiss
        self._mode = mode
        self._promoted = False

    @property
    def url(self) -> str:
        return waiting_room_url(self._slug, self._session.token, self._mode)

    @property
    def promoted(self) -> bool:
        return self._promoted

    def handle_message(self, raw: str) -> bool:
        """Return True when the message promoted the visitor."""
        logger.debug(f"CrowdHandler waiting room message: {raw}")
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as ex:
            logger.warning(f"Error parsing waiting room message: {ex}")
            return False

        if not isinstance(data, dict):
            logger.warning(f"Ignoring waiting room message that is not an object: {raw}")
            return False

        promoted = data.get("promoted")
        # 1 only as an int; True and 1.0 compare equal to 1
        if type(promoted) is not int or promoted != 1:
            return False

        new_token = data.get("token")
        if new_token is not None and not isinstance(new_token, str):
            logger.warning(f"Ignoring non-string token in waiting room message: {new_token!r}")
            new_token = None
        if new_token is not None:
            self._session.update_token(new_token)

        self._promoted = True
        if self._on_promoted is not None:
            self._on_promoted(new_token)
        if self._on_dismiss is not None:
            self._on_dismiss()
        return True
