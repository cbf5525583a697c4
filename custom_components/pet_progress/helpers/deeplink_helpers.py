# File: helpers/deeplink_helpers.py
"""Deep-link URL parsing for Pet Progress.

Widgets and shortcuts trigger actions with URLs such as
``petprogress://complete``. The action is the URL host; a path form
(``petprogress:///complete``) is accepted too.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from .. import const


def parse_deep_link(url: str) -> str | None:
    """Return the deep-link action named by ``url``, or None.

    Examples:
        parse_deep_link("petprogress://complete") → "complete"
        parse_deep_link("petprogress:///next") → "next"
        parse_deep_link("petprogress://feed") → None
        parse_deep_link("https://complete") → None
    """
    parts = urlsplit((url or "").strip())
    if parts.scheme.lower() != const.DEEP_LINK_SCHEME:
        const.LOGGER.debug("DEBUG: Ignoring deep link with scheme '%s'", parts.scheme)
        return None

    candidate = (parts.hostname or parts.path.strip("/").split("/", 1)[0]).lower()
    if candidate in const.DEEP_LINK_ACTIONS:
        return candidate

    const.LOGGER.debug("DEBUG: Unknown deep link action in '%s'", url)
    return None
